# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the client of OCI registries hosting Helm charts.

Charts are stored as OCI artifacts whose manifest references a single layer with the
chart archive. See: https://helm.sh/docs/topics/registries/ and
https://github.com/opencontainers/distribution-spec/blob/main/spec.md.
"""

import hashlib
import logging
import os
import re
import tempfile

import requests
from requests.models import Response

from chartsyncer.client.chart_client import ChartsReader
from chartsyncer.config.defaults import defaults
from chartsyncer.errors import ChartNotFoundError, ChartTransportError
from chartsyncer.repo.repo import Repo
from chartsyncer.util import download_file, send_get_http_raw

logger: logging.Logger = logging.getLogger(__name__)

_CHALLENGE_PARAM = re.compile(r'(\w+)="([^"]*)"')


class OCIRegistryClient(ChartsReader):
    """A chart repository hosted in an OCI registry.

    The repository URL is ``<scheme>://<registry>/<namespace>``. The ``http`` scheme is
    used as is; any other scheme, including ``oci``, is accessed over ``https``.
    """

    def __init__(
        self,
        repo: Repo,
        cache_dir: str,
        request_timeout: int | None = None,
        download_timeout: int | None = None,
    ) -> None:
        super().__init__(repo)
        self.cache_dir = cache_dir
        self.request_timeout = request_timeout or 10
        self.download_timeout = download_timeout or 120
        self.manifest_media_type = "application/vnd.oci.image.manifest.v1+json"
        self.chart_media_type = "application/vnd.cncf.helm.chart.content.v1.tar+gzip"

        scheme, separator, location = repo.url.partition("://")
        if not separator:
            scheme, location = "https", repo.url
        self.scheme = "http" if scheme == "http" else "https"
        self.registry, _, self.namespace = location.strip("/").partition("/")

    def load_defaults(self) -> None:
        """Load the .ini configuration for the current client.

        Raises
        ------
        ConfigurationError
            If a timeout in the configuration is invalid.
        """
        self.request_timeout = defaults.get_positive_int("requests", "timeout", fallback=self.request_timeout)

        section_name = "client.oci"
        if not defaults.has_section(section_name):
            return
        section = defaults[section_name]
        self.manifest_media_type = section.get("manifest_media_type", self.manifest_media_type)
        self.chart_media_type = section.get("chart_media_type", self.chart_media_type)
        self.download_timeout = defaults.get_positive_int(section_name, "download_timeout", self.download_timeout)

    def construct_api_url(self, name: str, resource: str, reference: str) -> str:
        """Construct a URL of the registry API.

        >>> OCIRegistryClient(Repo("oci://registry.io/charts"), "").construct_api_url("etcd", "manifests", "1.0.0")
        'https://registry.io/v2/charts/etcd/manifests/1.0.0'
        """
        repository = "/".join(part for part in (self.namespace, name) if part)
        return f"{self.scheme}://{self.registry}/v2/{repository}/{resource}/{reference}"

    def _request(self, url: str, headers: dict, timeout: int, stream: bool = False) -> Response:
        """Send a GET request, answering a Bearer token challenge if the registry sends one."""
        auth = (self.repo.auth.username, self.repo.auth.password) if self.repo.auth else None
        response = send_get_http_raw(url, headers=headers, timeout=timeout, auth=auth, stream=stream)
        if response is not None and response.status_code == 401:
            token = self._get_token(response.headers.get("WWW-Authenticate", ""), auth)
            if token:
                headers = {**headers, "Authorization": f"Bearer {token}"}
                response = send_get_http_raw(url, headers=headers, timeout=timeout, stream=stream)

        if response is None:
            raise ChartTransportError(f"No response from {url}.")
        return response

    def _get_token(self, challenge: str, auth: tuple[str, str] | None) -> str | None:
        scheme, _, params = challenge.partition(" ")
        if scheme.lower() != "bearer":
            return None
        fields = dict(_CHALLENGE_PARAM.findall(params))
        realm = fields.pop("realm", "")
        if not realm:
            return None

        query = "&".join(f"{key}={value}" for key, value in fields.items())
        response = send_get_http_raw(f"{realm}?{query}" if query else realm, timeout=self.request_timeout, auth=auth)
        if response is None or response.status_code != 200:
            logger.debug("Failed to obtain a token from %s.", realm)
            return None
        try:
            payload = response.json()
        except ValueError:
            return None
        if not isinstance(payload, dict):
            return None
        token = payload.get("token") or payload.get("access_token")
        return token if isinstance(token, str) else None

    def find_chart_layer(self, name: str, version: str) -> str:
        """Return the digest of the layer holding the chart archive.

        Raises
        ------
        ChartNotFoundError
            If the manifest does not exist or has no chart layer.
        ChartTransportError
            If the registry answers unexpectedly.
        """
        url = self.construct_api_url(name, "manifests", version)
        response = self._request(url, {"Accept": self.manifest_media_type}, self.request_timeout)
        if response.status_code == 404:
            raise ChartNotFoundError(f"Chart {name} {version} not found in {self.repo.url}.")
        if response.status_code != 200:
            raise ChartTransportError(f"Failed to retrieve {url}: status code {response.status_code}.")

        try:
            manifest = response.json()
        except ValueError as error:
            raise ChartTransportError(f"Invalid manifest returned by {url}: {error}") from error

        if not isinstance(manifest, dict):
            raise ChartTransportError(f"Invalid manifest returned by {url}: expected a mapping.")
        layers = manifest.get("layers") or []
        if not isinstance(layers, list) or not all(isinstance(layer, dict) for layer in layers):
            raise ChartTransportError(f"Invalid manifest returned by {url}: expected a list of layers.")

        for layer in layers:
            if layer.get("mediaType") == self.chart_media_type and layer.get("digest"):
                return str(layer["digest"])
        raise ChartNotFoundError(f"The manifest of chart {name} {version} has no {self.chart_media_type} layer.")

    def fetch(self, name: str, version: str) -> str:
        extension = defaults.get("dependencies", "archive_extension", fallback="tgz")
        dest = os.path.join(self.cache_dir, f"{name}-{version}.{extension}")
        if os.path.isfile(dest):
            logger.debug("Using cached chart %s.", dest)
            return dest

        digest = self.find_chart_layer(name, version)
        url = self.construct_api_url(name, "blobs", digest)
        response = self._request(url, {}, self.download_timeout, stream=True)
        if response.status_code != 200:
            raise ChartTransportError(f"Failed to download {url}: status code {response.status_code}.")

        os.makedirs(self.cache_dir, exist_ok=True)
        temp_fd, temp_path = tempfile.mkstemp(dir=self.cache_dir, suffix=".part")
        os.close(temp_fd)
        try:
            download_file(response, temp_path)
            _verify_digest(temp_path, digest)
            os.replace(temp_path, dest)
        except (requests.exceptions.RequestException, OSError, ChartTransportError) as error:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            if isinstance(error, ChartTransportError):
                raise
            raise ChartTransportError(f"Failed to download {url}: {error}") from error

        logger.info("Downloaded %s %s from %s.", name, version, self.repo.url)
        return dest


def _verify_digest(path: str, digest: str) -> None:
    algorithm, _, expected = digest.partition(":")
    if algorithm != "sha256":
        logger.debug("Skipping the verification of the %s digest of %s.", algorithm, path)
        return

    sha256 = hashlib.sha256()
    with open(path, "rb") as file:
        for chunk in iter(lambda: file.read(8192), b""):
            sha256.update(chunk)
    if sha256.hexdigest() != expected:
        raise ChartTransportError(f"Digest mismatch for {path}: expected {expected}, got {sha256.hexdigest()}.")
