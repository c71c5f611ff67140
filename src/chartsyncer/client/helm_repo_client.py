# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the client of chart repositories serving a Helm ``index.yaml`` file.

This covers classic Helm chart repositories, ChartMuseum servers and Harbor chart repositories.
For more details on the repository layout, see: https://helm.sh/docs/topics/chart_repository/.
"""

import logging
import os
import tempfile
import threading
from urllib.parse import urljoin

import requests
import yaml

from chartsyncer.client.chart_client import ChartsReader
from chartsyncer.config.defaults import defaults
from chartsyncer.errors import ChartNotFoundError, ChartTransportError, ConfigurationError
from chartsyncer.repo.repo import Repo
from chartsyncer.util import download_file, send_get_http_raw

logger: logging.Logger = logging.getLogger(__name__)


class HelmRepoClient(ChartsReader):
    """A chart repository serving an ``index.yaml`` file."""

    def __init__(
        self,
        repo: Repo,
        cache_dir: str,
        index_file: str | None = None,
        request_timeout: int | None = None,
        download_timeout: int | None = None,
    ) -> None:
        """
        Instantiate a HelmRepoClient object.

        Parameters
        ----------
        repo : Repo
            The chart repository.
        cache_dir : str
            The directory where downloaded chart archives are stored.
        index_file : str | None
            The name of the index file of the repository.
        request_timeout : int | None
            The timeout (in seconds) for requesting the index file.
        download_timeout : int | None
            The timeout (in seconds) for downloading chart archives.
        """
        super().__init__(repo)
        self.cache_dir = cache_dir
        self.index_file = index_file or "index.yaml"
        self.request_timeout = request_timeout or 10
        self.download_timeout = download_timeout or 120
        self._index: dict | None = None
        self._index_lock = threading.Lock()

    def load_defaults(self) -> None:
        """Load the .ini configuration for the current client.

        Raises
        ------
        ConfigurationError
            If there is a schema violation in the ``client.helm`` section.
        """
        self.request_timeout = defaults.get_positive_int("requests", "timeout", fallback=self.request_timeout)

        section_name = "client.helm"
        if not defaults.has_section(section_name):
            return
        section = defaults[section_name]

        self.index_file = section.get("index_file", self.index_file)
        if not self.index_file:
            raise ConfigurationError(
                f'The "index_file" key is empty in section [{section_name}] of the .ini configuration file.'
            )
        self.download_timeout = defaults.get_positive_int(section_name, "download_timeout", self.download_timeout)

    @property
    def auth(self) -> tuple[str, str] | None:
        """Get the basic authentication credentials of the repository, if any."""
        if not self.repo.auth:
            return None
        return (self.repo.auth.username, self.repo.auth.password)

    def construct_url(self, path: str) -> str:
        """Resolve ``path`` against the URL of the repository.

        Absolute URLs are returned as is.

        >>> HelmRepoClient(Repo("https://charts.example.com/stable"), "").construct_url("etcd-1.0.0.tgz")
        'https://charts.example.com/stable/etcd-1.0.0.tgz'
        """
        return urljoin(self.repo.url.rstrip("/") + "/", path)

    def get_index(self) -> dict:
        """Return the index of the repository, downloading it on first use.

        Raises
        ------
        ChartTransportError
            If the index cannot be downloaded or parsed.
        """
        with self._index_lock:
            if self._index is None:
                self._index = self._download_index()
            return self._index

    def _download_index(self) -> dict:
        index_url = self.construct_url(self.index_file)
        response = send_get_http_raw(index_url, timeout=self.request_timeout, auth=self.auth)
        if response is None or response.status_code != 200:
            status = "no response" if response is None else f"status code {response.status_code}"
            raise ChartTransportError(f"Failed to retrieve the index of {self.repo.url}: {status}.")

        try:
            index = yaml.safe_load(response.text)
        except yaml.YAMLError as error:
            raise ChartTransportError(f"Failed to parse the index of {self.repo.url}: {error}") from error

        if not isinstance(index, dict):
            raise ChartTransportError(f"The index of {self.repo.url} is not a mapping.")
        logger.debug("Loaded the index of %s.", self.repo.url)
        return index

    def find_chart_url(self, name: str, version: str) -> str:
        """Return the download URL of a chart version listed in the index.

        Raises
        ------
        ChartNotFoundError
            If the chart version is not listed or has no URL.
        ChartTransportError
            If the index is not in the chart repository index format.
        """
        entries = self.get_index().get("entries") or {}
        if not isinstance(entries, dict):
            raise ChartTransportError(f"The entries of the index of {self.repo.url} are not a mapping.")
        chart_versions = entries.get(name) or []
        if not isinstance(chart_versions, list) or not all(isinstance(entry, dict) for entry in chart_versions):
            raise ChartTransportError(f"The index of {self.repo.url} lists chart {name} in an invalid format.")

        for chart_version in chart_versions:
            if str(chart_version.get("version")) != version:
                continue
            urls = chart_version.get("urls") or []
            if not isinstance(urls, list):
                raise ChartTransportError(f"The index of {self.repo.url} lists invalid URLs for {name} {version}.")
            if not urls:
                raise ChartNotFoundError(f"Chart {name} {version} has no download URL in {self.repo.url}.")
            return self.construct_url(urls[0])

        raise ChartNotFoundError(f"Chart {name} {version} not found in {self.repo.url}.")

    def fetch(self, name: str, version: str) -> str:
        extension = defaults.get("dependencies", "archive_extension", fallback="tgz")
        dest = os.path.join(self.cache_dir, f"{name}-{version}.{extension}")
        if os.path.isfile(dest):
            logger.debug("Using cached chart %s.", dest)
            return dest

        chart_url = self.find_chart_url(name, version)
        response = send_get_http_raw(chart_url, timeout=self.download_timeout, auth=self.auth, stream=True)
        if response is None or response.status_code != 200:
            status = "no response" if response is None else f"status code {response.status_code}"
            raise ChartTransportError(f"Failed to download {chart_url}: {status}.")

        # Concurrent fetches must never see a partial archive.
        os.makedirs(self.cache_dir, exist_ok=True)
        temp_fd, temp_path = tempfile.mkstemp(dir=self.cache_dir, suffix=".part")
        os.close(temp_fd)
        try:
            download_file(response, temp_path)
            os.replace(temp_path, dest)
        except (requests.exceptions.RequestException, OSError) as error:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise ChartTransportError(f"Failed to download {chart_url}: {error}") from error

        logger.info("Downloaded %s %s from %s.", name, version, self.repo.url)
        return dest
