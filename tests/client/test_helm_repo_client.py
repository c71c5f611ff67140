# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""Tests for the client of Helm chart repositories."""

import base64
import os
from pathlib import Path

import pytest
import yaml
from pytest_httpserver import HTTPServer

from chartsyncer.client.helm_repo_client import HelmRepoClient
from chartsyncer.config.defaults import defaults, load_defaults
from chartsyncer.errors import ChartNotFoundError, ChartTransportError, ConfigurationError
from chartsyncer.repo.repo import Auth, Repo, RepoKind


@pytest.fixture(name="index")
def index_fixture(httpserver: HTTPServer) -> dict:
    """Create the index of the mocked chart repository."""
    return {
        "apiVersion": "v1",
        "entries": {
            "etcd": [
                {"name": "etcd", "version": "1.2.4", "urls": ["etcd-1.2.4.tgz"]},
                {"name": "etcd", "version": "1.2.3", "urls": ["etcd-1.2.3.tgz"]},
            ],
            "redis": [{"name": "redis", "version": "10.0.0", "urls": [httpserver.url_for("/archives/redis.tgz")]}],
            "broken": [{"name": "broken", "version": "1.0.0", "urls": []}],
        },
    }


@pytest.fixture(name="helm_client")
def helm_client_fixture(httpserver: HTTPServer, tmp_path: Path, index: dict) -> HelmRepoClient:
    """Create a client of the mocked chart repository."""
    httpserver.expect_request("/charts/index.yaml").respond_with_data(yaml.safe_dump(index))
    client = HelmRepoClient(Repo(httpserver.url_for("/charts"), RepoKind.CHARTMUSEUM), str(tmp_path / "cache"))
    client.load_defaults()
    return client


def test_fetch_relative_url(httpserver: HTTPServer, helm_client: HelmRepoClient, tmp_path: Path) -> None:
    """Test downloading a chart whose URL is relative to the repository."""
    httpserver.expect_request("/charts/etcd-1.2.3.tgz").respond_with_data(b"etcd archive")

    archive_path = helm_client.fetch("etcd", "1.2.3")

    assert archive_path == str(tmp_path / "cache" / "etcd-1.2.3.tgz")
    assert Path(archive_path).read_bytes() == b"etcd archive"
    assert os.listdir(tmp_path / "cache") == ["etcd-1.2.3.tgz"]


def test_fetch_absolute_url(httpserver: HTTPServer, helm_client: HelmRepoClient) -> None:
    """Test downloading a chart whose URL is absolute."""
    httpserver.expect_request("/archives/redis.tgz").respond_with_data(b"redis archive")
    assert Path(helm_client.fetch("redis", "10.0.0")).read_bytes() == b"redis archive"


def test_fetch_uses_cache(httpserver: HTTPServer, helm_client: HelmRepoClient) -> None:
    """Test that a chart is downloaded only once."""
    httpserver.expect_request("/charts/etcd-1.2.3.tgz").respond_with_data(b"etcd archive")
    first = helm_client.fetch("etcd", "1.2.3")

    httpserver.clear()
    assert helm_client.fetch("etcd", "1.2.3") == first


@pytest.mark.parametrize(
    ("name", "version"),
    [
        pytest.param("etcd", "9.9.9", id="Unknown version"),
        pytest.param("mongodb", "1.0.0", id="Unknown chart"),
        pytest.param("broken", "1.0.0", id="No URL"),
    ],
)
def test_fetch_not_found(helm_client: HelmRepoClient, name: str, version: str) -> None:
    """Test fetching charts that are not available."""
    with pytest.raises(ChartNotFoundError):
        helm_client.fetch(name, version)


def test_fetch_download_failure(httpserver: HTTPServer, helm_client: HelmRepoClient, tmp_path: Path) -> None:
    """Test that a failed download raises a ChartTransportError and leaves no file behind."""
    httpserver.expect_request("/charts/etcd-1.2.3.tgz").respond_with_data("Not found", status=404)
    with pytest.raises(ChartTransportError):
        helm_client.fetch("etcd", "1.2.3")
    assert not (tmp_path / "cache").exists() or not os.listdir(tmp_path / "cache")


@pytest.mark.parametrize(
    "content",
    [
        pytest.param("entries: [etcd", id="Invalid yaml"),
        pytest.param("- etcd", id="Not a mapping"),
    ],
)
def test_malformed_index(httpserver: HTTPServer, tmp_path: Path, content: str) -> None:
    """Test that a malformed index raises a ChartTransportError."""
    httpserver.expect_request("/index.yaml").respond_with_data(content)
    client = HelmRepoClient(Repo(httpserver.url_for("/")), str(tmp_path))
    with pytest.raises(ChartTransportError):
        client.get_index()


def test_missing_index(httpserver: HTTPServer, tmp_path: Path) -> None:
    """Test that a missing index raises a ChartTransportError."""
    httpserver.expect_request("/index.yaml").respond_with_data("Not found", status=404)
    client = HelmRepoClient(Repo(httpserver.url_for("/")), str(tmp_path))
    with pytest.raises(ChartTransportError):
        client.fetch("etcd", "1.2.3")


def test_basic_auth(httpserver: HTTPServer, tmp_path: Path) -> None:
    """Test that the credentials of the repository are sent."""
    token = base64.b64encode(b"user:secret").decode()
    httpserver.expect_request("/index.yaml", headers={"Authorization": f"Basic {token}"}).respond_with_data(
        "apiVersion: v1\nentries: {}\n"
    )
    client = HelmRepoClient(Repo(httpserver.url_for("/"), auth=Auth("user", "secret")), str(tmp_path))
    assert client.get_index() == {"apiVersion": "v1", "entries": {}}


def test_load_defaults(tmp_path: Path) -> None:
    """Test loading the configuration of the client."""
    config_path = os.path.join(tmp_path, "test_config.ini")
    with open(config_path, mode="w", encoding="utf-8") as config_file:
        config_file.write("[client.helm]\nindex_file = index.json\ndownload_timeout = 30\n")
    load_defaults(config_path)

    client = HelmRepoClient(Repo("https://charts.example.com"), str(tmp_path))
    client.load_defaults()

    assert client.index_file == "index.json"
    assert client.download_timeout == 30
    assert client.request_timeout == 10


@pytest.mark.parametrize(
    "config",
    [
        """
            [client.helm]
            index_file =
            """,
        """
            [client.helm]
            download_timeout = foo
            """,
        """
            [requests]
            timeout = 0
            """,
    ],
)
def test_helm_client_invalid_config(tmp_path: Path, config: str) -> None:
    """Test loading invalid client configuration."""
    config_path = os.path.join(tmp_path, "test_config.ini")
    with open(config_path, mode="w", encoding="utf-8") as config_file:
        config_file.write(config)
    load_defaults(config_path)
    with pytest.raises(ConfigurationError):
        HelmRepoClient(Repo("https://charts.example.com"), str(tmp_path)).load_defaults()


@pytest.mark.parametrize(
    "content",
    [
        pytest.param('entries: {etcd: ["1.2.3"]}', id="Version is not a mapping"),
        pytest.param("entries: {etcd: {version: 1.2.3}}", id="Versions are not a list"),
        pytest.param("entries: [etcd]", id="Entries are not a mapping"),
        pytest.param('entries: {etcd: [{version: "1.2.3", urls: etcd-1.2.3.tgz}]}', id="URLs are not a list"),
    ],
)
def test_malformed_index_entries(httpserver: HTTPServer, tmp_path: Path, content: str) -> None:
    """Test that index entries of unexpected types raise a ChartTransportError."""
    httpserver.expect_request("/index.yaml").respond_with_data(content)
    client = HelmRepoClient(Repo(httpserver.url_for("/")), str(tmp_path))
    with pytest.raises(ChartTransportError):
        client.fetch("etcd", "1.2.3")


def test_fetch_configured_extension(httpserver: HTTPServer, helm_client: HelmRepoClient, tmp_path: Path) -> None:
    """Test that cached archives are named with the configured archive extension."""
    defaults.set("dependencies", "archive_extension", "tar.gz")
    httpserver.expect_request("/charts/etcd-1.2.3.tgz").respond_with_data(b"etcd archive")

    assert helm_client.fetch("etcd", "1.2.3") == str(tmp_path / "cache" / "etcd-1.2.3.tar.gz")
