# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""Fixtures for tests."""

import os
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
import yaml

from chartsyncer.chart.context import SyncContext
from chartsyncer.client.chart_client import ChartsReader
from chartsyncer.config.defaults import defaults, load_defaults
from chartsyncer.errors import ChartNotFoundError
from chartsyncer.repo.repo import Repo, RepoKind
from chartsyncer.repo.trust import get_repo_location_id

# We need to pass fixture names as arguments to maintain an order.
# pylint: disable=redefined-outer-name

SOURCE_URL = "https://source.example.com/charts"
TARGET_URL = "https://target.example.com/charts"
TRUSTED_URL = "https://trusted.example.com/charts"
OTHER_URL = "https://other.example.com/charts"


class FakeChartsClient(ChartsReader):
    """A client serving chart archives created on demand, recording the charts it fetched."""

    def __init__(self, repo: Repo, archive_dir: Path, failing: dict[str, Exception] | None = None) -> None:
        super().__init__(repo)
        self.archive_dir = archive_dir
        self.failing = failing or {}
        self.fetched: list[str] = []

    def fetch(self, name: str, version: str) -> str:
        dep_id = f"{name}-{version}"
        self.fetched.append(dep_id)
        if dep_id in self.failing:
            raise self.failing[dep_id]
        if name == "missing":
            raise ChartNotFoundError(f"Chart {name} {version} not found.")
        self.archive_dir.mkdir(parents=True, exist_ok=True)
        archive_path = self.archive_dir / f"{dep_id}.tgz"
        archive_path.write_bytes(f"{self.repo.url}/{dep_id}".encode())
        return str(archive_path)


@pytest.fixture(autouse=True)
def setup_test() -> Iterator[None]:
    """Load the default values from ``defaults.ini`` before each test and clear them afterwards."""
    load_defaults("")
    yield
    defaults.clear()


@pytest.fixture()
def source_repo() -> Repo:
    """Return the source repository."""
    return Repo(SOURCE_URL, RepoKind.HELM)


@pytest.fixture()
def target_repo() -> Repo:
    """Return the target repository."""
    return Repo(TARGET_URL, RepoKind.CHARTMUSEUM)


@pytest.fixture()
def trusted_repo() -> Repo:
    """Return a trusted repository whose references are kept."""
    return Repo(TRUSTED_URL, RepoKind.HELM)


@pytest.fixture()
def target_client(tmp_path: Path, target_repo: Repo) -> FakeChartsClient:
    """Return a fake client of the target repository."""
    return FakeChartsClient(target_repo, tmp_path / "target_archives")


@pytest.fixture()
def trusted_client(tmp_path: Path, trusted_repo: Repo) -> FakeChartsClient:
    """Return a fake client of the trusted repository."""
    return FakeChartsClient(trusted_repo, tmp_path / "trusted_archives")


@pytest.fixture()
def sync_context(
    source_repo: Repo,
    target_repo: Repo,
    trusted_repo: Repo,
    target_client: FakeChartsClient,
    trusted_client: FakeChartsClient,
) -> SyncContext:
    """Return a synchronization context with one ignore-trusted repository."""
    return SyncContext(
        source_repo=source_repo,
        target_repo=target_repo,
        target_client=target_client,
        source_clients={get_repo_location_id(trusted_repo.url): trusted_client},
        ignore_trusted=[trusted_repo],
    )


@pytest.fixture()
def make_chart(tmp_path: Path) -> Callable[..., Path]:
    """Return a function writing an uncompressed chart made of the given yaml documents."""

    def _make_chart(name: str = "mychart", **files: dict | str) -> Path:
        chart_path = tmp_path / name
        chart_path.mkdir(parents=True, exist_ok=True)
        for file_name, content in files.items():
            # Keyword arguments cannot contain dots: "Chart_yaml" is written as "Chart.yaml".
            real_name = file_name.replace("_", ".")
            text = content if isinstance(content, str) else yaml.safe_dump(content, sort_keys=False)
            (chart_path / real_name).write_text(text, encoding="utf-8")
        return chart_path

    return _make_chart


def read_yaml(path: str | os.PathLike) -> dict:
    """Load a yaml file."""
    with open(path, encoding="utf-8") as file:
        return dict(yaml.safe_load(file))


@pytest.fixture(name="read_yaml")
def read_yaml_fixture() -> Callable[[str | os.PathLike], dict]:
    """Return a function loading a yaml file."""
    return read_yaml


@pytest.fixture()
def make_client(tmp_path: Path) -> Callable[..., FakeChartsClient]:
    """Return a function creating a fake client, optionally failing for some dependency ids."""

    def _make_client(repo: Repo, failing: dict[str, Exception] | None = None) -> FakeChartsClient:
        return FakeChartsClient(repo, tmp_path / f"archives_{get_repo_location_id(repo.url)}", failing)

    return _make_client
