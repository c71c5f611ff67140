# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the client of chart repositories stored in a local directory."""

import os

from chartsyncer.client.chart_client import ChartsReader
from chartsyncer.config.defaults import defaults
from chartsyncer.errors import ChartNotFoundError
from chartsyncer.repo.repo import Repo

FILE_SCHEME_PREFIX = "file://"


class LocalChartsClient(ChartsReader):
    """A directory of ``<name>-<version>.<archive_extension>`` chart archives."""

    def __init__(self, repo: Repo) -> None:
        super().__init__(repo)
        self.directory = repo.url.removeprefix(FILE_SCHEME_PREFIX)

    def fetch(self, name: str, version: str) -> str:
        extension = defaults.get("dependencies", "archive_extension", fallback="tgz")
        archive_path = os.path.join(self.directory, f"{name}-{version}.{extension}")
        if not os.path.isfile(archive_path):
            raise ChartNotFoundError(f"Chart {name} {version} not found in {self.directory}.")
        return archive_path
