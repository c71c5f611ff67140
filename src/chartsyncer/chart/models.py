# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the data model of chart dependencies."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from chartsyncer.errors import SchemaParseError

#: The metadata file of a chart.
CHART_FILENAME = "Chart.yaml"
#: The dependency declaration file of Helm v2 charts.
REQUIREMENTS_FILENAME = "requirements.yaml"
#: The lock file of Helm v2 charts.
REQUIREMENTS_LOCK_FILENAME = "requirements.lock"
#: The lock file of Helm v3 charts.
CHART_LOCK_FILENAME = "Chart.lock"


class SchemaGeneration(Enum):
    """The generations of the on-disk layout used to declare and lock chart dependencies."""

    #: Dependencies declared in ``requirements.yaml`` and locked in ``requirements.lock``.
    LEGACY = "v1"
    #: Dependencies declared in ``Chart.yaml`` and locked in ``Chart.lock``.
    MODERN = "v2"

    @property
    def declaration_filename(self) -> str:
        """Get the name of the file declaring the dependencies."""
        if self is SchemaGeneration.LEGACY:
            return REQUIREMENTS_FILENAME
        return CHART_FILENAME

    @property
    def lock_filename(self) -> str:
        """Get the name of the lock file."""
        if self is SchemaGeneration.LEGACY:
            return REQUIREMENTS_LOCK_FILENAME
        return CHART_LOCK_FILENAME

    def declaration_path(self, chart_path: str) -> str:
        """Return the path to the declaration file of the chart at ``chart_path``."""
        return os.path.join(chart_path, self.declaration_filename)

    def lock_path(self, chart_path: str) -> str:
        """Return the path to the lock file of the chart at ``chart_path``."""
        return os.path.join(chart_path, self.lock_filename)


@dataclass(frozen=True)
class Dependency:
    """A chart dependency as declared or locked by its parent chart."""

    #: The name of the dependency chart.
    name: str
    #: The version or version range of the dependency chart.
    version: str
    #: The URL of the repository the dependency chart comes from.
    repository: str = ""

    @property
    def id(self) -> str:  # pylint: disable=invalid-name
        """Get the identity key of the dependency, i.e., ``name-version``."""
        return f"{self.name}-{self.version}"

    @classmethod
    def from_entry(cls, entry: Mapping, path: str) -> "Dependency":
        """Create a dependency from an entry of a ``dependencies`` list.

        Parameters
        ----------
        entry : Mapping
            The entry as loaded from the yaml file.
        path : str
            The file the entry was loaded from, used for error messages.

        Raises
        ------
        SchemaParseError
            If the entry has no name.
        """
        name = entry.get("name")
        if not name or not isinstance(name, str):
            raise SchemaParseError(f"A dependency in {path} has no valid name: {dict(entry)}.")

        version = entry.get("version")
        repository = entry.get("repository")
        return cls(
            name=name,
            version="" if version is None else str(version),
            repository="" if repository is None else str(repository),
        )
