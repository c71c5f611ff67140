# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains error classes for chartsyncer."""


class ChartSyncerError(Exception):
    """The base class for chartsyncer errors."""


class ConfigurationError(ChartSyncerError):
    """Happens when there is an error in the configuration (.ini or sync yaml) file."""


class SchemaParseError(ChartSyncerError):
    """Happens when the metadata, requirements or lock file of a chart cannot be parsed.

    The schema generation of a chart cannot be worked around safely, so this error
    always aborts the synchronization of the chart.
    """


class ChartFileError(ChartSyncerError):
    """Happens when a chart file or folder cannot be read, written or serialized."""

    def __init__(self, path: str, operation: str, cause: BaseException | None = None) -> None:
        self.path = path
        self.operation = operation
        self.cause = cause
        message = f"Failed {operation} {path}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class ChartFetchError(ChartSyncerError):
    """The base class for errors raised by chart repository clients when fetching a chart."""


class ChartNotFoundError(ChartFetchError):
    """Happens when the requested chart version does not exist in the repository."""


class ChartTransportError(ChartFetchError):
    """Happens when the chart repository cannot be reached or returns an unexpected response."""


class DependencyBuildError(ChartSyncerError):
    """Happens when one or more chart dependencies could not be materialized.

    The error aggregates every failed dependency. Dependencies that were materialized
    successfully are left in place.
    """

    def __init__(self, failures: list[tuple[str, BaseException]]) -> None:
        #: The ``(name-version, cause)`` pairs, sorted by dependency id.
        self.failures = sorted(failures, key=lambda failure: failure[0])
        details = "; ".join(f"{dep_id}: {cause}" for dep_id, cause in self.failures)
        super().__init__(f"Failed to build {len(self.failures)} chart dependencies: {details}")

    @property
    def failed_ids(self) -> list[str]:
        """Get the ids of the dependencies that failed."""
        return [dep_id for dep_id, _ in self.failures]


class DigestError(ChartSyncerError):
    """Happens when the digest of the chart dependencies cannot be computed."""
