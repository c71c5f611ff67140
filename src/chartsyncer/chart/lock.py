# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module detects how a chart declares and locks its dependencies and loads its lock file."""

import logging
import os
import tarfile
import tempfile
from dataclasses import dataclass, field

from chartsyncer.chart.files import get_dependency_entries, read_chart_file
from chartsyncer.chart.models import CHART_FILENAME, Dependency, SchemaGeneration
from chartsyncer.errors import ChartFileError, SchemaParseError
from chartsyncer.util import extract_tarfile

logger: logging.Logger = logging.getLogger(__name__)

#: The ``apiVersion`` of ``Chart.yaml`` files declaring their dependencies inline.
CHART_API_VERSION_V2 = "v2"


@dataclass
class ChartSchema:
    """The dependency layout of a chart."""

    #: The schema generation, or ``None`` if the chart has no dependencies.
    generation: SchemaGeneration | None
    #: The content of the lock file, or ``None`` if there is no lock file.
    lock: dict | None = None
    #: The dependencies declared in ``Chart.yaml`` when there is no lock file.
    inline_dependencies: list[Dependency] = field(default_factory=list)

    @property
    def dependencies(self) -> list[Dependency]:
        """Get the authoritative list of dependencies.

        These are the lock entries if a lock file exists, else the dependencies
        declared in ``Chart.yaml``.
        """
        if self.lock is None or self.generation is None:
            return list(self.inline_dependencies)
        lock_path = self.generation.lock_filename
        return [Dependency.from_entry(entry, lock_path) for entry in get_dependency_entries(self.lock, lock_path)]


def get_schema_generation(chart_path: str) -> SchemaGeneration | None:
    """Return the schema generation of a chart based on the lock file it contains.

    ``requirements.lock`` takes precedence over ``Chart.lock``.

    Parameters
    ----------
    chart_path : str
        The path to the uncompressed chart.

    Returns
    -------
    SchemaGeneration | None
        The schema generation, or ``None`` if the chart has no lock file.
    """
    for generation in (SchemaGeneration.LEGACY, SchemaGeneration.MODERN):
        if os.path.isfile(generation.lock_path(chart_path)):
            return generation
    return None


def get_chart_lock(chart_path: str) -> dict | None:
    """Return the content of the lock file of a chart.

    Parameters
    ----------
    chart_path : str
        The path to the uncompressed chart.

    Returns
    -------
    dict | None
        The lock, or ``None`` if the chart has no lock file.

    Raises
    ------
    SchemaParseError
        If the lock file is malformed.
    ChartFileError
        If the lock file cannot be read.
    """
    generation = get_schema_generation(chart_path)
    if generation is None:
        return None

    lock_path = generation.lock_path(chart_path)
    lock = read_chart_file(lock_path)
    # Validate the entries early so that a malformed lock aborts before any file is rewritten.
    for entry in get_dependency_entries(lock, lock_path):
        Dependency.from_entry(entry, lock_path)
    return lock


def load_chart_metadata(chart_path: str) -> dict:
    """Return the content of the ``Chart.yaml`` file of a chart.

    Raises
    ------
    SchemaParseError
        If the file is missing or malformed.
    """
    chart_file = os.path.join(chart_path, CHART_FILENAME)
    try:
        return read_chart_file(chart_file)
    except ChartFileError as error:
        raise SchemaParseError(f"Cannot load the chart metadata: {error}") from error


def resolve_chart_schema(chart_path: str) -> ChartSchema:
    """Detect the schema generation of a chart and load its lock data.

    When there is no lock file, a ``Chart.yaml`` with ``apiVersion: v2`` still declares
    its dependencies inline; the chart is then treated as a Modern chart without lock.
    Otherwise the chart has no dependencies.

    Parameters
    ----------
    chart_path : str
        The path to the uncompressed chart.

    Returns
    -------
    ChartSchema
        The dependency layout of the chart.

    Raises
    ------
    SchemaParseError
        If the metadata or lock file is malformed.
    ChartFileError
        If the lock file cannot be read.
    """
    generation = get_schema_generation(chart_path)
    if generation is not None:
        logger.debug("Found %s in %s.", generation.lock_filename, chart_path)
        return ChartSchema(generation=generation, lock=get_chart_lock(chart_path))

    metadata = load_chart_metadata(chart_path)
    if metadata.get("apiVersion") != CHART_API_VERSION_V2:
        logger.debug("The chart at %s has no lock file. Assuming it has no dependencies.", chart_path)
        return ChartSchema(generation=None)

    chart_file = os.path.join(chart_path, CHART_FILENAME)
    inline_dependencies = [
        Dependency.from_entry(entry, chart_file) for entry in get_dependency_entries(metadata, chart_file)
    ]
    logger.debug("The chart at %s declares %d dependencies without lock.", chart_path, len(inline_dependencies))
    return ChartSchema(generation=SchemaGeneration.MODERN, inline_dependencies=inline_dependencies)


def get_chart_dependencies(archive_path: str, name: str) -> list[Dependency]:
    """Return the dependencies of a packaged chart.

    The archive is uncompressed into a temporary directory that is removed before returning.

    Parameters
    ----------
    archive_path : str
        The path to the chart archive.
    name : str
        The name of the chart, i.e., the top-level folder of the archive.

    Returns
    -------
    list[Dependency]
        The locked dependencies, else the dependencies declared in ``Chart.yaml``.

    Raises
    ------
    ChartFileError
        If the archive cannot be uncompressed.
    SchemaParseError
        If the chart files are malformed.
    """
    with tempfile.TemporaryDirectory(prefix="chartsyncer_") as temp_dir:
        try:
            extract_tarfile(archive_path, temp_dir)
        except (tarfile.TarError, OSError) as error:
            raise ChartFileError(archive_path, "uncompressing", error) from error

        chart_path = os.path.join(temp_dir, name)
        if get_schema_generation(chart_path) is not None:
            return resolve_chart_schema(chart_path).dependencies

        metadata = load_chart_metadata(chart_path)
        chart_file = os.path.join(chart_path, CHART_FILENAME)
        return [Dependency.from_entry(entry, chart_file) for entry in get_dependency_entries(metadata, chart_file)]
