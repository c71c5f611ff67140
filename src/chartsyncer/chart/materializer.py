# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module rebuilds the folder holding the dependency archives of a chart."""

import logging
import os
import shutil
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed

from chartsyncer.chart.context import SyncContext
from chartsyncer.chart.models import Dependency
from chartsyncer.client.chart_client import ChartsReader
from chartsyncer.config.defaults import defaults
from chartsyncer.errors import ChartFetchError, ChartFileError, DependencyBuildError
from chartsyncer.util import copy_file

logger: logging.Logger = logging.getLogger(__name__)


def get_charts_dir(chart_path: str) -> str:
    """Return the path to the folder holding the dependency archives of a chart."""
    return os.path.join(chart_path, defaults.get("dependencies", "charts_dir", fallback="charts"))


def prepare_charts_dir(chart_path: str) -> str:
    """Delete and re-create the empty dependency folder of a chart.

    Returns
    -------
    str
        The path to the dependency folder.

    Raises
    ------
    ChartFileError
        If the folder cannot be deleted or created.
    """
    charts_dir = get_charts_dir(chart_path)
    try:
        if os.path.isdir(charts_dir):
            shutil.rmtree(charts_dir)
        elif os.path.lexists(charts_dir):
            os.remove(charts_dir)
        os.mkdir(charts_dir, 0o755)
    except OSError as error:
        raise ChartFileError(charts_dir, "re-creating", error) from error
    return charts_dir


def select_client(dependency: Dependency, context: SyncContext) -> ChartsReader:
    """Return the client the archive of ``dependency`` must be fetched with.

    Dependencies from trusted repositories are fetched from those repositories.
    Any other dependency is expected to be synchronized into the target repository already.

    Raises
    ------
    ChartFetchError
        If there is no client for the trusted repository of the dependency.
    """
    if not context.is_ignored(dependency.repository):
        return context.target_client

    client = context.source_clients.get(context.location_id(dependency.repository))
    if client is None:
        raise ChartFetchError(f"No client configured for the trusted repository {dependency.repository!r}.")
    return client


def materialize_dependency(dependency: Dependency, charts_dir: str, context: SyncContext) -> str:
    """Fetch the archive of a dependency and copy it into ``charts_dir``.

    Parameters
    ----------
    dependency : Dependency
        The dependency, with its repository as declared before rewriting.
    charts_dir : str
        The dependency folder of the chart.
    context : SyncContext
        The synchronization context.

    Returns
    -------
    str
        The path to the copied archive.
    """
    client = select_client(dependency, context)
    logger.debug("Building %s chart dependency with %r.", dependency.id, client)
    archive_path = client.fetch(dependency.name, dependency.version)

    extension = defaults.get("dependencies", "archive_extension", fallback="tgz")
    dest = os.path.join(charts_dir, f"{dependency.id}.{extension}")
    try:
        copy_file(archive_path, dest)
    except OSError as error:
        raise ChartFileError(dest, f"copying {archive_path} to", error) from error
    return dest


def materialize_dependencies(chart_path: str, dependencies: Sequence[Dependency], context: SyncContext) -> None:
    """Rebuild the dependency folder of a chart from the archives of its dependencies.

    The folder is emptied first. Every dependency is processed even if others fail,
    and archives that were copied successfully are left in place.

    Parameters
    ----------
    chart_path : str
        The path to the uncompressed chart.
    dependencies : Sequence[Dependency]
        The dependencies of the chart, with their repositories as declared before rewriting.
    context : SyncContext
        The synchronization context.

    Raises
    ------
    ChartFileError
        If the dependency folder cannot be re-created.
    DependencyBuildError
        If one or more dependencies could not be fetched or copied.
    """
    charts_dir = prepare_charts_dir(chart_path)
    if not dependencies:
        return

    max_workers = min(defaults.get_positive_int("dependencies", "max_workers", fallback=4), len(dependencies))
    failures: list[tuple[str, BaseException]] = []
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="chartsyncer-deps") as executor:
        futures = {
            executor.submit(materialize_dependency, dependency, charts_dir, context): dependency
            for dependency in dependencies
        }
        for future in as_completed(futures):
            dependency = futures[future]
            try:
                future.result()
            except Exception as error:  # pylint: disable=broad-exception-caught
                logger.warning(
                    "Failed building %s chart dependency. The dependencies processing will remain incomplete: %s",
                    dependency.id,
                    error,
                )
                failures.append((dependency.id, error))

    if failures:
        raise DependencyBuildError(failures)
    logger.info("Built %d chart dependencies in %s.", len(dependencies), charts_dir)
