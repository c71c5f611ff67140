# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module synchronizes the dependencies of a chart migrated to a target repository."""

import logging

from chartsyncer.chart.context import SyncContext
from chartsyncer.chart.lock import resolve_chart_schema
from chartsyncer.chart.materializer import materialize_dependencies
from chartsyncer.chart.rewriter import rewrite_chart_dependencies

logger: logging.Logger = logging.getLogger(__name__)


def build_dependencies(chart_path: str, context: SyncContext) -> None:
    """Update the dependencies of a chart and their repository references.

    The steps run in order, each one relying on the files written by the previous one:

    1. detect the schema generation and load the lock file,
    2. point the declared and locked dependencies at the target repository and
       recompute the lock digest,
    3. rebuild the ``charts`` folder with the archive of every dependency.

    Parameters
    ----------
    chart_path : str
        The path to the uncompressed chart.
    context : SyncContext
        The synchronization context.

    Raises
    ------
    SchemaParseError
        If the chart metadata or lock file is malformed.
    ChartFileError
        If a chart file cannot be read or written.
    DigestError
        If the lock digest cannot be computed.
    DependencyBuildError
        If the archives of some dependencies could not be materialized. The chart
        files are already rewritten when this error is raised.
    """
    schema = resolve_chart_schema(chart_path)

    # The trust decisions of the materialization use the repositories as declared originally.
    dependencies = schema.dependencies

    rewrite_chart_dependencies(chart_path, schema, context)
    materialize_dependencies(chart_path, dependencies, context)
