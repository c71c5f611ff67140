# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This package synchronizes the dependencies of charts."""

from chartsyncer.chart.context import SyncContext
from chartsyncer.chart.dependency import build_dependencies
from chartsyncer.chart.lock import get_chart_dependencies
from chartsyncer.chart.models import Dependency, SchemaGeneration

__all__ = ["Dependency", "SchemaGeneration", "SyncContext", "build_dependencies", "get_chart_dependencies"]
