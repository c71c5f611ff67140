# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module defines the interface of chart repository clients."""

import logging
from abc import ABC, abstractmethod

from chartsyncer.repo.repo import Repo

logger: logging.Logger = logging.getLogger(__name__)


class ChartsReader(ABC):
    """Base class of the clients reading charts from a chart repository.

    A client represents a single repository. Clients are shared by the threads
    fetching the dependencies of a chart, so ``fetch`` must be thread-safe.
    """

    def __init__(self, repo: Repo) -> None:
        self.repo = repo

    def load_defaults(self) -> None:
        """Load the .ini configuration for the current client."""

    @abstractmethod
    def fetch(self, name: str, version: str) -> str:
        """Fetch a chart archive.

        Parameters
        ----------
        name : str
            The name of the chart.
        version : str
            The version of the chart.

        Returns
        -------
        str
            The path to the local copy of the chart archive.

        Raises
        ------
        ChartNotFoundError
            If the chart version does not exist in the repository.
        ChartTransportError
            If the repository cannot be reached or answers unexpectedly.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(url={self.repo.url!r})"
