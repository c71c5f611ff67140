# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This package contains the clients of chart repositories."""

import logging
import os
from collections.abc import Iterable

from chartsyncer.client.chart_client import ChartsReader
from chartsyncer.client.helm_repo_client import HelmRepoClient
from chartsyncer.client.local_client import LocalChartsClient
from chartsyncer.client.oci_registry_client import OCIRegistryClient
from chartsyncer.repo.repo import Repo, RepoKind
from chartsyncer.repo.trust import get_repo_location_id

logger: logging.Logger = logging.getLogger(__name__)


def new_client(repo: Repo, cache_dir: str) -> ChartsReader:
    """Create the client of a chart repository and load its configuration.

    Parameters
    ----------
    repo : Repo
        The chart repository.
    cache_dir : str
        The directory where the client stores downloaded archives.

    Returns
    -------
    ChartsReader
        The client matching the kind of the repository.

    Raises
    ------
    ConfigurationError
        If the configuration of the client is invalid.
    """
    client: ChartsReader
    match repo.kind:
        case RepoKind.OCI:
            client = OCIRegistryClient(repo, cache_dir)
        case RepoKind.LOCAL:
            client = LocalChartsClient(repo)
        case _:
            client = HelmRepoClient(repo, cache_dir)
    client.load_defaults()
    logger.debug("Created %r for %s repository.", client, repo.kind.value)
    return client


def build_source_clients(repos: Iterable[Repo], cache_dir: str) -> dict[int, ChartsReader]:
    """Create the clients of trusted repositories, keyed by location id.

    Each client gets its own sub-directory of ``cache_dir``.
    """
    clients: dict[int, ChartsReader] = {}
    for repo in repos:
        location_id = get_repo_location_id(repo.url)
        if location_id not in clients:
            clients[location_id] = new_client(repo, os.path.join(cache_dir, str(location_id)))
    return clients


__all__ = [
    "ChartsReader",
    "HelmRepoClient",
    "LocalChartsClient",
    "OCIRegistryClient",
    "build_source_clients",
    "new_client",
]
