# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the trust decisions taken for the repositories of chart dependencies.

A dependency repository listed in the sync-trusted or ignore-trusted lists keeps its
original reference and its charts are fetched from it. Any other repository is pointed
at the target repository.
"""

import zlib
from collections.abc import Callable, Sequence

from chartsyncer.repo.repo import Repo

#: The signature of a trust classifier: ``(url, sync_trusted, ignore_trusted) -> ignored``.
TrustClassifier = Callable[[str, Sequence[Repo], Sequence[Repo]], bool]

#: The signature of a location mapper: ``(url) -> location id``.
LocationMapper = Callable[[str], int]


def should_ignore_repo(url: str, sync_trusted: Sequence[Repo], ignore_trusted: Sequence[Repo]) -> bool:
    """Return True if references to the repository at ``url`` must be left untouched.

    Parameters
    ----------
    url : str
        The repository URL of a chart dependency.
    sync_trusted : Sequence[Repo]
        The trusted repositories whose charts are synchronized as well.
    ignore_trusted : Sequence[Repo]
        The trusted repositories that are not synchronized.

    Returns
    -------
    bool
        True if the repository is trusted and its references are kept.

    Examples
    --------
    >>> should_ignore_repo("https://charts.example.com", [], [Repo("https://charts.example.com")])
    True
    >>> should_ignore_repo("https://charts.example.com", [], [])
    False
    """
    return any(repo.url == url for repo in (*ignore_trusted, *sync_trusted))


def get_repo_location_id(url: str) -> int:
    """Return the location id of a repository URL.

    The location id is the CRC-32 checksum of the URL and is used to look up
    the client of a trusted repository.

    >>> get_repo_location_id("https://charts.example.com") == get_repo_location_id("https://charts.example.com")
    True
    """
    return zlib.crc32(url.encode("utf-8"))
