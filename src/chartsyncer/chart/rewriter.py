# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module rewrites the repository references of chart dependencies.

A dependency is pointed at the target repository if it comes from the source
repository or if its repository is not trusted. The same rule is applied to the
declaration file and to the lock file, so both always agree.
"""

import logging

from chartsyncer.chart.context import SyncContext
from chartsyncer.chart.digest import hash_dependencies
from chartsyncer.chart.files import get_dependency_entries, read_chart_file, write_chart_file
from chartsyncer.chart.lock import ChartSchema
from chartsyncer.chart.models import SchemaGeneration
from chartsyncer.repo.repo import Repo, RepoKind

logger: logging.Logger = logging.getLogger(__name__)

OCI_SCHEME = "oci"


def get_dependency_repo_url(target_repo: Repo) -> str:
    """Return the URL that dependency declarations must use to refer to ``target_repo``.

    OCI registries are addressed with the ``oci`` scheme; host and path are kept.

    Examples
    --------
    >>> get_dependency_repo_url(Repo("https://registry.example.com/charts", RepoKind.OCI))
    'oci://registry.example.com/charts'
    >>> get_dependency_repo_url(Repo("https://charts.example.com", RepoKind.HELM))
    'https://charts.example.com'
    """
    repo_url = target_repo.url
    if target_repo.kind is not RepoKind.OCI:
        return repo_url

    _, separator, location = repo_url.partition("://")
    if not separator:
        location = repo_url
    return f"{OCI_SCHEME}://{location}"


def should_replace_repo(repository: str, context: SyncContext) -> bool:
    """Return True if a dependency from ``repository`` must be pointed at the target repository."""
    # Trusted repositories keep their references, unless they are the source repository itself.
    return repository == context.source_repo.url or not context.is_ignored(repository)


def rewrite_dependency_entries(entries: list[dict], context: SyncContext) -> int:
    """Point the repository of every entry that should be replaced at the target repository.

    Parameters
    ----------
    entries : list[dict]
        The ``dependencies`` entries of a declaration or lock file, updated in place.
    context : SyncContext
        The synchronization context.

    Returns
    -------
    int
        The number of entries whose repository was replaced.
    """
    repo_url = get_dependency_repo_url(context.target_repo)
    replaced = 0
    for entry in entries:
        repository = entry.get("repository") or ""
        if should_replace_repo(repository, context):
            logger.debug("Pointing dependency %s from %r to %s.", entry.get("name"), repository, repo_url)
            entry["repository"] = repo_url
            replaced += 1
    return replaced


def update_lock_file(
    chart_path: str,
    lock: dict,
    declarations: list[dict],
    generation: SchemaGeneration,
    context: SyncContext,
) -> None:
    """Rewrite the lock entries, recompute the lock digest and overwrite the lock file.

    Parameters
    ----------
    chart_path : str
        The path to the uncompressed chart.
    lock : dict
        The content of the lock file, updated in place.
    declarations : list[dict]
        The already rewritten dependency declarations.
    generation : SchemaGeneration
        The schema generation of the chart.
    context : SyncContext
        The synchronization context.
    """
    lock_path = generation.lock_path(chart_path)
    lock_entries = get_dependency_entries(lock, lock_path)
    rewrite_dependency_entries(lock_entries, context)
    lock["digest"] = hash_dependencies(declarations, lock_entries)
    write_chart_file(lock_path, lock)
    logger.info("Updated %s with digest %s.", generation.lock_filename, lock["digest"])


def update_declaration_file(
    chart_path: str,
    generation: SchemaGeneration,
    lock: dict | None,
    context: SyncContext,
) -> None:
    """Rewrite the dependency declarations of a chart and, if there is one, its lock file.

    The declarations live in ``requirements.yaml`` for Legacy charts and in
    ``Chart.yaml`` for Modern charts.

    Parameters
    ----------
    chart_path : str
        The path to the uncompressed chart.
    generation : SchemaGeneration
        The schema generation of the chart.
    lock : dict | None
        The content of the lock file, or ``None`` if the chart has no lock file.
    context : SyncContext
        The synchronization context.

    Raises
    ------
    ChartFileError
        If a file cannot be read, serialized or written.
    SchemaParseError
        If a file is malformed.
    """
    declaration_path = generation.declaration_path(chart_path)
    document = read_chart_file(declaration_path)
    declarations = get_dependency_entries(document, declaration_path)
    replaced = rewrite_dependency_entries(declarations, context)
    write_chart_file(declaration_path, document)
    logger.info("Updated %d of %d dependencies in %s.", replaced, len(declarations), generation.declaration_filename)

    if lock is not None:
        update_lock_file(chart_path, lock, declarations, generation, context)


def rewrite_chart_dependencies(chart_path: str, schema: ChartSchema, context: SyncContext) -> None:
    """Rewrite the dependency references of a chart according to its schema generation.

    Charts without dependencies are left untouched.
    """
    match schema.generation:
        case SchemaGeneration.LEGACY | SchemaGeneration.MODERN:
            update_declaration_file(chart_path, schema.generation, schema.lock, context)
        case None:
            logger.debug("No dependencies to rewrite in %s.", chart_path)
