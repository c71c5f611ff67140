# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module loads the configuration describing the source and target chart repositories."""

import logging
import os
from dataclasses import dataclass, field

import yamale
from yamale.schema import Schema

from chartsyncer.parsers.yaml.loader import load_yaml_config
from chartsyncer.repo.repo import Auth, Repo, RepoKind

logger: logging.Logger = logging.getLogger(__name__)

SCHEMA_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "sync_config_schema.yaml")

SYNC_CONFIG_SCHEMA: Schema = yamale.make_schema(SCHEMA_PATH)


@dataclass
class SyncConfig:
    """The repositories involved in a synchronization."""

    #: The repository charts are migrated from.
    source_repo: Repo
    #: The repository charts are migrated to.
    target_repo: Repo
    #: The trusted repositories whose charts are synchronized as well.
    sync_trusted: list[Repo] = field(default_factory=list)
    #: The trusted repositories that are not synchronized.
    ignore_trusted: list[Repo] = field(default_factory=list)

    @property
    def trusted_repos(self) -> list[Repo]:
        """Get all trusted repositories."""
        return [*self.sync_trusted, *self.ignore_trusted]


def _parse_repo(data: dict, env_prefix: str = "") -> Repo:
    """Create a repository from its configuration.

    Credentials missing from the configuration are read from the ``<env_prefix>_AUTH_USERNAME``
    and ``<env_prefix>_AUTH_PASSWORD`` environment variables when ``env_prefix`` is set.
    """
    auth_data = data.get("auth") or {}
    username = auth_data.get("username", "")
    password = auth_data.get("password", "")
    if env_prefix:
        username = username or os.environ.get(f"{env_prefix}_AUTH_USERNAME", "")
        password = password or os.environ.get(f"{env_prefix}_AUTH_PASSWORD", "")

    return Repo(
        url=data["url"],
        kind=RepoKind.from_str(data.get("kind", RepoKind.HELM.value)),
        auth=Auth(username=username, password=password),
    )


def load_sync_config(path: str) -> SyncConfig:
    """Load and validate a sync configuration file.

    Parameters
    ----------
    path : str
        The path to the yaml configuration file.

    Returns
    -------
    SyncConfig
        The loaded configuration.

    Raises
    ------
    ConfigurationError
        If the file cannot be loaded or does not match the schema.
    """
    content = load_yaml_config(path, SYNC_CONFIG_SCHEMA)

    source = content["source"]
    target = content["target"]
    config = SyncConfig(
        source_repo=_parse_repo(source["repo"], env_prefix="SOURCE"),
        target_repo=_parse_repo(target["repo"], env_prefix="TARGET"),
        sync_trusted=[_parse_repo(repo) for repo in target.get("syncTrustedRepos") or []],
        ignore_trusted=[_parse_repo(repo) for repo in source.get("ignoreTrustedRepos") or []],
    )
    logger.debug(
        "Loaded sync configuration from %s: %d sync-trusted and %d ignore-trusted repositories.",
        path,
        len(config.sync_trusted),
        len(config.ignore_trusted),
    )
    return config
