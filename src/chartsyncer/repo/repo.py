# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the data model of a chart repository."""

from dataclasses import dataclass, field
from enum import Enum

from chartsyncer.errors import ConfigurationError


class RepoKind(str, Enum):
    """The kinds of chart repositories supported by chartsyncer."""

    #: A classic Helm chart repository serving an ``index.yaml`` file.
    HELM = "HELM"
    #: A ChartMuseum server.
    CHARTMUSEUM = "CHARTMUSEUM"
    #: A Harbor chart repository.
    HARBOR = "HARBOR"
    #: An OCI registry.
    OCI = "OCI"
    #: A local directory of chart archives.
    LOCAL = "LOCAL"

    @classmethod
    def from_str(cls, value: str) -> "RepoKind":
        """Return the repository kind for a case-insensitive string.

        Raises
        ------
        ConfigurationError
            If the kind is not supported.
        """
        try:
            return cls(value.upper())
        except ValueError as error:
            supported = ", ".join(kind.value for kind in cls)
            raise ConfigurationError(f"Unsupported repository kind {value!r}. Valid values are {supported}.") from error


@dataclass(frozen=True)
class Auth:
    """Basic authentication credentials of a repository."""

    username: str = ""
    password: str = field(default="", repr=False)

    def __bool__(self) -> bool:
        return bool(self.username or self.password)


@dataclass(frozen=True)
class Repo:
    """A chart repository."""

    #: The URL of the repository.
    url: str
    #: The kind of the repository.
    kind: RepoKind = RepoKind.HELM
    #: The credentials used to access the repository.
    auth: Auth = field(default_factory=Auth)
