# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This package defines chart repositories and the trust decisions made about them."""

from chartsyncer.repo.repo import Auth, Repo, RepoKind
from chartsyncer.repo.trust import get_repo_location_id, should_ignore_repo

__all__ = ["Auth", "Repo", "RepoKind", "get_repo_location_id", "should_ignore_repo"]
