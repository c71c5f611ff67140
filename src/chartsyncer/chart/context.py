# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the context shared by the steps synchronizing the dependencies of a chart."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from chartsyncer.client.chart_client import ChartsReader
from chartsyncer.repo.repo import Repo
from chartsyncer.repo.trust import LocationMapper, TrustClassifier, get_repo_location_id, should_ignore_repo


@dataclass
class SyncContext:
    """The repositories, clients and trust decisions used to synchronize chart dependencies."""

    #: The repository the chart is migrated from.
    source_repo: Repo
    #: The repository the chart is migrated to.
    target_repo: Repo
    #: The client fetching charts already synchronized into the target repository.
    target_client: ChartsReader
    #: The clients of trusted repositories, keyed by location id.
    source_clients: Mapping[int, ChartsReader] = field(default_factory=dict)
    #: The trusted repositories whose charts are synchronized as well.
    sync_trusted: Sequence[Repo] = ()
    #: The trusted repositories that are not synchronized.
    ignore_trusted: Sequence[Repo] = ()
    #: Decides whether references to a repository are kept.
    classifier: TrustClassifier = should_ignore_repo
    #: Maps a repository URL to the location id of its client.
    location_id: LocationMapper = get_repo_location_id

    def is_ignored(self, url: str) -> bool:
        """Return True if references to the repository at ``url`` are kept as declared."""
        return self.classifier(url, self.sync_trusted, self.ignore_trusted)
