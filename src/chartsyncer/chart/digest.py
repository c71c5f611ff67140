# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module computes the digest stored in chart lock files.

The digest is the SHA-256 checksum of the canonical JSON serialization of the pair
``[declared dependencies, locked dependencies]``. Object keys are sorted and no
whitespace is emitted, so equal pairs always give equal digests. It is only meant
to be compared with other digests computed by this module.
"""

import hashlib
import json
from collections.abc import Mapping, Sequence

from chartsyncer.errors import DigestError

DIGEST_ALGORITHM = "sha256"


def hash_dependencies(declarations: Sequence[Mapping], lock_entries: Sequence[Mapping]) -> str:
    """Return the digest of the declared and locked dependencies of a chart.

    Parameters
    ----------
    declarations : Sequence[Mapping]
        The dependencies as declared in ``requirements.yaml`` or ``Chart.yaml``.
    lock_entries : Sequence[Mapping]
        The dependencies of the lock file.

    Returns
    -------
    str
        The digest, prefixed with ``sha256:``.

    Raises
    ------
    DigestError
        If the dependencies contain values that cannot be serialized to JSON.

    Examples
    --------
    >>> hash_dependencies([], []) == hash_dependencies([], [])
    True
    >>> hash_dependencies([{"name": "a"}], []) == hash_dependencies([], [{"name": "a"}])
    False
    """
    try:
        data = json.dumps(
            [[dict(dep) for dep in declarations], [dict(dep) for dep in lock_entries]],
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
        )
    except (TypeError, ValueError) as error:
        raise DigestError(f"Cannot serialize the chart dependencies: {error}") from error

    return f"{DIGEST_ALGORITHM}:{hashlib.sha256(data.encode('utf-8')).hexdigest()}"
