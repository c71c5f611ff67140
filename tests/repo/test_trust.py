# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""Tests for the trust decisions taken for dependency repositories."""

import zlib

import pytest
from hypothesis import given
from hypothesis import strategies as st

from chartsyncer.errors import ConfigurationError
from chartsyncer.repo.repo import Auth, Repo, RepoKind
from chartsyncer.repo.trust import get_repo_location_id, should_ignore_repo

SYNC_TRUSTED = [Repo("https://sync.example.com")]
IGNORE_TRUSTED = [Repo("https://ignore.example.com")]


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://sync.example.com", True),
        ("https://ignore.example.com", True),
        ("https://ignore.example.com/", False),
        ("https://other.example.com", False),
        ("", False),
    ],
)
def test_should_ignore_repo(url: str, expected: bool) -> None:
    """Test that both trusted lists keep the references to their repositories."""
    assert should_ignore_repo(url, SYNC_TRUSTED, IGNORE_TRUSTED) is expected


@given(url=st.text())
def test_location_id_is_crc32(url: str) -> None:
    """Test that the location id is the CRC-32 checksum of the URL."""
    assert get_repo_location_id(url) == zlib.crc32(url.encode("utf-8"))


@pytest.mark.parametrize(
    ("value", "expected"),
    [("helm", RepoKind.HELM), ("ChartMuseum", RepoKind.CHARTMUSEUM), ("OCI", RepoKind.OCI), ("local", RepoKind.LOCAL)],
)
def test_repo_kind_from_str(value: str, expected: RepoKind) -> None:
    """Test parsing repository kinds case-insensitively."""
    assert RepoKind.from_str(value) is expected


def test_repo_kind_from_str_invalid() -> None:
    """Test that unsupported repository kinds raise a ConfigurationError."""
    with pytest.raises(ConfigurationError):
        RepoKind.from_str("git")


def test_auth() -> None:
    """Test that empty credentials are falsy and the password is not shown."""
    assert not Auth()
    assert Auth("user", "")
    assert "secret" not in repr(Auth("user", "secret"))
