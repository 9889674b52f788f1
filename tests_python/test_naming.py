"""Tests for scoped package name derivation."""

from __future__ import annotations

import pytest

from packlet.naming import (
    NameDerivationInput,
    derive_scoped_name,
    ensure_gpr_name,
    extract_repo_name,
    is_valid_gpr_name,
)


@pytest.mark.parametrize(
    "url",
    [
        "https://github.com/owner/repo",
        "https://github.com/owner/repo.git",
        "git+https://github.com/owner/repo.git",
        "git@github.com:owner/repo.git",
    ],
)
def test_repository_url_forms_share_the_repo_segment(url: str) -> None:
    """HTTPS, git+ and SSH URLs all derive the trailing repository name."""
    derived = derive_scoped_name(
        NameDerivationInput(name="ignored", repo_url=url, scope="s")
    )
    assert derived.scoped_name == "@s/repo", f"unexpected name for {url}"
    assert derived.base_name == "repo"


@pytest.mark.parametrize("scope", [None, "", "other", "s"])
def test_scoped_override_is_returned_verbatim(scope: str | None) -> None:
    """A namespace-qualified override ignores the requested scope."""
    derived = derive_scoped_name(
        NameDerivationInput(name="foo", override="@x/y", scope=scope)
    )
    assert derived.scoped_name == "@x/y"
    assert derived.base_name == "y"


def test_unscoped_override_receives_scope() -> None:
    """An unscoped override becomes the base name and gains the scope."""
    derived = derive_scoped_name(
        NameDerivationInput(
            name="foo",
            repo_url="https://github.com/acme/xyz",
            override="  bar  ",
            scope="sc",
        )
    )
    assert (derived.base_name, derived.scoped_name) == ("bar", "@sc/bar")


def test_blank_override_falls_through_to_repository() -> None:
    """Whitespace-only overrides are ignored."""
    derived = derive_scoped_name(
        NameDerivationInput(
            name="foo", repo_url="https://github.com/acme/xyz", override="   ", scope="sc"
        )
    )
    assert derived.scoped_name == "@sc/xyz"


def test_existing_scope_is_replaced() -> None:
    """The package's own namespace is stripped before applying the new one."""
    derived = derive_scoped_name(NameDerivationInput(name="@old/name", scope="new"))
    assert (derived.base_name, derived.scoped_name) == ("name", "@new/name")


def test_unparsable_repository_falls_back_to_name() -> None:
    """An unparsable URL is ignored silently."""
    derived = derive_scoped_name(
        NameDerivationInput(name="@old/pkg", repo_url="not-a-url")
    )
    assert (derived.base_name, derived.scoped_name) == ("pkg", "pkg")


def test_base_name_never_contains_a_slash() -> None:
    """Slash-bearing names keep only their last segment."""
    derived = derive_scoped_name(NameDerivationInput(name="a/b/c", scope="s"))
    assert derived.base_name == "c"
    assert derived.scoped_name == "@s/c"


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://github.com/org/repo", "repo"),
        ("git+https://github.com/org/repo.git", "repo"),
        ("git@github.com:org/repo.git", "repo"),
        ("ssh://git@host.example/org/repo.git.git", "repo"),
        (None, None),
        ("", None),
        ("repo", None),
    ],
)
def test_extract_repo_name(url: str | None, expected: str | None) -> None:
    """Repository names are extracted from common git URL forms."""
    assert extract_repo_name(url) == expected


@pytest.mark.parametrize(
    ("value", "valid"),
    [
        ("@scope/name", True),
        ("plain-name", True),
        ("name.with_dots", True),
        ("@scope/", False),
        ("has space", False),
        ("@a/b/c", False),
        (42, False),
        (None, False),
    ],
)
def test_override_validation(value: object, valid: bool) -> None:
    """Only scoped or bare names are accepted as overrides."""
    assert is_valid_gpr_name(value) is valid
    assert ensure_gpr_name(value) == (value if valid else None)
