"""Derive base and scoped package names for the staged registry variant."""

from __future__ import annotations

import dataclasses
import re

__all__ = [
    "SCOPED_GPR_NAME",
    "UNSCOPED_GPR_NAME",
    "DerivedName",
    "NameDerivationInput",
    "derive_scoped_name",
    "ensure_gpr_name",
    "extract_repo_name",
    "is_valid_gpr_name",
]

SCOPED_GPR_NAME = re.compile(r"^@[^/]+/[A-Za-z0-9._-]+$")
UNSCOPED_GPR_NAME = re.compile(r"^[A-Za-z0-9._-]+$")

_REPO_TAIL = re.compile(r"[/:]([^/:]+)/([^/]+)$")


@dataclasses.dataclass(slots=True, frozen=True)
class NameDerivationInput:
    """Inputs considered by :func:`derive_scoped_name`, highest precedence last."""

    name: str
    repo_url: str | None = None
    override: str | None = None
    scope: str | None = None


@dataclasses.dataclass(slots=True, frozen=True)
class DerivedName:
    """Unscoped base name and the final (possibly scoped) package name."""

    base_name: str
    scoped_name: str


def derive_scoped_name(request: NameDerivationInput) -> DerivedName:
    """Return the base and scoped names for ``request``.

    An explicit override wins. When it is already namespace-qualified
    (``@scope/name``) it is used verbatim, ignoring ``request.scope``. Otherwise
    the base name comes from the override, the repository URL or the package
    name, in that order, and ``request.scope`` is applied to it.

    Examples
    --------
    >>> derive_scoped_name(NameDerivationInput(name="pkg", scope="acme"))
    DerivedName(base_name='pkg', scoped_name='@acme/pkg')
    >>> derive_scoped_name(
    ...     NameDerivationInput(name="x", override="@own/thing", scope="acme")
    ... ).scoped_name
    '@own/thing'
    """
    override = (request.override or "").strip()
    if override:
        base = _strip_scope(override)
        if override.startswith("@") and "/" in override:
            return DerivedName(base_name=base, scoped_name=override)
        return DerivedName(base_name=base, scoped_name=_scoped(base, request.scope))

    base = extract_repo_name(request.repo_url) or _strip_scope(request.name)
    return DerivedName(base_name=base, scoped_name=_scoped(base, request.scope))


def extract_repo_name(url: str | None) -> str | None:
    """Return the repository segment of a git URL, or ``None`` when unparsable.

    Examples
    --------
    >>> extract_repo_name("git+https://github.com/org/repo.git")
    'repo'
    >>> extract_repo_name("git@github.com:org/repo.git")
    'repo'
    >>> extract_repo_name("not a url") is None
    True
    """
    if not url:
        return None
    cleaned = url.removeprefix("git+").removesuffix(".git")
    if match := _REPO_TAIL.search(cleaned):
        return match.group(2).removesuffix(".git") or None
    return None


def is_valid_gpr_name(value: object) -> bool:
    """Return ``True`` for ``@scope/name`` or bare ``name`` overrides."""
    return isinstance(value, str) and bool(
        SCOPED_GPR_NAME.match(value) or UNSCOPED_GPR_NAME.match(value)
    )


def ensure_gpr_name(value: object) -> str | None:
    """Return ``value`` when it is a valid override, otherwise ``None``."""
    return value if is_valid_gpr_name(value) else None  # type: ignore[return-value]


def _strip_scope(name: str) -> str:
    # ``@s/name`` -> ``name``; any slash-bearing name keeps its last segment.
    if "/" not in name:
        return name
    return name.rsplit("/", 1)[-1] or name


def _scoped(base: str, scope: str | None) -> str:
    return f"@{scope}/{base}" if scope else base
