"""Package descriptor model and loader.

The descriptor is the subset of a package's ``package.json`` that the staging
pipeline and the build command consume. It is read once per run and never
mutated; the staged copy receives a freshly synthesised mapping instead.

Usage
-----
Load the descriptor of the current package::

    from pathlib import Path
    from packlet.descriptor import load_descriptor

    descriptor = load_descriptor(Path("."))
    print(f"{descriptor.name}@{descriptor.version}")
"""

from __future__ import annotations

import dataclasses
import json
import typing as typ
from pathlib import Path

from .errors import ConfigError

__all__ = [
    "DESCRIPTOR_FILENAME",
    "PackageDescriptor",
    "PackletSettings",
    "load_descriptor",
]

DESCRIPTOR_FILENAME = "package.json"

RepositoryField = str | dict[str, typ.Any] | None


@dataclasses.dataclass(slots=True, frozen=True)
class PackletSettings:
    """The optional ``packlet`` block of a descriptor.

    Attributes
    ----------
    gpr : bool
        Opt-in flag consulted by ``packlet prepare``.
    gpr_name : str | None
        Package name override for the staged variant (``gprName``).
    """

    gpr: bool = False
    gpr_name: str | None = None


@dataclasses.dataclass(slots=True, frozen=True)
class PackageDescriptor:
    """Metadata read from a package's ``package.json``.

    Parameters
    ----------
    name : str
        Package name, possibly already namespaced (``@scope/name``).
    version : str
        Semantic version string.
    description, license, homepage : str | None, optional
        Descriptive fields copied verbatim into the staged descriptor.
    repository : str | dict | None, optional
        Either a plain URL or a ``{type, url, directory}`` mapping.
    author : str | dict | None, optional
        Author string or ``{name, email, url}`` mapping.
    keywords : tuple[str, ...], optional
        Ordered keywords.
    side_effects : bool | None, optional
        Value of ``sideEffects``.
    packlet : PackletSettings | None, optional
        Parsed ``packlet`` configuration block.
    dependencies, peer_dependencies : tuple[str, ...], optional
        Runtime and peer dependency names, in declaration order.

    Examples
    --------
    >>> descriptor = PackageDescriptor.from_mapping(
    ...     {"name": "pkg", "version": "1.0.0", "repository": "https://x/o/pkg"}
    ... )
    >>> descriptor.repository_url
    'https://x/o/pkg'
    """

    name: str
    version: str
    description: str | None = None
    license: str | None = None
    homepage: str | None = None
    repository: RepositoryField = None
    author: str | dict[str, typ.Any] | None = None
    keywords: tuple[str, ...] = ()
    side_effects: bool | None = None
    packlet: PackletSettings | None = None
    dependencies: tuple[str, ...] = ()
    peer_dependencies: tuple[str, ...] = ()

    @classmethod
    def from_mapping(
        cls, data: typ.Mapping[str, typ.Any], source: Path | None = None
    ) -> PackageDescriptor:
        """Build a descriptor from decoded ``package.json`` content."""
        label = source.as_posix() if source is not None else DESCRIPTOR_FILENAME
        _require_strings(data, ("name", "version"), label)
        keywords = data.get("keywords") or ()
        if not isinstance(keywords, list | tuple):
            message = f"'keywords' must be a list in {label}"
            raise ConfigError(message)
        return cls(
            name=data["name"],
            version=data["version"],
            description=data.get("description"),
            license=data.get("license"),
            homepage=data.get("homepage"),
            repository=data.get("repository"),
            author=data.get("author"),
            keywords=tuple(str(keyword) for keyword in keywords),
            side_effects=data.get("sideEffects"),
            packlet=_parse_packlet_block(data.get("packlet")),
            dependencies=_dependency_names(data.get("dependencies")),
            peer_dependencies=_dependency_names(data.get("peerDependencies")),
        )

    @property
    def repository_url(self) -> str | None:
        """Return the repository URL whether ``repository`` is a string or record."""
        repo = self.repository
        if not repo:
            return None
        if isinstance(repo, str):
            return repo
        return repo.get("url") or repo.get("directory") or None


def load_descriptor(root: Path) -> PackageDescriptor:
    """Read ``package.json`` from ``root``.

    Parameters
    ----------
    root : Path
        Package root containing the descriptor file.

    Returns
    -------
    PackageDescriptor
        Parsed descriptor.

    Raises
    ------
    ConfigError
        Raised when the file is absent, is not valid UTF-8 JSON, or lacks a
        name or version.
    """
    path = root / DESCRIPTOR_FILENAME
    try:
        raw = path.read_bytes()
    except FileNotFoundError as exc:
        message = f"Package descriptor not found at {path}"
        raise ConfigError(message) from exc
    try:
        data = json.loads(raw.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        message = f"Failed to parse {path}: {exc}"
        raise ConfigError(message) from exc
    if not isinstance(data, dict):
        message = f"Package descriptor {path} must contain a JSON object"
        raise ConfigError(message)
    return PackageDescriptor.from_mapping(data, path)


def _require_strings(
    data: typ.Mapping[str, typ.Any], keys: tuple[str, ...], label: str
) -> None:
    if missing := [
        key for key in keys if not isinstance(data.get(key), str) or not data[key]
    ]:
        joined = ", ".join(missing)
        message = f"Missing required key(s) {joined} in {label}"
        raise ConfigError(message)


def _parse_packlet_block(value: object) -> PackletSettings | None:
    if not isinstance(value, dict):
        return None
    gpr_name = value.get("gprName")
    return PackletSettings(
        gpr=value.get("gpr") is True,
        gpr_name=gpr_name if isinstance(gpr_name, str) and gpr_name else None,
    )


def _dependency_names(value: object) -> tuple[str, ...]:
    if not isinstance(value, dict):
        return ()
    return tuple(name for name in value if name)
