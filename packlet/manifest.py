"""Enumerate produced archives and record them in ``artifacts.json``.

The manifest is the hand-off point for release tooling: it names every
archive left in the artifacts directory together with its size and SHA-512
digest. It is rebuilt from scratch on every staging run.
"""

from __future__ import annotations

import dataclasses
import json
import typing as typ
from pathlib import Path

from .checksum_utils import file_digest
from .errors import ConfigError

__all__ = [
    "ARCHIVE_SUFFIX",
    "MANIFEST_FILENAME",
    "SCHEMA_VERSION",
    "ArtifactEntry",
    "ArtifactsManifest",
    "list_artifacts",
    "read_artifacts_manifest",
    "write_artifacts_manifest",
]

ARCHIVE_SUFFIX = ".tgz"
MANIFEST_FILENAME = "artifacts.json"
SCHEMA_VERSION = 1


@dataclasses.dataclass(slots=True, frozen=True)
class ArtifactEntry:
    """Describe a single archive inside the artifacts directory."""

    file: str
    size: int
    sha512: str

    def as_dict(self) -> dict[str, typ.Any]:
        return {"file": self.file, "size": self.size, "sha512": self.sha512}


@dataclasses.dataclass(slots=True, frozen=True)
class ArtifactsManifest:
    """Version 1 of the artifacts manifest.

    Attributes
    ----------
    package_name : str
        Package short name without a namespace.
    scoped_name : str
        Final package name, including ``@scope/`` when present.
    version : str
        Package version.
    artifacts : tuple[ArtifactEntry, ...]
        Archives recorded for this run.
    schema_version : int
        Always :data:`SCHEMA_VERSION`.
    """

    package_name: str
    scoped_name: str
    version: str
    artifacts: tuple[ArtifactEntry, ...] = ()
    schema_version: int = SCHEMA_VERSION

    def as_dict(self) -> dict[str, typ.Any]:
        """Return the JSON shape written to ``artifacts.json``."""
        return {
            "schemaVersion": self.schema_version,
            "packageName": self.package_name,
            "scopedName": self.scoped_name,
            "version": self.version,
            "artifacts": [entry.as_dict() for entry in self.artifacts],
        }

    def to_json(self, *, indent: int | None = 2) -> str:
        return json.dumps(self.as_dict(), indent=indent)

    def write_to(self, path: Path) -> Path:
        """Write the manifest to ``path``, replacing any existing file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(), encoding="utf-8")
        return path


def list_artifacts(artifacts_dir: Path) -> list[ArtifactEntry]:
    """Return entries for the ``.tgz`` files in ``artifacts_dir``.

    Parameters
    ----------
    artifacts_dir : Path
        Directory holding produced archives.

    Returns
    -------
    list[ArtifactEntry]
        Entries sorted by file name; empty when ``artifacts_dir`` does not
        exist.

    Examples
    --------
    >>> list_artifacts(Path("/nonexistent"))
    []
    """
    if not artifacts_dir.is_dir():
        return []
    return [
        ArtifactEntry(
            file=path.name,
            size=path.stat().st_size,
            sha512=file_digest(path),
        )
        for path in sorted(artifacts_dir.iterdir())
        if path.is_file() and path.name.endswith(ARCHIVE_SUFFIX)
    ]


def write_artifacts_manifest(
    artifacts_dir: Path,
    *,
    package_name: str,
    scoped_name: str,
    version: str,
    artifacts: typ.Iterable[ArtifactEntry] | None = None,
) -> ArtifactsManifest:
    """Write ``artifacts.json`` into ``artifacts_dir`` and return the manifest.

    When ``artifacts`` is omitted the directory is scanned with
    :func:`list_artifacts`. Any existing manifest file is overwritten.
    """
    entries = list_artifacts(artifacts_dir) if artifacts is None else artifacts
    manifest = ArtifactsManifest(
        package_name=package_name,
        scoped_name=scoped_name,
        version=version,
        artifacts=tuple(entries),
    )
    manifest.write_to(artifacts_dir / MANIFEST_FILENAME)
    return manifest


def read_artifacts_manifest(path: Path) -> ArtifactsManifest:
    """Load a manifest previously written by :func:`write_artifacts_manifest`.

    Raises
    ------
    FileNotFoundError
        Raised when ``path`` does not exist.
    ConfigError
        Raised when the content is not a supported manifest.
    """
    if not path.is_file():
        message = f"Manifest {path} does not exist"
        raise FileNotFoundError(message)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        message = f"Failed to parse manifest {path}: {exc}"
        raise ConfigError(message) from exc
    if not isinstance(data, dict):
        message = f"Manifest {path} must contain a JSON object"
        raise ConfigError(message)
    if (schema := data.get("schemaVersion")) != SCHEMA_VERSION:
        message = f"Unsupported manifest schemaVersion {schema!r} in {path}"
        raise ConfigError(message)
    try:
        entries = tuple(
            ArtifactEntry(
                file=str(item["file"]),
                size=int(item["size"]),
                sha512=str(item["sha512"]),
            )
            for item in data.get("artifacts", [])
        )
        return ArtifactsManifest(
            package_name=data["packageName"],
            scoped_name=data["scopedName"],
            version=data["version"],
            artifacts=entries,
        )
    except (KeyError, TypeError, ValueError) as exc:
        message = f"Malformed manifest {path}: {exc}"
        raise ConfigError(message) from exc
