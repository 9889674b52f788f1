"""Checksum helpers for produced archives."""

from __future__ import annotations

import hashlib
from pathlib import Path

__all__ = ["DIGEST_ALGORITHM", "file_digest"]

DIGEST_ALGORITHM = "sha512"


def file_digest(path: Path, algorithm: str = DIGEST_ALGORITHM) -> str:
    """Return the hex digest of ``path`` computed with ``algorithm``.

    Parameters
    ----------
    path:
        Path to the file whose contents should be hashed.
    algorithm:
        Hashing algorithm name supported by :mod:`hashlib`. Archives are
        recorded with ``"sha512"``.

    Returns
    -------
    str
        Hex digest of the full file contents.
    """

    hasher = hashlib.new(algorithm)
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(8192), b""):
            hasher.update(chunk)
    return hasher.hexdigest()
