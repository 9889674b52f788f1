"""Check a build-output directory for its expected entry files."""

from __future__ import annotations

import dataclasses
import typing as typ
from pathlib import Path

__all__ = ["DEFAULT_EXPECTED", "DistValidation", "validate_dist"]

DEFAULT_EXPECTED: tuple[str, ...] = ("index.js", "index.mjs", "index.d.ts")


@dataclasses.dataclass(slots=True, frozen=True)
class DistValidation:
    """Outcome of :func:`validate_dist`."""

    ok: bool
    missing: list[str]

    def as_dict(self) -> dict[str, typ.Any]:
        return {"ok": self.ok, "missing": list(self.missing)}


def validate_dist(
    dist_dir: Path, expected: typ.Sequence[str] | None = None
) -> DistValidation:
    """Report which of ``expected`` are absent from ``dist_dir``.

    Only existence is checked. ``missing`` keeps the order of ``expected``.

    Examples
    --------
    >>> validate_dist(Path("/nonexistent")).missing
    ['index.js', 'index.mjs', 'index.d.ts']
    """
    names = DEFAULT_EXPECTED if expected is None else tuple(expected)
    missing = [name for name in names if not (dist_dir / name).exists()]
    return DistValidation(ok=not missing, missing=missing)
