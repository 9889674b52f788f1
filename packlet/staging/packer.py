"""Run the external packer and relocate the archive it produces.

Packing never aborts staging: every failure mode is reported as a
:class:`PackOutcome` that the pipeline records and moves past.
"""

from __future__ import annotations

import dataclasses
import enum
import shutil
import sys
import typing as typ
from pathlib import Path

from ..errors import ExternalProcessError
from ..process import CaptureRunner, run_captured

__all__ = [
    "PackOutcome",
    "PackStatus",
    "fallback_archive_name",
    "pack_directory",
]


class PackStatus(enum.Enum):
    """Result categories for a single packer invocation."""

    PACKED = "packed"
    MISSING = "missing"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclasses.dataclass(slots=True, frozen=True)
class PackOutcome:
    """Describe what happened when packing one directory.

    Attributes
    ----------
    status : PackStatus
        ``PACKED`` when an archive was moved into the artifacts directory,
        ``MISSING`` when the packer succeeded but the reported file was not
        found, ``SKIPPED`` when packing was disabled, ``FAILED`` when the
        packer could not run or exited non-zero.
    archive : Path | None
        Relocated archive path for ``PACKED`` outcomes.
    detail : str
        Human readable explanation.
    """

    status: PackStatus
    archive: Path | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.status is PackStatus.PACKED


def fallback_archive_name(package_name: str, version: str) -> str:
    """Return the archive name ``npm pack`` would produce for ``package_name``.

    Examples
    --------
    >>> fallback_archive_name("@acme/pkg", "1.0.0")
    'acme-pkg-1.0.0.tgz'
    """
    flattened = package_name.removeprefix("@").replace("/", "-", 1)
    return f"{flattened}-{version}.tgz"


def pack_directory(
    workdir: Path,
    artifacts_dir: Path,
    *,
    fallback: str,
    packer: typ.Sequence[str],
    runner: CaptureRunner = run_captured,
) -> PackOutcome:
    """Pack ``workdir`` and move the archive into ``artifacts_dir``.

    The archive name is the last non-empty line the packer prints; when it
    prints nothing, ``fallback`` is assumed.
    """
    try:
        stdout = runner(list(packer), cwd=workdir)
    except ExternalProcessError as exc:
        print(f"[gpr] packer failed in {workdir}: {exc}", file=sys.stderr)
        return PackOutcome(PackStatus.FAILED, detail=str(exc))
    except OSError as exc:
        print(f"[gpr] packer could not start in {workdir}: {exc}", file=sys.stderr)
        return PackOutcome(PackStatus.FAILED, detail=str(exc))

    reported = _last_line(stdout)
    archive_name = Path(reported).name if reported else fallback
    source = workdir / archive_name
    if not source.is_file():
        detail = f"packer reported {archive_name} but it was not found in {workdir}"
        print(f"[gpr] {detail}", file=sys.stderr)
        return PackOutcome(PackStatus.MISSING, detail=detail)

    destination = artifacts_dir / archive_name
    try:
        shutil.move(source, destination)
    except OSError as exc:
        print(f"[gpr] could not move {source} to {destination}: {exc}", file=sys.stderr)
        return PackOutcome(PackStatus.FAILED, detail=str(exc))
    return PackOutcome(PackStatus.PACKED, archive=destination, detail=archive_name)


def _last_line(text: str) -> str:
    lines = [line.strip() for line in text.strip().splitlines() if line.strip()]
    return lines[-1] if lines else ""
