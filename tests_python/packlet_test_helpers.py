"""Shared helpers for the packlet test suites."""

from __future__ import annotations

import json
import typing as typ
from pathlib import Path

from packlet.errors import ExternalProcessError

__all__ = [
    "DEFAULT_DIST_FILES",
    "FakePacker",
    "RecordingRunner",
    "write_json",
    "write_package",
]

DEFAULT_DIST_FILES = ("index.js", "index.mjs", "index.d.ts")


def write_json(path: Path, data: object) -> Path:
    """Write ``data`` as indented JSON to ``path``, creating parents."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def write_package(
    root: Path,
    descriptor: dict[str, typ.Any],
    *,
    dist_files: typ.Iterable[str] | None = DEFAULT_DIST_FILES,
) -> Path:
    """Populate ``root`` with ``package.json`` and, optionally, ``dist`` files.

    Parameters
    ----------
    root : Path
        Package root to populate.
    descriptor : dict[str, Any]
        Content written to ``package.json``.
    dist_files : Iterable[str] | None
        File names created below ``dist``; ``None`` leaves ``dist`` absent.
    """
    root.mkdir(parents=True, exist_ok=True)
    write_json(root / "package.json", descriptor)
    if dist_files is not None:
        dist = root / "dist"
        dist.mkdir(parents=True, exist_ok=True)
        for name in dist_files:
            target = dist / name
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(f"// {name}\n", encoding="utf-8")
    return root


class FakePacker:
    """Stand-in for ``npm pack`` that writes an archive into ``cwd``.

    The archive name is derived from the ``package.json`` found in ``cwd``
    the way ``npm pack`` names tarballs, unless ``report`` overrides the
    printed line.
    """

    def __init__(self, *, report: str | None = None, fail_in: Path | None = None) -> None:
        self.report = report
        self.fail_in = fail_in
        self.calls: list[tuple[list[str], Path | None]] = []

    def __call__(self, argv: typ.Sequence[str], *, cwd: Path | None = None) -> str:
        self.calls.append((list(argv), cwd))
        assert cwd is not None, "packer must run in an explicit directory"
        if self.fail_in is not None and cwd == self.fail_in:
            raise ExternalProcessError(list(argv), 1)
        data = json.loads((cwd / "package.json").read_text(encoding="utf-8"))
        flattened = data["name"].removeprefix("@").replace("/", "-")
        archive = f"{flattened}-{data['version']}.tgz"
        (cwd / archive).write_bytes(f"archive:{data['name']}".encode())
        if self.report is not None:
            return self.report
        return f"npm notice\n{archive}\n"


class RecordingRunner:
    """Record foreground invocations and optionally fail on one of them."""

    def __init__(self, *, fail_on: str | None = None, exit_code: int = 2) -> None:
        self.fail_on = fail_on
        self.exit_code = exit_code
        self.calls: list[list[str]] = []

    def __call__(self, argv: typ.Sequence[str], *, cwd: Path | None = None) -> None:
        self.calls.append(list(argv))
        if self.fail_on is not None and self.fail_on in argv:
            raise ExternalProcessError(list(argv), self.exit_code)
        for arg in argv:
            if arg.startswith("--outfile="):
                outfile = Path(arg.removeprefix("--outfile="))
                outfile.parent.mkdir(parents=True, exist_ok=True)
                outfile.write_text("// bundle\n", encoding="utf-8")
