"""Filesystem helpers for staging."""

from __future__ import annotations

import shutil
from pathlib import Path

__all__ = ["copy_if_present", "copy_tree", "reset_directory"]


def reset_directory(path: Path) -> None:
    """Delete ``path`` if it exists and recreate it empty.

    Examples
    --------
    >>> import tempfile
    >>> stage = Path(tempfile.mkdtemp()) / "stage"
    >>> (stage / "old").mkdir(parents=True, exist_ok=True)
    >>> reset_directory(stage)
    >>> list(stage.iterdir())
    []
    """

    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True, exist_ok=True)


def copy_tree(source: Path, destination: Path) -> list[Path]:
    """Mirror the directories and regular files of ``source`` into ``destination``.

    Symlinks and special files are skipped, as is ``destination`` itself when
    it lies inside ``source``. Returns the copied file paths in walk order.
    """

    destination.mkdir(parents=True, exist_ok=True)
    copied: list[Path] = []
    for entry in sorted(source.iterdir()):
        target = destination / entry.name
        if entry.is_symlink() or entry.resolve() == destination.resolve():
            continue
        if entry.is_dir():
            copied.extend(copy_tree(entry, target))
        elif entry.is_file():
            shutil.copy2(entry, target)
            copied.append(target)
    return copied


def copy_if_present(source: Path, destination_dir: Path) -> Path | None:
    """Copy ``source`` into ``destination_dir`` when it is an existing file."""

    if not source.is_file():
        return None
    target = destination_dir / source.name
    shutil.copy2(source, target)
    return target
