"""Invoke external tools (bundler, type emitter, packer) through plumbum."""

from __future__ import annotations

import sys
import typing as typ
from pathlib import Path

from plumbum import FG, local
from plumbum.commands import CommandNotFound, ProcessExecutionError

from .errors import ExternalProcessError

__all__ = [
    "CaptureRunner",
    "ForegroundRunner",
    "run_captured",
    "run_foreground",
]

_NOT_FOUND_EXIT = 127


class ForegroundRunner(typ.Protocol):
    def __call__(self, argv: typ.Sequence[str], *, cwd: Path | None = None) -> None: ...


class CaptureRunner(typ.Protocol):
    def __call__(self, argv: typ.Sequence[str], *, cwd: Path | None = None) -> str: ...


def run_foreground(argv: typ.Sequence[str], *, cwd: Path | None = None) -> None:
    """Run ``argv`` with inherited stdio and wait for it to exit.

    Parameters
    ----------
    argv : Sequence[str]
        Program name followed by its arguments.
    cwd : Path | None, optional
        Working directory for the child; defaults to the current directory.

    Raises
    ------
    ExternalProcessError
        Raised when the program cannot be found or exits non-zero.
    """
    command = _bind(argv)
    print("→", " ".join(argv))
    try:
        with _workdir(cwd):
            command & FG
    except ProcessExecutionError as exc:
        raise ExternalProcessError(list(argv), int(exc.retcode or 1)) from exc


def run_captured(argv: typ.Sequence[str], *, cwd: Path | None = None) -> str:
    """Run ``argv`` and return its standard output.

    Standard error is relayed to this process's stderr.

    Raises
    ------
    ExternalProcessError
        Raised when the program cannot be found or exits non-zero.
    """
    command = _bind(argv)
    with _workdir(cwd):
        retcode, stdout, stderr = command.run(retcode=None)
    if stderr:
        print(stderr, end="", file=sys.stderr)
    if retcode != 0:
        raise ExternalProcessError(list(argv), int(retcode or 1))
    return stdout


def _bind(argv: typ.Sequence[str]) -> typ.Any:
    if not argv:
        message = "Cannot run an empty command"
        raise ValueError(message)
    program, *args = argv
    try:
        return local[program][args]
    except CommandNotFound as exc:
        raise ExternalProcessError(list(argv), _NOT_FOUND_EXIT) from exc


def _workdir(cwd: Path | None) -> typ.ContextManager[typ.Any]:
    return local.cwd(str(cwd if cwd is not None else Path.cwd()))
