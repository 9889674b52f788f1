"""Error types raised by the packlet toolchain."""

from __future__ import annotations

__all__ = [
    "ConfigError",
    "ExternalProcessError",
    "PackletError",
    "PreconditionError",
]


class PackletError(RuntimeError):
    """Base class for failures reported to ``packlet`` callers."""


class PreconditionError(PackletError):
    """Raised when staging starts without a prior successful build."""


class ConfigError(PackletError):
    """Raised when a descriptor, manifest or option set cannot be used."""


class ExternalProcessError(PackletError):
    """Raised when an external command is missing or exits non-zero.

    Parameters
    ----------
    command : list[str]
        Full argument vector of the failing invocation.
    exit_code : int
        Exit status reported by the process (``127`` when it was not found).
    """

    def __init__(self, command: list[str], exit_code: int) -> None:
        self.command = list(command)
        self.exit_code = exit_code
        joined = " ".join(self.command)
        super().__init__(f"Command failed: {joined} (exit {exit_code})")
