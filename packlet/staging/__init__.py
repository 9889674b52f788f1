"""Staging pipeline package for the scoped registry variant."""

from .packer import PackOutcome, PackStatus, fallback_archive_name, pack_directory
from .pipeline import StagingResult, awaken_gpr
from .settings import (
    DEFAULT_REGISTRY,
    DEFAULT_SCOPE,
    StagingOptions,
    StagingPaths,
    StagingSettings,
)
from .staged_descriptor import build_staged_descriptor, write_staged_descriptor

__all__ = [
    "DEFAULT_REGISTRY",
    "DEFAULT_SCOPE",
    "PackOutcome",
    "PackStatus",
    "StagingOptions",
    "StagingPaths",
    "StagingResult",
    "StagingSettings",
    "awaken_gpr",
    "build_staged_descriptor",
    "fallback_archive_name",
    "pack_directory",
    "write_staged_descriptor",
]
