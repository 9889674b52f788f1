"""Public interface for the packlet build and staging helpers."""

__version__ = "0.1.0"

from .builder import BuildOptions, BuildResult, build
from .descriptor import PackageDescriptor, load_descriptor
from .errors import ConfigError, ExternalProcessError, PackletError, PreconditionError
from .manifest import (
    ArtifactEntry,
    ArtifactsManifest,
    list_artifacts,
    read_artifacts_manifest,
    write_artifacts_manifest,
)
from .naming import DerivedName, NameDerivationInput, derive_scoped_name, extract_repo_name
from .staging import PackOutcome, PackStatus, StagingOptions, StagingResult, awaken_gpr
from .validator import DistValidation, validate_dist

__all__ = [
    "ArtifactEntry",
    "ArtifactsManifest",
    "BuildOptions",
    "BuildResult",
    "ConfigError",
    "DerivedName",
    "DistValidation",
    "ExternalProcessError",
    "NameDerivationInput",
    "PackOutcome",
    "PackStatus",
    "PackageDescriptor",
    "PackletError",
    "PreconditionError",
    "StagingOptions",
    "StagingResult",
    "awaken_gpr",
    "build",
    "derive_scoped_name",
    "extract_repo_name",
    "list_artifacts",
    "load_descriptor",
    "read_artifacts_manifest",
    "validate_dist",
    "write_artifacts_manifest",
]
