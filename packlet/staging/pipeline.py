"""Stage and pack a scoped variant of a package for an alternate registry."""

from __future__ import annotations

import dataclasses
import typing as typ
from pathlib import Path

from ..descriptor import load_descriptor
from ..environment import EnvironmentSnapshot
from ..errors import PreconditionError
from ..fs_utils import copy_if_present, copy_tree, reset_directory
from ..manifest import ArtifactsManifest, write_artifacts_manifest
from ..naming import NameDerivationInput, derive_scoped_name
from ..process import CaptureRunner, run_captured
from .packer import PackOutcome, PackStatus, fallback_archive_name, pack_directory
from .settings import StagingOptions, StagingPaths, StagingSettings
from .staged_descriptor import build_staged_descriptor, write_staged_descriptor

__all__ = ["StagingResult", "awaken_gpr"]

_AUXILIARY_FILES = (("README.md", "include_readme"), ("LICENSE", "include_license"))


@dataclasses.dataclass(slots=True)
class StagingResult:
    """Outcome of :func:`awaken_gpr`."""

    gpr_dir: Path
    artifacts_dir: Path
    scoped_name: str
    version: str
    manifest: ArtifactsManifest
    pack_outcomes: list[PackOutcome] = dataclasses.field(default_factory=list)


def awaken_gpr(
    options: StagingOptions | None = None,
    *,
    environ: typ.Mapping[str, str] | None = None,
    runner: CaptureRunner = run_captured,
) -> StagingResult:
    """Prepare a registry-scoped copy of the package under ``options.root_dir``.

    The staging and artifacts directories are deleted and recreated, a
    rewritten ``package.json`` and the build output are copied into the
    staging directory, the packer runs once for the root package and once for
    the staged package, and ``artifacts.json`` is written describing whatever
    archives reached the artifacts directory.

    Parameters
    ----------
    options : StagingOptions | None, optional
        Explicit options; defaults apply to every omitted field.
    environ : Mapping[str, str] | None, optional
        Environment to read ``GPR_*`` overrides from. Defaults to
        :data:`os.environ`; it is read once, before any work starts.
    runner : CaptureRunner, optional
        Callable used to invoke the packer.

    Returns
    -------
    StagingResult
        Resolved directories, scoped name, version and the written manifest.

    Raises
    ------
    PreconditionError
        Raised when the build output directory does not exist or overlaps
        the staging directory.
    ConfigError
        Raised when the root ``package.json`` is missing or malformed.
    OSError
        Propagated from directory reset and copy operations.
    """
    options = options or StagingOptions()
    snapshot = EnvironmentSnapshot.capture(environ)
    paths = StagingPaths.resolve(options)

    if not paths.dist_dir.is_dir():
        message = (
            f"Build output not found at {paths.dist_dir}. "
            "Run build before preparing the GPR package."
        )
        raise PreconditionError(message)
    gpr_dir, dist_dir = paths.gpr_dir, paths.dist_dir
    if gpr_dir.is_relative_to(dist_dir) or dist_dir.is_relative_to(gpr_dir):
        message = (
            f"Staging directory {gpr_dir} overlaps the build output "
            f"{dist_dir}; choose a staging directory outside it."
        )
        raise PreconditionError(message)

    reset_directory(paths.gpr_dir)
    reset_directory(paths.artifacts_dir)

    descriptor = load_descriptor(paths.root)
    settings = StagingSettings.resolve(options, snapshot)
    derived = derive_scoped_name(
        NameDerivationInput(
            name=descriptor.name,
            repo_url=descriptor.repository_url,
            override=settings.name_override,
            scope=settings.scope,
        )
    )

    dist_name = paths.dist_dir.name
    staged = build_staged_descriptor(
        descriptor,
        scoped_name=derived.scoped_name,
        registry=settings.registry,
        dist_name=dist_name,
    )
    write_staged_descriptor(paths.gpr_dir, staged)
    copy_tree(paths.dist_dir, paths.gpr_dir / dist_name)

    for filename, flag in _AUXILIARY_FILES:
        if getattr(settings, flag):
            copy_if_present(paths.root / filename, paths.gpr_dir)

    version = descriptor.version
    targets = (
        (paths.root, f"{descriptor.name}-{version}.tgz"),
        (paths.gpr_dir, fallback_archive_name(derived.scoped_name, version)),
    )
    outcomes = [
        _pack(workdir, paths, fallback, settings, runner)
        for workdir, fallback in targets
    ]

    manifest = write_artifacts_manifest(
        paths.artifacts_dir,
        package_name=derived.base_name,
        scoped_name=derived.scoped_name,
        version=version,
    )
    return StagingResult(
        gpr_dir=paths.gpr_dir,
        artifacts_dir=paths.artifacts_dir,
        scoped_name=derived.scoped_name,
        version=version,
        manifest=manifest,
        pack_outcomes=outcomes,
    )


def _pack(
    workdir: Path,
    paths: StagingPaths,
    fallback: str,
    settings: StagingSettings,
    runner: CaptureRunner,
) -> PackOutcome:
    if settings.skip_pack:
        return PackOutcome(PackStatus.SKIPPED, detail="packing disabled")
    return pack_directory(
        workdir,
        paths.artifacts_dir,
        fallback=fallback,
        packer=settings.packer,
        runner=runner,
    )
