"""Options accepted by the staging pipeline and their resolution.

Callers describe a run with :class:`StagingOptions`. The pipeline combines
those options with an :class:`~packlet.environment.EnvironmentSnapshot`
captured once at the start of the run; environment values take precedence
over explicit options, which take precedence over built-in defaults.
"""

from __future__ import annotations

import dataclasses
import sys
from pathlib import Path

from ..environment import EnvironmentSnapshot
from ..naming import ensure_gpr_name

__all__ = [
    "DEFAULT_PACKER",
    "DEFAULT_REGISTRY",
    "DEFAULT_SCOPE",
    "StagingOptions",
    "StagingPaths",
    "StagingSettings",
]

DEFAULT_SCOPE = "kazvizian"
DEFAULT_REGISTRY = "https://npm.pkg.github.com/"
DEFAULT_PACKER = ("npm", "pack")


@dataclasses.dataclass(slots=True)
class StagingOptions:
    """Explicit inputs for :func:`~packlet.staging.awaken_gpr`.

    Parameters
    ----------
    root_dir : Path | None, optional
        Package root. Defaults to the current working directory.
    gpr_dir : Path | None, optional
        Staging directory. Defaults to ``<root>/.gpr``.
    artifacts_dir : Path | None, optional
        Directory receiving archives. Defaults to ``<root>/.artifacts``.
    dist_dir : Path | None, optional
        Build output to publish. Defaults to ``<root>/dist``.
    scope : str | None, optional
        Namespace for the staged package; ``GPR_SCOPE`` overrides it.
    registry : str | None, optional
        Registry URL; ``GPR_REGISTRY`` overrides it.
    include_readme, include_license : bool | None, optional
        Copy ``README.md`` / ``LICENSE`` when present. Both default to ``True``
        and are overridden by ``GPR_INCLUDE_README`` / ``GPR_INCLUDE_LICENSE``.
    name_override : str | None, optional
        Package name override; ``GPR_NAME`` overrides it.
    packer : tuple[str, ...], default=("npm", "pack")
        Command used to produce archives.
    skip_pack : bool, default=False
        Skip both packer invocations regardless of the environment.

    Relative paths are resolved against :attr:`root_dir`.
    """

    root_dir: Path | None = None
    gpr_dir: Path | None = None
    artifacts_dir: Path | None = None
    dist_dir: Path | None = None
    scope: str | None = None
    registry: str | None = None
    include_readme: bool | None = None
    include_license: bool | None = None
    name_override: str | None = None
    packer: tuple[str, ...] = DEFAULT_PACKER
    skip_pack: bool = False


@dataclasses.dataclass(slots=True, frozen=True)
class StagingPaths:
    """Absolute locations used by one staging run."""

    root: Path
    gpr_dir: Path
    artifacts_dir: Path
    dist_dir: Path

    @classmethod
    def resolve(cls, options: StagingOptions) -> StagingPaths:
        root = Path(options.root_dir or Path.cwd()).resolve()

        def _under_root(value: Path | None, default: str) -> Path:
            return (root / (value if value is not None else default)).resolve()

        return cls(
            root=root,
            gpr_dir=_under_root(options.gpr_dir, ".gpr"),
            artifacts_dir=_under_root(options.artifacts_dir, ".artifacts"),
            dist_dir=_under_root(options.dist_dir, "dist"),
        )


@dataclasses.dataclass(slots=True, frozen=True)
class StagingSettings:
    """Configuration values after applying environment and default fallbacks."""

    scope: str
    registry: str
    include_readme: bool
    include_license: bool
    name_override: str | None
    skip_pack: bool
    packer: tuple[str, ...]

    @classmethod
    def resolve(
        cls, options: StagingOptions, snapshot: EnvironmentSnapshot
    ) -> StagingSettings:
        """Combine ``options`` with ``snapshot``.

        Examples
        --------
        >>> settings = StagingSettings.resolve(
        ...     StagingOptions(scope="acme"), EnvironmentSnapshot(scope="env")
        ... )
        >>> settings.scope
        'env'
        """
        return cls(
            scope=snapshot.scope or options.scope or DEFAULT_SCOPE,
            registry=snapshot.registry or options.registry or DEFAULT_REGISTRY,
            include_readme=_flag(snapshot.include_readme, options.include_readme),
            include_license=_flag(snapshot.include_license, options.include_license),
            name_override=_validated_override(snapshot.name or options.name_override),
            skip_pack=options.skip_pack or snapshot.skip_pack,
            packer=tuple(options.packer) or DEFAULT_PACKER,
        )


def _flag(env_value: str | None, option: bool | None) -> bool:
    # Environment strings enable the flag only when exactly "true".
    if env_value is not None:
        return env_value == "true"
    return True if option is None else option


def _validated_override(value: str | None) -> str | None:
    if not value or not value.strip():
        return None
    if (name := ensure_gpr_name(value.strip())) is None:
        print(
            f"[gpr] invalid name override '{value}' "
            "(expected @scope/name or unscoped base); ignoring override.",
            file=sys.stderr,
        )
    return name
