"""Environment helpers shared by the staging and build commands."""

from __future__ import annotations

import dataclasses
import os
import sys
import typing as typ

__all__ = ["EnvironmentSnapshot"]


@dataclasses.dataclass(slots=True, frozen=True)
class EnvironmentSnapshot:
    """Environment-derived staging overrides captured once per run.

    Attributes
    ----------
    scope : str | None
        ``GPR_SCOPE``; namespace applied to the staged package.
    registry : str | None
        ``GPR_REGISTRY``; registry URL written to ``publishConfig``.
    include_readme : str | None
        ``GPR_INCLUDE_README``; raw string, ``"true"`` enables the copy.
    include_license : str | None
        ``GPR_INCLUDE_LICENSE``; raw string, ``"true"`` enables the copy.
    name : str | None
        ``GPR_NAME``; package name override.
    skip_pack : bool
        ``True`` when ``GPR_SKIP_PACK`` is ``"true"`` or when running in CI
        on Windows, where spawning the packer is slow and unreliable.
    """

    scope: str | None = None
    registry: str | None = None
    include_readme: str | None = None
    include_license: str | None = None
    name: str | None = None
    skip_pack: bool = False

    @classmethod
    def capture(
        cls,
        environ: typ.Mapping[str, str] | None = None,
        *,
        platform: str | None = None,
    ) -> EnvironmentSnapshot:
        """Read the ``GPR_*`` variables from ``environ`` (``os.environ`` by default)."""
        env = os.environ if environ is None else environ
        is_windows = (platform or sys.platform) == "win32"
        in_ci = env.get("CI") == "true"
        return cls(
            scope=env.get("GPR_SCOPE") or None,
            registry=env.get("GPR_REGISTRY") or None,
            include_readme=env.get("GPR_INCLUDE_README"),
            include_license=env.get("GPR_INCLUDE_LICENSE"),
            name=env.get("GPR_NAME") or None,
            skip_pack=env.get("GPR_SKIP_PACK") == "true" or (is_windows and in_ci),
        )
