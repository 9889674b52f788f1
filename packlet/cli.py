"""Command-line entry point for packlet.

Examples
--------
Build the package, check the output and stage the scoped variant::

    packlet build --cjs
    packlet validate
    GPR_SCOPE=acme packlet gpr --json

Inspect the archives produced by the last staging run::

    packlet list-artifacts --artifacts .artifacts
"""

from __future__ import annotations

import json
import sys
import typing as typ
from pathlib import Path

from cyclopts import App, Parameter

from . import __version__
from .builder import BuildOptions, build
from .descriptor import load_descriptor
from .errors import PackletError
from .manifest import ArtifactsManifest, list_artifacts
from .naming import ensure_gpr_name
from .staging import StagingOptions, StagingResult, awaken_gpr
from .validator import validate_dist

__all__ = ["app", "main"]

app = App(name="packlet", help="Packing and artifact utilities.", version=__version__)

JsonFlag = typ.Annotated[bool, Parameter(name="--json")]


def _emit_json(data: object) -> None:
    print(json.dumps(data))


def _split_list(values: typ.Iterable[str]) -> list[str]:
    return [item.strip() for value in values for item in value.split(",") if item.strip()]


def _report_failure(exc: Exception) -> int:
    print(exc, file=sys.stderr)
    return 1


@app.command(name="build")
def build_command(
    *,
    entry: str = "src/index.ts",
    outdir: str = "dist",
    formats: str = "esm",
    cjs: bool = False,
    sourcemap: str = "none",
    types: bool = True,
    target: str = "node",
    exec_js: bool = False,
    exec_cjs: bool = False,
    minify: bool = True,
    external: list[str] | None = None,
    external_auto: bool = False,
    root: Path | None = None,
) -> int:
    """Build ESM (default) and emit types; add CommonJS via --cjs.

    Parameters
    ----------
    entry:
        Entry file.
    outdir:
        Output directory.
    formats:
        Comma-separated formats: esm,cjs.
    cjs:
        Also emit CommonJS output.
    sourcemap:
        external | none. 'inline' is coerced to external.
    types:
        Emit .d.ts declarations.
    target:
        Build target.
    exec_js:
        chmod +x the built entry (prefers index.mjs, falls back to index.cjs).
    exec_cjs:
        Compatibility mode: chmod +x index.cjs, falling back to index.mjs.
    minify:
        Minify bundles.
    external:
        Package names to leave unbundled (repeatable, comma-separated).
    external_auto:
        Externalise all dependencies and peerDependencies.
    root:
        Package root (default: current directory).
    """
    selected = _split_list([formats])
    if cjs and "cjs" not in selected:
        selected.append("cjs")
    try:
        options = BuildOptions(
            entry=entry,
            outdir=outdir,
            formats=tuple(selected),
            sourcemap=sourcemap,
            types=types,
            target=target,
            exec_js=exec_js,
            exec_cjs=exec_cjs,
            minify=minify,
            external="auto" if external_auto else _split_list(external or []),
        )
        build(options, cwd=root)
    except (PackletError, OSError) as exc:
        return _report_failure(exc)
    return 0


@app.command(name="gpr")
def gpr_command(
    *,
    root: Path | None = None,
    dist: Path | None = None,
    artifacts: Path | None = None,
    gpr_dir: Path | None = None,
    scope: str | None = None,
    registry: str | None = None,
    name: str | None = None,
    include_readme: bool | None = None,
    include_license: bool | None = None,
    json_output: JsonFlag = False,
    manifest: Path | None = None,
) -> int:
    """Prepare a GitHub Packages scoped build and tarballs.

    Parameters
    ----------
    root:
        Root directory (default: current directory).
    dist:
        Built output directory (default: dist).
    artifacts:
        Directory for tarballs (default: .artifacts).
    gpr_dir:
        Directory to stage the GPR package (default: .gpr).
    scope:
        GitHub Packages scope (default: env GPR_SCOPE or kazvizian).
    registry:
        Registry URL (default: env GPR_REGISTRY or https://npm.pkg.github.com/).
    name:
        Override the package name for the scoped package.
    include_readme:
        Include README.md.
    include_license:
        Include LICENSE.
    json_output:
        Print the artifacts manifest as a single JSON line.
    manifest:
        Also write the artifacts manifest to this file.
    """
    options = StagingOptions(
        root_dir=root,
        dist_dir=dist,
        artifacts_dir=artifacts,
        gpr_dir=gpr_dir,
        scope=scope,
        registry=registry,
        name_override=name,
        include_readme=include_readme,
        include_license=include_license,
    )
    try:
        result = awaken_gpr(options)
        _report_staging(result, json_output=json_output, manifest_path=manifest)
    except (PackletError, OSError) as exc:
        return _report_failure(exc)
    return 0


@app.command(name="prepare")
def prepare_command(
    *,
    root: Path | None = None,
    dist: Path | None = None,
    artifacts: Path | None = None,
    gpr_dir: Path | None = None,
    scope: str | None = None,
    registry: str | None = None,
    name: str | None = None,
    json_output: JsonFlag = False,
    manifest: Path | None = None,
) -> int:
    """Stage the GPR variant when package.json opts in via packlet.gpr.

    Parameters
    ----------
    root:
        Root directory (default: current directory).
    dist:
        Built output directory (default: dist).
    artifacts:
        Directory for tarballs (default: .artifacts).
    gpr_dir:
        Directory to stage the GPR package (default: .gpr).
    scope:
        GitHub Packages scope (default: env GPR_SCOPE or kazvizian).
    registry:
        Registry URL (default: env GPR_REGISTRY or https://npm.pkg.github.com/).
    name:
        Override the package name; defaults to packlet.gprName.
    json_output:
        Print the artifacts manifest as a single JSON line.
    manifest:
        Also write the artifacts manifest to this file.
    """
    root_dir = (root or Path.cwd()).resolve()
    dist_dir = (root_dir / (dist or Path("dist"))).resolve()
    try:
        descriptor = load_descriptor(root_dir)
        settings = descriptor.packlet
        if settings is None or not settings.gpr:
            print(
                "[gpr:prepare] skip: packlet.gpr flag not enabled in "
                f"{root_dir / 'package.json'}"
            )
            return 0
        if not dist_dir.is_dir():
            print(f"[gpr:prepare] skip: no dist at {dist_dir}")
            return 0

        name_override = name or settings.gpr_name
        if name_override and ensure_gpr_name(name_override) is None:
            print(
                f"[gpr:prepare] invalid gprName '{name_override}' "
                "(expected @scope/name or unscoped base); ignoring override.",
                file=sys.stderr,
            )
            name_override = None

        result = awaken_gpr(
            StagingOptions(
                root_dir=root_dir,
                dist_dir=dist_dir,
                artifacts_dir=artifacts,
                gpr_dir=gpr_dir,
                scope=scope,
                registry=registry,
                name_override=name_override,
            )
        )
        _report_staging(result, json_output=json_output, manifest_path=manifest)
    except (PackletError, OSError) as exc:
        return _report_failure(exc)
    return 0


@app.command(name="validate")
def validate_command(
    *,
    root: Path | None = None,
    dist: Path | None = None,
    json_output: JsonFlag = False,
) -> int:
    """Validate that the dist directory contains the expected entry files.

    Parameters
    ----------
    root:
        Root directory (default: current directory).
    dist:
        Dist directory, relative to the root (default: dist).
    json_output:
        Print the result as a single JSON line.
    """
    root_dir = (root or Path.cwd()).resolve()
    result = validate_dist((root_dir / (dist or Path("dist"))).resolve())
    if json_output:
        _emit_json(result.as_dict())
        return 0 if result.ok else 1
    if result.ok:
        print("dist validation: OK")
        return 0
    print(f"Missing files: {', '.join(result.missing)}", file=sys.stderr)
    return 1


@app.command(name="list-artifacts")
def list_artifacts_command(
    *,
    artifacts: Path = Path(".artifacts"),
    json_output: JsonFlag = False,
) -> int:
    """List tarball artifacts in a directory.

    Parameters
    ----------
    artifacts:
        Artifacts directory.
    json_output:
        Print the entries as a single JSON line.
    """
    try:
        entries = list_artifacts(artifacts.resolve())
    except OSError as exc:
        return _report_failure(exc)
    if json_output:
        _emit_json([entry.as_dict() for entry in entries])
    elif not entries:
        print("No artifacts found.")
    else:
        for entry in entries:
            print(f"{entry.file}\t{entry.size} bytes")
    return 0


def _report_staging(
    result: StagingResult, *, json_output: bool, manifest_path: Path | None
) -> ArtifactsManifest:
    manifest = result.manifest
    if manifest_path is not None:
        manifest.write_to(manifest_path.resolve())
    if json_output:
        _emit_json(manifest.as_dict())
    else:
        print(f"Prepared GPR package at {result.gpr_dir}")
        print(f"Artifacts prepared at {result.artifacts_dir}")
    return manifest


def main(argv: typ.Sequence[str] | None = None) -> int:
    """Run the CLI with ``argv`` (defaults to ``sys.argv[1:]``)."""
    result = app(list(argv) if argv is not None else None)
    return result if isinstance(result, int) else 0


if __name__ == "__main__":  # pragma: no cover - exercised via the console script
    raise SystemExit(main())
