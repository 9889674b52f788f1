"""Build module outputs with the external bundler and type emitter.

Examples
--------
Build ESM and CommonJS bundles plus declarations for the package in the
current directory::

    from packlet.builder import BuildOptions, build

    build(BuildOptions(formats=("esm", "cjs")))
"""

from __future__ import annotations

import dataclasses
import json
import sys
import typing as typ
from pathlib import Path

from .descriptor import DESCRIPTOR_FILENAME
from .errors import ConfigError
from .process import ForegroundRunner, run_foreground

__all__ = [
    "FORMAT_EXTENSIONS",
    "BuildOptions",
    "BuildResult",
    "build",
    "bundler_args",
    "resolve_externals",
]

FORMAT_EXTENSIONS: dict[str, str] = {"esm": "mjs", "cjs": "cjs"}
SOURCEMAP_MODES = ("none", "external", "inline")
EXECUTABLE_MODE = 0o755

External = typ.Sequence[str] | typ.Literal["auto"] | None


@dataclasses.dataclass(slots=True)
class BuildOptions:
    """Inputs for :func:`build`.

    Parameters
    ----------
    entry : str, default="src/index.ts"
        Source entry point, relative to the working directory.
    outdir : str, default="dist"
        Output directory, relative to the working directory.
    formats : tuple[str, ...], default=("esm",)
        Module formats to emit; each of ``"esm"`` and ``"cjs"``.
    sourcemap : str, default="none"
        ``"none"`` or ``"external"``. ``"inline"`` is emitted as external.
    types : bool, default=True
        Emit ``.d.ts`` declarations with ``tsc``.
    target : str, default="node"
        Bundler target platform.
    exec_js : bool, default=False
        Mark ``index.mjs`` executable, falling back to ``index.cjs``.
    exec_cjs : bool, default=False
        Compatibility mode: mark ``index.cjs`` executable, falling back to
        ``index.mjs``.
    minify : bool, default=True
        Pass ``--minify`` to the bundler.
    external : Sequence[str] | "auto" | None, optional
        Package names left unbundled. ``"auto"`` externalises every runtime
        and peer dependency listed in ``package.json``.
    bundler : str, default="bun"
        Bundler executable.
    tsconfig : str, default="tsconfig.json"
        Configuration passed to the type emitter.
    """

    entry: str = "src/index.ts"
    outdir: str = "dist"
    formats: tuple[str, ...] = ("esm",)
    sourcemap: str = "none"
    types: bool = True
    target: str = "node"
    exec_js: bool = False
    exec_cjs: bool = False
    minify: bool = True
    external: External = None
    bundler: str = "bun"
    tsconfig: str = "tsconfig.json"

    def __post_init__(self) -> None:
        if unknown := sorted(set(self.formats) - FORMAT_EXTENSIONS.keys()):
            message = f"Unsupported output format(s): {', '.join(unknown)}"
            raise ConfigError(message)
        if self.sourcemap not in SOURCEMAP_MODES:
            message = (
                f"Unsupported sourcemap mode {self.sourcemap!r}; "
                "expected none or external"
            )
            raise ConfigError(message)

    @property
    def sourcemap_mode(self) -> str:
        """Sourcemap mode passed to the bundler (``inline`` becomes ``external``)."""
        return "external" if self.sourcemap == "inline" else self.sourcemap


@dataclasses.dataclass(slots=True)
class BuildResult:
    """Files produced by :func:`build`."""

    outdir: Path
    outputs: list[Path]
    executable: Path | None = None


def build(
    options: BuildOptions | None = None,
    *,
    cwd: Path | None = None,
    runner: ForegroundRunner = run_foreground,
) -> BuildResult:
    """Bundle each requested format, then emit declarations.

    Raises
    ------
    ExternalProcessError
        Raised when the bundler or the type emitter is missing or exits
        non-zero; the error carries the command and its exit code.
    """
    options = options or BuildOptions()
    workdir = Path(cwd or Path.cwd()).resolve()
    entry = workdir / options.entry
    outdir = workdir / options.outdir
    outdir.mkdir(parents=True, exist_ok=True)
    externals = resolve_externals(options.external, workdir)

    outputs: list[Path] = []
    for fmt in options.formats:
        outfile = outdir / f"index.{FORMAT_EXTENSIONS[fmt]}"
        runner(
            [options.bundler, *bundler_args(entry, outfile, fmt, options, externals)],
            cwd=workdir,
        )
        outputs.append(outfile)

    if options.types:
        runner(
            [
                options.bundler,
                "x",
                "tsc",
                "-p",
                options.tsconfig,
                "--emitDeclarationOnly",
                "--outDir",
                options.outdir,
            ],
            cwd=workdir,
        )

    executable = _mark_executable(outdir, options)
    return BuildResult(outdir=outdir, outputs=outputs, executable=executable)


def bundler_args(
    entry: Path,
    outfile: Path,
    fmt: str,
    options: BuildOptions,
    externals: typ.Sequence[str],
) -> list[str]:
    """Return the bundler arguments for one output format.

    Examples
    --------
    >>> bundler_args(
    ...     Path("src/index.ts"), Path("dist/index.mjs"), "esm", BuildOptions(), ["react"]
    ... )  # doctest: +NORMALIZE_WHITESPACE
    ['build', 'src/index.ts', '--outfile=dist/index.mjs', '--format=esm',
     '--target=node', '--sourcemap=none', '--minify', '--external', 'react']
    """
    args = [
        "build",
        entry.as_posix(),
        f"--outfile={outfile.as_posix()}",
        f"--format={fmt}",
        f"--target={options.target}",
        f"--sourcemap={options.sourcemap_mode}",
    ]
    if options.minify:
        args.append("--minify")
    for name in externals:
        if name:
            args.extend(["--external", name])
    return args


def resolve_externals(external: External, workdir: Path) -> list[str]:
    """Return the package names to externalise.

    ``"auto"`` reads the keys of ``dependencies`` and ``peerDependencies``
    from the raw ``workdir/package.json``; no other field is required. An
    unreadable file yields an empty list.
    """
    if external == "auto":
        return _dependency_names(workdir / DESCRIPTOR_FILENAME)
    if external is None:
        return []
    return [name for name in external if name]


def _mark_executable(outdir: Path, options: BuildOptions) -> Path | None:
    if options.exec_cjs:
        preference = ("index.cjs", "index.mjs")
    elif options.exec_js:
        preference = ("index.mjs", "index.cjs")
    else:
        return None
    target = next(
        (outdir / name for name in preference if (outdir / name).is_file()), None
    )
    if target is None:
        return None
    try:
        target.chmod(EXECUTABLE_MODE)
    except OSError as exc:
        print(f"[build] could not mark {target} executable: {exc}", file=sys.stderr)
        return None
    return target


def _dependency_names(path: Path) -> list[str]:
    try:
        data = json.loads(path.read_bytes().decode("utf-8"))
    except (OSError, ValueError) as exc:
        print(f"[build] cannot read dependencies from {path}: {exc}", file=sys.stderr)
        return []
    if not isinstance(data, dict):
        message = f"[build] cannot read dependencies from {path}: not an object"
        print(message, file=sys.stderr)
        return []
    names: list[str] = []
    for field in ("dependencies", "peerDependencies"):
        if isinstance(section := data.get(field), dict):
            names.extend(name for name in section if name)
    return names
