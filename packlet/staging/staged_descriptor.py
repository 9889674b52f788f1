"""Synthesise the ``package.json`` written into the staging directory."""

from __future__ import annotations

import json
import typing as typ
from pathlib import Path

from ..descriptor import DESCRIPTOR_FILENAME, PackageDescriptor

__all__ = ["build_staged_descriptor", "write_staged_descriptor"]


def build_staged_descriptor(
    descriptor: PackageDescriptor,
    *,
    scoped_name: str,
    registry: str,
    dist_name: str = "dist",
) -> dict[str, typ.Any]:
    """Return the descriptor mapping for the staged package.

    Descriptive fields are copied from ``descriptor``; fields it does not
    define are omitted. Entry points and ``exports`` reference the copied
    build output under ``dist_name``.

    Examples
    --------
    >>> staged = build_staged_descriptor(
    ...     PackageDescriptor(name="pkg", version="1.0.0"),
    ...     scoped_name="@acme/pkg",
    ...     registry="https://npm.pkg.github.com/",
    ... )
    >>> staged["name"], staged["main"]
    ('@acme/pkg', './dist/index.js')
    """
    prefix = f"./{dist_name}"
    copied: dict[str, typ.Any] = {
        "name": scoped_name,
        "version": descriptor.version,
        "description": descriptor.description,
        "license": descriptor.license,
        "homepage": descriptor.homepage,
        "repository": descriptor.repository,
        "author": descriptor.author,
        "keywords": list(descriptor.keywords) if descriptor.keywords else None,
        "sideEffects": descriptor.side_effects,
    }
    staged = {key: value for key, value in copied.items() if value is not None}
    return staged | {
        "files": [dist_name],
        "main": f"{prefix}/index.js",
        "module": f"{prefix}/index.mjs",
        "types": f"{prefix}/index.d.ts",
        "exports": {
            ".": {
                "types": f"{prefix}/index.d.ts",
                "require": f"{prefix}/index.js",
                "import": f"{prefix}/index.mjs",
                "default": f"{prefix}/index.mjs",
            }
        },
        "publishConfig": {"registry": registry, "access": "public"},
    }


def write_staged_descriptor(gpr_dir: Path, staged: typ.Mapping[str, typ.Any]) -> Path:
    """Write ``staged`` as ``gpr_dir/package.json`` and return the path."""
    path = gpr_dir / DESCRIPTOR_FILENAME
    path.write_text(json.dumps(staged, indent=2), encoding="utf-8")
    return path
