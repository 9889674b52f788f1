"""Shared fixtures for the packlet test suite."""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest

from packlet_test_helpers import write_package

_ENV_VARS = (
    "GPR_SCOPE",
    "GPR_REGISTRY",
    "GPR_INCLUDE_README",
    "GPR_INCLUDE_LICENSE",
    "GPR_NAME",
    "GPR_SKIP_PACK",
    "CI",
)


@pytest.fixture(autouse=True)
def clean_gpr_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ambient ``GPR_*`` settings from leaking into tests."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create an isolated package root."""
    root = tmp_path / "workspace"
    root.mkdir()
    return root


@pytest.fixture
def package_descriptor() -> dict[str, typ.Any]:
    """Return the canonical root descriptor used across staging tests."""
    return {
        "name": "pkg-test",
        "version": "0.1.0",
        "description": "Fixture package",
        "license": "MIT",
        "repository": {"type": "git", "url": "https://github.com/acme/pkg-test.git"},
        "keywords": ["fixture", "test"],
        "sideEffects": False,
    }


@pytest.fixture
def package_root(workspace: Path, package_descriptor: dict[str, typ.Any]) -> Path:
    """Populate ``workspace`` with a descriptor and the default dist files."""
    return write_package(workspace, package_descriptor)
