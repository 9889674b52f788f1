"""Behavioural tests for the GPR staging pipeline."""

from __future__ import annotations

import hashlib
import json
import typing as typ
from pathlib import Path

import pytest

from packlet.errors import ConfigError, PreconditionError
from packlet.staging import PackStatus, StagingOptions, awaken_gpr
from packlet_test_helpers import FakePacker, write_package


def _tree(path: Path) -> list[str]:
    return sorted(p.relative_to(path).as_posix() for p in path.rglob("*"))


def test_end_to_end_with_stubbed_packer(package_root: Path) -> None:
    """Staging derives the scoped name and records both archives."""
    packer = FakePacker()

    result = awaken_gpr(
        StagingOptions(root_dir=package_root, scope="acme"),
        environ={},
        runner=packer,
    )

    assert result.scoped_name == "@acme/pkg-test"
    assert result.version == "0.1.0"
    assert result.gpr_dir == package_root.resolve() / ".gpr"
    assert [outcome.status for outcome in result.pack_outcomes] == [
        PackStatus.PACKED,
        PackStatus.PACKED,
    ]
    assert [cwd for _, cwd in packer.calls] == [
        package_root.resolve(),
        result.gpr_dir,
    ], "root package is packed before the staged package"

    manifest = json.loads(
        (result.artifacts_dir / "artifacts.json").read_text(encoding="utf-8")
    )
    assert manifest["schemaVersion"] == 1
    assert manifest["packageName"] == "pkg-test"
    assert manifest["scopedName"] == "@acme/pkg-test"
    files = {item["file"]: item for item in manifest["artifacts"]}
    assert set(files) == {"pkg-test-0.1.0.tgz", "acme-pkg-test-0.1.0.tgz"}
    staged_archive = result.artifacts_dir / "acme-pkg-test-0.1.0.tgz"
    assert files["acme-pkg-test-0.1.0.tgz"]["sha512"] == hashlib.sha512(
        staged_archive.read_bytes()
    ).hexdigest()
    assert not (package_root / "pkg-test-0.1.0.tgz").exists(), (
        "archives are moved, not copied"
    )


def test_staged_descriptor_is_rewritten(
    package_root: Path, package_descriptor: dict[str, typ.Any]
) -> None:
    """The staged ``package.json`` points at the copied build output."""
    result = awaken_gpr(
        StagingOptions(root_dir=package_root, scope="acme", skip_pack=True),
        environ={},
    )

    staged = json.loads((result.gpr_dir / "package.json").read_text(encoding="utf-8"))
    assert staged["name"] == "@acme/pkg-test"
    assert staged["version"] == "0.1.0"
    assert staged["repository"] == package_descriptor["repository"]
    assert staged["keywords"] == ["fixture", "test"]
    assert staged["sideEffects"] is False
    assert "homepage" not in staged, "absent fields are omitted"
    assert staged["files"] == ["dist"]
    assert staged["main"] == "./dist/index.js"
    assert staged["module"] == "./dist/index.mjs"
    assert staged["types"] == "./dist/index.d.ts"
    assert staged["exports"]["."]["import"] == "./dist/index.mjs"
    assert staged["publishConfig"] == {
        "registry": "https://npm.pkg.github.com/",
        "access": "public",
    }
    root_descriptor = json.loads(
        (package_root / "package.json").read_text(encoding="utf-8")
    )
    assert root_descriptor == package_descriptor, "root descriptor is never mutated"


def test_build_output_tree_is_copied(package_root: Path) -> None:
    """Nested build output keeps its structure inside the staging directory."""
    nested = package_root / "dist" / "chunks" / "a.mjs"
    nested.parent.mkdir(parents=True)
    nested.write_text("export {}", encoding="utf-8")

    result = awaken_gpr(
        StagingOptions(root_dir=package_root, skip_pack=True), environ={}
    )

    assert _tree(result.gpr_dir / "dist") == [
        "chunks",
        "chunks/a.mjs",
        "index.d.ts",
        "index.js",
        "index.mjs",
    ]


def test_readme_and_license_follow_flags(package_root: Path) -> None:
    """Auxiliary files are copied when enabled and present."""
    (package_root / "README.md").write_text("# pkg", encoding="utf-8")
    (package_root / "LICENSE").write_text("MIT", encoding="utf-8")

    result = awaken_gpr(
        StagingOptions(root_dir=package_root, include_license=False, skip_pack=True),
        environ={},
    )

    assert (result.gpr_dir / "README.md").is_file()
    assert not (result.gpr_dir / "LICENSE").exists()


def test_environment_overrides_options(package_root: Path) -> None:
    """``GPR_*`` variables take precedence over explicit options."""
    (package_root / "README.md").write_text("# pkg", encoding="utf-8")

    result = awaken_gpr(
        StagingOptions(root_dir=package_root, scope="opt", include_readme=True),
        environ={
            "GPR_SCOPE": "env",
            "GPR_REGISTRY": "https://registry.example/",
            "GPR_INCLUDE_README": "false",
            "GPR_SKIP_PACK": "true",
        },
    )

    staged = json.loads((result.gpr_dir / "package.json").read_text(encoding="utf-8"))
    assert result.scoped_name == "@env/pkg-test"
    assert staged["publishConfig"]["registry"] == "https://registry.example/"
    assert not (result.gpr_dir / "README.md").exists()
    assert [outcome.status for outcome in result.pack_outcomes] == [
        PackStatus.SKIPPED,
        PackStatus.SKIPPED,
    ]


def test_scoped_override_wins(package_root: Path) -> None:
    """A namespace-qualified override is used verbatim."""
    result = awaken_gpr(
        StagingOptions(
            root_dir=package_root, scope="acme", name_override="@own/thing", skip_pack=True
        ),
        environ={},
    )

    assert result.scoped_name == "@own/thing"
    assert result.manifest.package_name == "thing"


def test_rerun_replaces_previous_output(package_root: Path) -> None:
    """A second run fully replaces both directories."""
    options = StagingOptions(root_dir=package_root, scope="acme")
    first = awaken_gpr(options, environ={}, runner=FakePacker())
    first_tree = (_tree(first.gpr_dir), _tree(first.artifacts_dir))

    (first.artifacts_dir / "stray-9.9.9.tgz").write_bytes(b"stray")
    (first.gpr_dir / "leftover.txt").write_text("old", encoding="utf-8")

    second = awaken_gpr(options, environ={}, runner=FakePacker())

    assert not (second.artifacts_dir / "stray-9.9.9.tgz").exists()
    assert not (second.gpr_dir / "leftover.txt").exists()
    assert (_tree(second.gpr_dir), _tree(second.artifacts_dir)) == first_tree
    assert "stray-9.9.9.tgz" not in {
        entry.file for entry in second.manifest.artifacts
    }


def test_missing_dist_is_a_precondition_error(
    workspace: Path, package_descriptor: dict[str, typ.Any]
) -> None:
    """Without build output nothing is created."""
    write_package(workspace, package_descriptor, dist_files=None)

    with pytest.raises(PreconditionError, match="Run build"):
        awaken_gpr(StagingOptions(root_dir=workspace), environ={})

    assert not (workspace / ".gpr").exists()
    assert not (workspace / ".artifacts").exists()


def test_missing_descriptor_is_fatal(workspace: Path) -> None:
    """A dist without ``package.json`` cannot be staged."""
    (workspace / "dist").mkdir()

    with pytest.raises(ConfigError):
        awaken_gpr(StagingOptions(root_dir=workspace), environ={})


def test_packer_failures_do_not_abort_staging(
    package_root: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """A failing packer leaves a manifest with whatever archives remain."""
    root = package_root.resolve()
    packer = FakePacker(fail_in=root)

    result = awaken_gpr(
        StagingOptions(root_dir=package_root, scope="acme"),
        environ={},
        runner=packer,
    )

    statuses = [outcome.status for outcome in result.pack_outcomes]
    assert statuses == [PackStatus.FAILED, PackStatus.PACKED]
    assert [entry.file for entry in result.manifest.artifacts] == [
        "acme-pkg-test-0.1.0.tgz"
    ]
    assert "packer failed" in capsys.readouterr().err


def test_empty_packer_output_uses_fallback_name(package_root: Path) -> None:
    """When the packer prints nothing the conventional archive name is assumed."""
    result = awaken_gpr(
        StagingOptions(root_dir=package_root, scope="acme"),
        environ={},
        runner=FakePacker(report=""),
    )

    assert sorted(entry.file for entry in result.manifest.artifacts) == [
        "acme-pkg-test-0.1.0.tgz",
        "pkg-test-0.1.0.tgz",
    ]


@pytest.mark.parametrize(
    ("gpr_dir", "dist_dir"),
    [(Path("dist/.gpr"), None), (Path("out"), Path("out/dist"))],
)
def test_staging_directory_must_not_overlap_dist(
    package_root: Path, gpr_dir: Path, dist_dir: Path | None
) -> None:
    """Overlapping staging and build output directories are rejected up front."""
    if dist_dir is not None:
        (package_root / dist_dir).mkdir(parents=True)

    with pytest.raises(PreconditionError, match="overlaps"):
        awaken_gpr(
            StagingOptions(
                root_dir=package_root,
                gpr_dir=gpr_dir,
                dist_dir=dist_dir,
                skip_pack=True,
            ),
            environ={},
        )

    assert not (package_root / ".artifacts").exists()
    assert not (package_root / "dist" / ".gpr").exists()
