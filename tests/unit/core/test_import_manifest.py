"""Unit tests for import manifest parsing."""

from __future__ import annotations

import pytest

from core.errors import SortieManifestError
from core.import_manifest import load_import_manifest
from tests.fixture_paths import fixture_path


def test_load_import_manifest_valid_resolves_sources() -> None:
    """Relative file entries should resolve against the manifest directory."""
    manifest = load_import_manifest(str(fixture_path("manifests/valid_manifest.yaml")))

    assert manifest.sources == (
        str(fixture_path("missions/legacy_mission.cesar").resolve()),
        str(fixture_path("missions/two_force_mission.metis").resolve()),
    )


def test_load_import_manifest_valid_reads_creator_defaults() -> None:
    """Manifest defaults should become import options."""
    manifest = load_import_manifest(str(fixture_path("manifests/valid_manifest.yaml")))

    assert (manifest.options.created_by, manifest.options.created_by_username) == (
        "user-42",
        "planner",
    )


def test_load_import_manifest_unknown_defaults_key_raises_error() -> None:
    """Unknown defaults field should be rejected."""
    with pytest.raises(SortieManifestError):
        load_import_manifest(str(fixture_path("manifests/unknown_defaults_key.yaml")))


def test_load_import_manifest_empty_files_raises_error() -> None:
    """A manifest without sources should be rejected."""
    with pytest.raises(SortieManifestError):
        load_import_manifest(str(fixture_path("manifests/empty_files.yaml")))


def test_load_import_manifest_unsupported_version_raises_error() -> None:
    """Only manifest version 1 should be accepted."""
    with pytest.raises(SortieManifestError):
        load_import_manifest(str(fixture_path("manifests/unsupported_version.yaml")))


def test_load_import_manifest_missing_file_raises_error(tmp_path) -> None:
    """A missing manifest path should raise a manifest error."""
    with pytest.raises(SortieManifestError):
        load_import_manifest(str(tmp_path / "missing.yaml"))


def test_load_import_manifest_keeps_s3_sources(tmp_path) -> None:
    """S3 prefixes should pass through without path resolution."""
    manifest_path = tmp_path / "manifest.yaml"
    manifest_path.write_text("version: 1\nfiles:\n  - s3://bucket/missions/\n", encoding="utf-8")

    manifest = load_import_manifest(str(manifest_path))

    assert manifest.sources == ("s3://bucket/missions/",)
