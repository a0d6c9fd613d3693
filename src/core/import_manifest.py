"""Typed import manifest parsing.

This module loads and validates YAML manifests that describe one batch
of mission files together with the creator attribution applied to them.
The CLI and SDK consume the same validated object.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Sequence, cast

import yaml

from core.errors import SortieManifestError
from core.types import ImportOptions

SUPPORTED_MANIFEST_VERSION = 1
_ROOT_KEYS = frozenset({"version", "defaults", "files"})
_DEFAULTS_KEYS = frozenset({"created_by", "created_by_username"})


@dataclass(frozen=True)
class ImportManifest:
    """Validated import manifest.

    Attributes:
        version: Manifest format version.
        options: Creator attribution applied to every file.
        sources: Local paths or ``s3://`` prefixes; relative local paths
            are resolved against the manifest's directory.
    """

    version: int
    options: ImportOptions
    sources: tuple[str, ...]


def load_import_manifest(manifest_path: str) -> ImportManifest:
    """Load and validate a YAML import manifest from disk.

    Args:
        manifest_path: File path to the YAML manifest.

    Returns:
        Fully validated manifest.

    Raises:
        SortieManifestError: If the file is unreadable or schema checks fail.
    """
    manifest_file = Path(manifest_path).expanduser().resolve()
    payload = _load_yaml_payload(manifest_file)
    root_mapping = _expect_mapping(payload, "manifest root")
    _validate_keys(root_mapping, _ROOT_KEYS, "manifest root")
    version = _parse_version(root_mapping)
    options = _parse_defaults(root_mapping)
    sources = _parse_sources(root_mapping, manifest_file.parent)
    return ImportManifest(version=version, options=options, sources=sources)


def _load_yaml_payload(manifest_file: Path) -> object:
    if not manifest_file.exists():
        raise SortieManifestError(
            f"Import manifest does not exist at {manifest_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(manifest_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise SortieManifestError(
            f"Failed to read import manifest at {manifest_file}: {error}. "
            "Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise SortieManifestError(
            f"Failed to parse YAML import manifest at {manifest_file}: {error}. "
            "Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise SortieManifestError(
            f"Import manifest at {manifest_file} is empty. Define 'version' and 'files'."
        )
    return payload


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if not isinstance(value, Mapping):
        raise SortieManifestError(
            f"Invalid {context}: expected object mapping, got {type(value).__name__}."
        )
    for key in value:
        if not isinstance(key, str):
            raise SortieManifestError(
                f"Invalid {context}: expected string keys, got {type(key).__name__}."
            )
    return cast(Mapping[str, object], value)


def _expect_sequence(value: object, context: str) -> Sequence[object]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    raise SortieManifestError(f"Invalid {context}: expected list, got {type(value).__name__}.")


def _validate_keys(mapping: Mapping[str, object], allowed: frozenset[str], context: str) -> None:
    unknown = sorted(set(mapping) - allowed)
    if unknown:
        raise SortieManifestError(
            f"Unsupported {context} field(s): {', '.join(unknown)}. "
            f"Allowed fields: {', '.join(sorted(allowed))}."
        )


def _parse_version(root_mapping: Mapping[str, object]) -> int:
    raw_version = root_mapping.get("version")
    if isinstance(raw_version, bool) or not isinstance(raw_version, int):
        raise SortieManifestError("Manifest field 'version' must be an integer. Set version: 1.")
    if raw_version != SUPPORTED_MANIFEST_VERSION:
        raise SortieManifestError(
            f"Unsupported manifest version {raw_version}. "
            f"Use version: {SUPPORTED_MANIFEST_VERSION}."
        )
    return raw_version


def _parse_defaults(root_mapping: Mapping[str, object]) -> ImportOptions:
    raw_defaults = root_mapping.get("defaults")
    if raw_defaults is None:
        return ImportOptions()
    defaults_mapping = _expect_mapping(raw_defaults, "manifest defaults")
    _validate_keys(defaults_mapping, _DEFAULTS_KEYS, "manifest defaults")
    return ImportOptions(
        created_by=_optional_string(defaults_mapping, "created_by"),
        created_by_username=_optional_string(defaults_mapping, "created_by_username"),
    )


def _parse_sources(root_mapping: Mapping[str, object], base_dir: Path) -> tuple[str, ...]:
    raw_files = root_mapping.get("files")
    if raw_files is None:
        raise SortieManifestError("Manifest field 'files' is required. List at least one source.")
    entries = _expect_sequence(raw_files, "manifest files")
    if not entries:
        raise SortieManifestError("Manifest field 'files' is empty. List at least one source.")
    sources: list[str] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, str) or not entry.strip():
            raise SortieManifestError(
                f"Invalid manifest files[{index}]: expected non-empty string path."
            )
        sources.append(_resolve_source(entry.strip(), base_dir))
    return tuple(sources)


def _resolve_source(source: str, base_dir: Path) -> str:
    if source.startswith("s3://"):
        return source
    source_path = Path(source).expanduser()
    if not source_path.is_absolute():
        source_path = base_dir / source_path
    return str(source_path.resolve())


def _optional_string(mapping: Mapping[str, object], key: str) -> str | None:
    value = mapping.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise SortieManifestError(
            f"Manifest defaults field '{key}' must be a non-empty string when provided."
        )
    return value
