"""Mission file collection and reading.

This module turns local paths or S3 prefixes into import descriptors
and reads one descriptor's text for the import pipeline.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Iterable, Sequence

from core.config import SortieConfig
from core.constants import RECOGNIZED_EXTENSIONS
from core.errors import SortieDependencyError, SortieImportFileError, SortieIngestError
from core.types import FileImportData

UNREADABLE_FILE_MESSAGE = (
    "Failed to read file. This file is either not actually a .cesar file, "
    "not actually a .metis file, or is corrupted."
)


def collect_import_files(sources: Sequence[str], config: SortieConfig) -> list[FileImportData]:
    """Build import descriptors from local paths or S3 prefixes.

    Explicitly named files are always included so the pipeline can report
    unsupported extensions; directories and prefixes contribute only files
    with a recognized mission extension.

    Args:
        sources: Local files, local directories, or ``s3://`` prefixes.
        config: Runtime configuration for S3 session defaults.

    Returns:
        Ordered list of import descriptors.

    Raises:
        SortieIngestError: If a source is missing or yields no files.
    """
    files: list[FileImportData] = []
    for source in sources:
        if source.startswith("s3://"):
            files.extend(_collect_s3_files(source, config))
        else:
            files.extend(_collect_local_files(Path(source).expanduser()))
    return files


async def read_file_text(file: FileImportData) -> str:
    """Read one descriptor's contents as UTF-8 text.

    Args:
        file: Import descriptor with either content or a path.

    Returns:
        Decoded file text.

    Raises:
        SortieImportFileError: If the bytes cannot be read or decoded.
    """
    try:
        if file.content is not None:
            raw_bytes = file.content
        elif file.path is not None:
            raw_bytes = await asyncio.to_thread(file.path.read_bytes)
        else:
            raise SortieImportFileError(UNREADABLE_FILE_MESSAGE, "reading")
        return raw_bytes.decode("utf-8")
    except (OSError, UnicodeDecodeError) as error:
        raise SortieImportFileError(UNREADABLE_FILE_MESSAGE, "reading") from error


def has_recognized_extension(file_name: str) -> bool:
    """Return whether a file name carries a mission extension."""
    return file_name.lower().endswith(RECOGNIZED_EXTENSIONS)


def _collect_local_files(source_path: Path) -> list[FileImportData]:
    """Collect descriptors from a local file or directory.

    Raises:
        SortieIngestError: If path is missing or holds no mission files.
    """
    if not source_path.exists():
        raise SortieIngestError(
            f"Failed to read import source at {source_path}: path does not exist. "
            "Provide an existing mission file or directory."
        )
    if source_path.is_file():
        return [FileImportData(name=source_path.name, path=source_path)]
    files = [
        FileImportData(name=file_path.name, path=file_path)
        for file_path in sorted(source_path.rglob("*"))
        if file_path.is_file() and has_recognized_extension(file_path.name)
    ]
    if not files:
        raise SortieIngestError(
            f"No mission files found under {source_path}. "
            f"Supported extensions: {RECOGNIZED_EXTENSIONS}."
        )
    return files


def _collect_s3_files(source_uri: str, config: SortieConfig) -> list[FileImportData]:
    """Download mission files under an S3 prefix.

    Raises:
        SortieIngestError: If the URI is malformed or no files are found.
    """
    bucket, prefix = _parse_s3_uri(source_uri)
    s3_client = _create_s3_client(config)
    object_keys = _list_s3_keys(s3_client, bucket, prefix)
    files = _download_s3_files(s3_client, bucket, object_keys)
    if not files:
        raise SortieIngestError(
            f"No mission files found for {source_uri}. "
            "Upload .cesar or .metis files and retry the import."
        )
    return files


def _parse_s3_uri(source_uri: str) -> tuple[str, str]:
    """Split an ``s3://bucket/prefix`` URI into bucket and prefix."""
    bucket, _, prefix = source_uri[len("s3://") :].partition("/")
    if not bucket:
        raise SortieIngestError(
            f"Invalid S3 URI '{source_uri}': missing bucket name. "
            "Use the form s3://bucket/prefix."
        )
    return bucket, prefix


def _create_s3_client(config: SortieConfig) -> Any:
    """Create a boto3 S3 client.

    Raises:
        SortieDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise SortieDependencyError(
            "S3 support requires boto3, but it is not installed. "
            "Install the 's3' extra to import from s3:// sources."
        ) from error
    session_kwargs: dict[str, str] = {}
    if config.s3_profile:
        session_kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        session_kwargs["region_name"] = config.s3_region
    session = boto3.session.Session(**session_kwargs)
    return session.client("s3")


def _list_s3_keys(s3_client: Any, bucket: str, prefix: str) -> list[str]:
    """List mission object keys under an S3 prefix."""
    paginator = s3_client.get_paginator("list_objects_v2")
    keys: list[str] = []
    for page in paginator.paginate(Bucket=bucket, Prefix=prefix):
        for obj in page.get("Contents", []):
            key = obj["Key"]
            if has_recognized_extension(key):
                keys.append(key)
    return sorted(keys)


def _download_s3_files(
    s3_client: Any,
    bucket: str,
    object_keys: Iterable[str],
) -> list[FileImportData]:
    """Download object bodies into in-memory descriptors."""
    files: list[FileImportData] = []
    for key in object_keys:
        body = s3_client.get_object(Bucket=bucket, Key=key)["Body"].read()
        files.append(FileImportData(name=Path(key).name, content=body))
    return files
