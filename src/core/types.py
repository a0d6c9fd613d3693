"""Shared typed models.

This module defines immutable data models used by the migration,
validation, ingest, store, and SDK layers to keep interfaces explicit.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Literal, Mapping

ImportStage = Literal[
    "reading",
    "parsing",
    "validating-envelope",
    "migrating",
    "validating-structure",
    "persisting",
    "succeeded",
]


@dataclass(frozen=True)
class FileImportData:
    """One mission file handed to the import pipeline.

    Attributes:
        name: Original file name, used for extension checks and reporting.
        path: Local path to read when content is not provided.
        content: Raw file bytes, already extracted by the caller.
    """

    name: str
    path: Path | None = None
    content: bytes | None = None


@dataclass(frozen=True)
class ImportOptions:
    """Options applied to every mission in an import batch.

    Attributes:
        created_by: Optional id of the user credited with the missions.
        created_by_username: Optional username of that user.
    """

    created_by: str | None = None
    created_by_username: str | None = None


@dataclass(frozen=True)
class FailedImport:
    """Failure entry reported for one file."""

    file_name: str
    error_message: str


@dataclass(frozen=True)
class FileImportOutcome:
    """Terminal state of one file's import pipeline.

    Attributes:
        file_name: Original file name.
        stage: ``succeeded`` or the stage that rejected the file.
        mission_name: Stored mission name on success.
        error_message: Sanitized failure message on failure.
    """

    file_name: str
    stage: ImportStage
    mission_name: str | None = None
    error_message: str | None = None

    @property
    def succeeded(self) -> bool:
        """Return whether the file was imported."""
        return self.stage == "succeeded"


@dataclass(frozen=True)
class ImportResult:
    """Aggregated outcome of one import batch."""

    successful_import_count: int
    failed_import_count: int
    failed_import_error_messages: tuple[FailedImport, ...]

    def to_payload(self) -> dict[str, Any]:
        """Render the result as the JSON payload returned to callers."""
        return {
            "successfulImportCount": self.successful_import_count,
            "failedImportCount": self.failed_import_count,
            "failedImportErrorMessages": [
                {"fileName": failure.file_name, "errorMessage": failure.error_message}
                for failure in self.failed_import_error_messages
            ],
        }


@dataclass(frozen=True)
class StructureValidation:
    """Result of a structural integrity check.

    Attributes:
        error: First violation found, or None when the mission is valid.
    """

    error: str | None = None

    @property
    def ok(self) -> bool:
        """Return whether no violation was found."""
        return self.error is None


@dataclass(frozen=True)
class StoredMission:
    """Mission document as persisted by the mission store.

    Attributes:
        mission_id: Store-assigned mission identifier.
        name: Mission display name.
        created_at: UTC creation timestamp.
        updated_at: UTC timestamp of the latest write.
        document: Persisted mission document.
    """

    mission_id: str
    name: str
    created_at: datetime
    updated_at: datetime
    document: Mapping[str, Any]


@dataclass(frozen=True)
class MigrationPreview:
    """Dry-run migration output for one file.

    Attributes:
        file_name: Original file name.
        source_generation: Generation declared by the file.
        applied_generations: Target generations of the steps that ran.
        document: Migrated document, transport fields removed.
    """

    file_name: str
    source_generation: int
    applied_generations: tuple[int, ...]
    document: Mapping[str, Any]
