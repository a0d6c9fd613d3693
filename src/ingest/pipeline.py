"""Per-file mission import pipeline.

This module runs one file through reading, parsing, envelope checks,
migration, structural validation, and persistence. Every file-level
failure is captured as an outcome; nothing raises out of ``import_one``.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, cast

from core.constants import (
    ERROR_MESSAGE_BACKTICK,
    ERROR_MESSAGE_BACKTICK_REPLACEMENT,
    GENERATION_FIELD,
)
from core.errors import SortieError, SortieImportFileError, SortieSchemaViolation
from core.identifiers import IdGenerator
from core.types import FileImportData, FileImportOutcome, ImportOptions, ImportStage, StoredMission
from ingest.document_envelope import check_document_envelope, parse_document_text
from ingest.source_reader import read_file_text
from migrations.runner import migrate_document
from validation.structure_validator import validate_mission_structure


class MissionWriter(Protocol):
    """Persistence collaborator that stores fully migrated missions."""

    async def create(self, document: Mapping[str, Any]) -> StoredMission:
        """Persist a mission or raise ``SortieSchemaViolation``."""
        ...


class MissionImportPipeline:
    """Runs single mission files through every import stage."""

    def __init__(
        self,
        store: MissionWriter,
        ids: IdGenerator,
        options: ImportOptions | None = None,
    ) -> None:
        self._store = store
        self._ids = ids
        self._options = options or ImportOptions()

    async def import_one(self, file: FileImportData) -> FileImportOutcome:
        """Import one mission file.

        Args:
            file: Descriptor of the file to import.

        Returns:
            Success outcome with the stored mission name, or a failure
            outcome naming the rejecting stage and a sanitized message.
        """
        stage: ImportStage = "reading"
        try:
            text = await read_file_text(file)
            stage = "parsing"
            document = parse_document_text(text)
            stage = "validating-envelope"
            check_document_envelope(file.name, document)
            stage = "migrating"
            migrate_document(document, self._ids)
            stage = "validating-structure"
            validation = validate_mission_structure(document)
            if validation.error is not None:
                return _failed_outcome(file, stage, validation.error)
            stage = "persisting"
            stored = await self._store.create(self._prepare_for_persistence(document))
        except SortieSchemaViolation as error:
            return _failed_outcome(file, stage, _persistence_message(error))
        except SortieImportFileError as error:
            return _failed_outcome(file, cast(ImportStage, error.stage), str(error))
        except SortieError as error:
            return _failed_outcome(file, stage, str(error))
        except Exception as error:
            return _failed_outcome(
                file,
                stage,
                f"Unexpected {type(error).__name__} during {stage}: {error}",
            )
        return FileImportOutcome(file_name=file.name, stage="succeeded", mission_name=stored.name)

    def _prepare_for_persistence(self, document: dict[str, Any]) -> dict[str, Any]:
        """Strip transport metadata and stamp creator attribution."""
        document.pop(GENERATION_FIELD, None)
        if self._options.created_by is not None:
            document["createdBy"] = self._options.created_by
        if self._options.created_by_username is not None:
            document["createdByUsername"] = self._options.created_by_username
        return document


def sanitize_error_message(message: str) -> str:
    """Replace characters that confuse downstream message rendering."""
    return message.replace(ERROR_MESSAGE_BACKTICK, ERROR_MESSAGE_BACKTICK_REPLACEMENT)


def _persistence_message(error: SortieSchemaViolation) -> str:
    """Rewrite unknown-field violations into an actionable message."""
    if not error.unknown_fields:
        return str(error)
    if len(error.unknown_fields) == 1:
        return (
            f'Field "{error.unknown_fields[0]}" is not in schema. '
            "Please delete this field and try again."
        )
    field_list = ", ".join(f'"{path}"' for path in error.unknown_fields)
    return f"Fields {field_list} are not in schema. Please delete these fields and try again."


def _failed_outcome(file: FileImportData, stage: ImportStage, message: str) -> FileImportOutcome:
    return FileImportOutcome(
        file_name=file.name,
        stage=stage,
        error_message=sanitize_error_message(message),
    )
