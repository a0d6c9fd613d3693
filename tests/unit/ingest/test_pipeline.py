"""Unit tests for the per-file import pipeline."""

from __future__ import annotations

import asyncio
import json
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Mapping

from core.config import SortieConfig
from core.errors import SortieSchemaViolation
from core.identifiers import IdGenerator
from core.types import FileImportData, ImportOptions, StoredMission
from ingest.pipeline import MissionImportPipeline, sanitize_error_message
from store.mission_store import MissionStore
from tests.fixture_paths import fixture_path


class _RecordingStore:
    """Mission writer that keeps created documents in memory."""

    def __init__(self, error: Exception | None = None) -> None:
        self.documents: list[Mapping[str, Any]] = []
        self._error = error

    async def create(self, document: Mapping[str, Any]) -> StoredMission:
        if self._error is not None:
            raise self._error
        self.documents.append(document)
        now = datetime.now(timezone.utc)
        return StoredMission(
            mission_id=f"m-{len(self.documents)}",
            name=str(document["name"]),
            created_at=now,
            updated_at=now,
            document=document,
        )


def _fixture_file(relative_path: str) -> FileImportData:
    path = fixture_path(relative_path)
    return FileImportData(name=path.name, path=path)


def _inline_file(name: str, document: Mapping[str, Any]) -> FileImportData:
    return FileImportData(name=name, content=json.dumps(document).encode("utf-8"))


def _two_force_document() -> dict[str, Any]:
    path = fixture_path("missions/two_force_mission.metis")
    return json.loads(path.read_text(encoding="utf-8"))


def test_import_one_migrates_legacy_file_and_persists() -> None:
    """A legacy file should be migrated and handed to the store."""
    store = _RecordingStore()
    pipeline = MissionImportPipeline(store, IdGenerator(seed=3))

    outcome = asyncio.run(pipeline.import_one(_fixture_file("missions/legacy_mission.cesar")))

    assert (outcome.stage, outcome.mission_name) == ("succeeded", "Legacy Recon")
    assert "schemaBuildNumber" not in store.documents[0]


def test_import_one_stamps_creator_attribution() -> None:
    """Import options should be stamped on the persisted document."""
    store = _RecordingStore()
    options = ImportOptions(created_by="user-1", created_by_username="ops")
    pipeline = MissionImportPipeline(store, IdGenerator(seed=3), options)

    asyncio.run(pipeline.import_one(_fixture_file("missions/two_force_mission.metis")))

    document = store.documents[0]
    assert (document["createdBy"], document["createdByUsername"]) == ("user-1", "ops")


def test_import_one_reports_parse_failure() -> None:
    """Malformed JSON should fail at the parsing stage."""
    pipeline = MissionImportPipeline(_RecordingStore(), IdGenerator(seed=3))

    outcome = asyncio.run(pipeline.import_one(_fixture_file("missions/truncated.metis")))

    assert outcome.stage == "parsing" and not outcome.succeeded


def test_import_one_reports_structure_failure_without_persisting() -> None:
    """Structural violations should stop the file before persistence."""
    store = _RecordingStore()
    document = _two_force_document()
    document["structure"]["alpha"] = {}
    pipeline = MissionImportPipeline(store, IdGenerator(seed=3))

    outcome = asyncio.run(pipeline.import_one(_inline_file("broken.metis", document)))

    assert outcome.stage == "validating-structure" and store.documents == []


def test_import_one_rewrites_unknown_field_violation(tmp_path) -> None:
    """Unknown fields rejected by the store should produce a field-level message."""
    store = MissionStore(replace(SortieConfig.from_env(), data_root=tmp_path))
    document = _two_force_document()
    document["forces"][0]["nodes"][0]["mapX"] = 4
    pipeline = MissionImportPipeline(store, IdGenerator(seed=3))

    outcome = asyncio.run(pipeline.import_one(_inline_file("extra.metis", document)))

    assert outcome.stage == "persisting"
    assert outcome.error_message == (
        'Field "forces.0.nodes.0.mapX" is not in schema. Please delete this field and try again.'
    )


def test_import_one_sanitizes_backticks() -> None:
    """Backticks in failure messages should be replaced."""
    store = _RecordingStore(error=SortieSchemaViolation("Path `name` is required."))
    pipeline = MissionImportPipeline(store, IdGenerator(seed=3))

    outcome = asyncio.run(pipeline.import_one(_fixture_file("missions/two_force_mission.metis")))

    assert outcome.error_message == "Path *name* is required."


def test_import_one_contains_unexpected_errors() -> None:
    """Unexpected store errors should become a failed outcome."""
    store = _RecordingStore(error=RuntimeError("disk on fire"))
    pipeline = MissionImportPipeline(store, IdGenerator(seed=3))

    outcome = asyncio.run(pipeline.import_one(_fixture_file("missions/two_force_mission.metis")))

    assert outcome.stage == "persisting"
    assert outcome.error_message == "Unexpected RuntimeError during persisting: disk on fire"


def test_sanitize_error_message_leaves_plain_text() -> None:
    """Messages without backticks should pass through unchanged."""
    assert sanitize_error_message("plain") == "plain"
