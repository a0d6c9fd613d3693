"""Mission store and catalog.

This module persists validated missions as JSON documents with a
catalog index. It is the persistence collaborator of the import
pipeline: documents are schema-checked and structure-checked before
they are written, and rejected documents raise schema violations.
"""

from __future__ import annotations

import asyncio
import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, cast

from core.config import SortieConfig
from core.constants import CATALOG_FILE_NAME, MISSIONS_DIR_NAME
from core.errors import SortieSchemaViolation, SortieStoreError, SortieStructureError
from core.logging_config import get_logger
from core.types import StoredMission
from store.mission_schema import dump_mission, parse_mission
from validation.structure_validator import assert_mission_structure

_LOGGER = get_logger(__name__)


class MissionStore:
    """JSON-file mission store.

    Each mission lives in ``missions/<mission_id>.json``; the catalog keeps
    names and timestamps so listing does not load every document.
    """

    def __init__(self, config: SortieConfig) -> None:
        """Initialize mission store from config.

        Args:
            config: Runtime configuration.
        """
        self._missions_root = config.data_root / MISSIONS_DIR_NAME
        self._missions_root.mkdir(parents=True, exist_ok=True)
        self._catalog_path = self._missions_root / CATALOG_FILE_NAME
        self._catalog_lock: asyncio.Lock | None = None
        self._lock_loop: asyncio.AbstractEventLoop | None = None

    async def create(self, document: Mapping[str, Any]) -> StoredMission:
        """Validate and persist a new mission.

        Args:
            document: Fully migrated mission document.

        Returns:
            Stored mission with its assigned id.

        Raises:
            SortieSchemaViolation: If the document fails schema or structure checks.
            SortieStoreError: If writing fails.
        """
        payload = _validated_payload(document)
        mission_id = uuid.uuid4().hex
        payload["_id"] = mission_id
        payload["seed"] = payload.get("seed") or str(uuid.uuid4())
        now = datetime.now(timezone.utc)
        stored = StoredMission(
            mission_id=mission_id,
            name=payload["name"],
            created_at=now,
            updated_at=now,
            document=payload,
        )
        await self._write(stored)
        _LOGGER.info("mission_created", mission_id=mission_id, name=stored.name)
        return stored

    async def update(self, mission_id: str, document: Mapping[str, Any]) -> StoredMission:
        """Replace an existing mission with a complete new body.

        Args:
            mission_id: Id of the mission to replace.
            document: Complete replacement mission document.

        Returns:
            Updated stored mission.

        Raises:
            SortieSchemaViolation: If the body fails schema or structure checks.
            SortieStoreError: If the mission does not exist or writing fails.
        """
        existing = self.get(mission_id)
        payload = _validated_payload(document)
        payload["_id"] = mission_id
        payload["seed"] = payload.get("seed") or existing.document.get("seed")
        stored = StoredMission(
            mission_id=mission_id,
            name=payload["name"],
            created_at=existing.created_at,
            updated_at=datetime.now(timezone.utc),
            document=payload,
        )
        await self._write(stored)
        _LOGGER.info("mission_updated", mission_id=mission_id, name=stored.name)
        return stored

    def get(self, mission_id: str) -> StoredMission:
        """Load one stored mission.

        Raises:
            SortieStoreError: If the mission does not exist.
        """
        entry = _read_catalog(self._catalog_path).get(mission_id)
        if entry is None:
            raise SortieStoreError(
                f"Mission {mission_id} not found. Run 'sortie list' to see stored missions."
            )
        return _stored_mission_from_entry(entry, self._read_document(mission_id))

    def list_missions(self) -> list[StoredMission]:
        """List stored missions sorted by creation time."""
        catalog = _read_catalog(self._catalog_path)
        missions = [
            _stored_mission_from_entry(entry, self._read_document(mission_id))
            for mission_id, entry in catalog.items()
        ]
        return sorted(missions, key=lambda item: item.created_at)

    def count(self) -> int:
        """Return the number of stored missions."""
        return len(_read_catalog(self._catalog_path))

    async def _write(self, stored: StoredMission) -> None:
        document_path = self._missions_root / f"{stored.mission_id}.json"
        async with self._lock_for_running_loop():
            await asyncio.to_thread(_write_json, document_path, stored.document)
            await asyncio.to_thread(_update_catalog, self._catalog_path, stored)

    def _lock_for_running_loop(self) -> asyncio.Lock:
        """Return the catalog lock bound to the running event loop."""
        loop = asyncio.get_running_loop()
        if self._catalog_lock is None or self._lock_loop is not loop:
            self._catalog_lock = asyncio.Lock()
            self._lock_loop = loop
        return self._catalog_lock

    def _read_document(self, mission_id: str) -> dict[str, Any]:
        document_path = self._missions_root / f"{mission_id}.json"
        try:
            return cast(dict[str, Any], json.loads(document_path.read_text(encoding="utf-8")))
        except (OSError, json.JSONDecodeError) as error:
            raise SortieStoreError(
                f"Failed to read mission document at {document_path}: {error}. "
                "Restore the file or remove the mission from the catalog."
            ) from error


def _validated_payload(document: Mapping[str, Any]) -> dict[str, Any]:
    """Run schema then structure checks and return the normalized payload."""
    mission = parse_mission(dict(document))
    payload = dump_mission(mission)
    try:
        assert_mission_structure(payload)
    except SortieStructureError as error:
        raise SortieSchemaViolation(str(error)) from error
    return payload


def _read_catalog(catalog_path: Path) -> dict[str, dict[str, Any]]:
    if not catalog_path.exists():
        return {}
    try:
        payload = json.loads(catalog_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as error:
        raise SortieStoreError(
            f"Failed to parse mission catalog at {catalog_path}: {error.msg}. "
            "Restore or delete the corrupted catalog file."
        ) from error
    return cast(dict[str, dict[str, Any]], payload.get("missions", {}))


def _update_catalog(catalog_path: Path, stored: StoredMission) -> None:
    catalog = _read_catalog(catalog_path)
    catalog[stored.mission_id] = {
        "mission_id": stored.mission_id,
        "name": stored.name,
        "created_at": stored.created_at.isoformat(),
        "updated_at": stored.updated_at.isoformat(),
    }
    _write_json(catalog_path, {"missions": catalog})


def _write_json(path: Path, payload: Mapping[str, Any]) -> None:
    try:
        path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    except OSError as error:
        raise SortieStoreError(
            f"Failed to write {path}: {error}. Check that the data root is writable."
        ) from error


def _stored_mission_from_entry(
    entry: Mapping[str, Any],
    document: dict[str, Any],
) -> StoredMission:
    return StoredMission(
        mission_id=str(entry["mission_id"]),
        name=str(entry["name"]),
        created_at=datetime.fromisoformat(str(entry["created_at"])),
        updated_at=datetime.fromisoformat(str(entry["updated_at"])),
        document=document,
    )
