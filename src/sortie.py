"""Public SDK surface for Sortie.

This module provides a stable import path for SDK users.
It re-exports the primary client and typed option models.
"""

from __future__ import annotations

from core.config import SortieConfig
from core.types import (
    FailedImport,
    FileImportData,
    ImportOptions,
    ImportResult,
    MigrationPreview,
    StoredMission,
    StructureValidation,
)
from ingest.batch import MissionImport, import_missions
from migrations.registry import LATEST_GENERATION
from store.mission_sdk import SortieClient

__all__ = [
    "FailedImport",
    "FileImportData",
    "ImportOptions",
    "ImportResult",
    "LATEST_GENERATION",
    "MigrationPreview",
    "MissionImport",
    "SortieClient",
    "SortieConfig",
    "StoredMission",
    "StructureValidation",
    "import_missions",
]
