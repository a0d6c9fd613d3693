"""Python SDK for mission operations.

This module exposes high-level APIs for importing, migrating,
validating, listing, and seeding missions backed by the mission store.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Sequence

from core.config import SortieConfig
from core.constants import GENERATION_FIELD
from core.identifiers import build_id_generator
from core.import_manifest import load_import_manifest
from core.types import (
    FileImportData,
    ImportOptions,
    ImportResult,
    MigrationPreview,
    StoredMission,
    StructureValidation,
)
from ingest.batch import import_missions
from ingest.document_envelope import check_document_envelope, parse_document_text
from ingest.source_reader import collect_import_files, read_file_text
from migrations.runner import migrate_document
from store.mission_store import MissionStore
from store.seeding import ensure_default_missions
from validation.structure_validator import validate_mission_structure


class SortieClient:
    """Primary SDK entry point for mission workflows."""

    def __init__(self, config: SortieConfig | None = None) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
        """
        self._config = config or SortieConfig.from_env()
        self._store = MissionStore(self._config)
        self._ids = build_id_generator(self._config)

    def import_files(
        self,
        sources: Sequence[str],
        options: ImportOptions | None = None,
    ) -> ImportResult:
        """Import mission files from local paths or S3 prefixes.

        Args:
            sources: Files, directories, or ``s3://`` prefixes.
            options: Creator attribution applied to every mission.

        Returns:
            Aggregated batch result. File-level failures are reported in
            the result rather than raised.

        Raises:
            SortieIngestError: If a source cannot be collected.
        """
        files = collect_import_files(sources, self._config)
        return asyncio.run(import_missions(files, self._store, self._ids, options))

    def import_manifest(self, manifest_path: str) -> ImportResult:
        """Import the batch described by a YAML manifest.

        Raises:
            SortieManifestError: If the manifest is invalid.
            SortieIngestError: If a listed source cannot be collected.
        """
        manifest = load_import_manifest(manifest_path)
        return self.import_files(manifest.sources, manifest.options)

    def migrate_file(self, file_path: str) -> MigrationPreview:
        """Migrate one mission file without storing it.

        Args:
            file_path: Local mission file path.

        Returns:
            Migrated document and the generations that were applied.

        Raises:
            SortieImportFileError: If the file cannot be read or fails
                envelope checks.
            SortieMigrationError: If a migration step fails.
        """
        source_path = Path(file_path).expanduser().resolve()
        file = FileImportData(name=source_path.name, path=source_path)
        document = parse_document_text(asyncio.run(read_file_text(file)))
        source_generation = check_document_envelope(file.name, document)
        applied_generations = migrate_document(document, self._ids)
        document.pop(GENERATION_FIELD, None)
        return MigrationPreview(
            file_name=file.name,
            source_generation=source_generation,
            applied_generations=applied_generations,
            document=document,
        )

    def validate_file(self, file_path: str) -> StructureValidation:
        """Migrate one mission file and check its structural integrity.

        Raises:
            SortieImportFileError: If the file cannot be read or fails
                envelope checks.
            SortieMigrationError: If a migration step fails.
        """
        preview = self.migrate_file(file_path)
        return validate_mission_structure(preview.document)

    def missions(self) -> list[StoredMission]:
        """List stored missions sorted by creation time."""
        return self._store.list_missions()

    def seed_defaults(self) -> ImportResult | None:
        """Seed the default mission into an empty store.

        Returns:
            Import result, or None when the store already holds missions.

        Raises:
            SortieSeedError: If the seed mission cannot be imported.
        """
        return asyncio.run(ensure_default_missions(self._store, self._config, self._ids))
