"""Default mission seeding.

This module imports the bundled default mission into an empty store so
a fresh installation has something to open.
"""

from __future__ import annotations

from pathlib import Path

from core.config import SortieConfig
from core.constants import DEFAULT_SEED_MISSION_FILE_NAME, SEED_DATA_DIR_NAME
from core.errors import SortieSeedError
from core.identifiers import IdGenerator
from core.logging_config import get_logger
from core.types import FileImportData, ImportResult
from ingest.batch import MissionImport
from store.mission_store import MissionStore

_LOGGER = get_logger(__name__)


def default_seed_mission_path(config: SortieConfig) -> Path:
    """Return the configured seed mission, or the bundled one."""
    if config.seed_mission_path is not None:
        return config.seed_mission_path
    return Path(__file__).resolve().parent / SEED_DATA_DIR_NAME / DEFAULT_SEED_MISSION_FILE_NAME


async def ensure_default_missions(
    store: MissionStore,
    config: SortieConfig,
    ids: IdGenerator,
) -> ImportResult | None:
    """Seed the default mission when the store is empty.

    The seed file goes through the regular import pipeline, so it is
    migrated and validated like any user upload.

    Args:
        store: Mission store to seed.
        config: Runtime configuration naming the seed file.
        ids: Identifier generator handed to migrations.

    Returns:
        Import result, or None when the store already holds missions.

    Raises:
        SortieSeedError: If the seed file is missing or fails to import.
    """
    if store.count() > 0:
        return None
    seed_path = default_seed_mission_path(config)
    if not seed_path.is_file():
        raise SortieSeedError(
            f"Default mission file not found at {seed_path}. "
            "Set SORTIE_SEED_MISSION to an existing .metis file or unset it."
        )
    result = await MissionImport(
        FileImportData(name=seed_path.name, path=seed_path),
        store,
        ids,
    ).execute()
    if result.successful_import_count == 0:
        reasons = "; ".join(
            failure.error_message for failure in result.failed_import_error_messages
        )
        raise SortieSeedError(
            f"Failed to seed default mission from {seed_path}: {reasons} "
            "Fix the seed file and retry."
        )
    _LOGGER.info(
        "default_missions_seeded",
        seed_path=str(seed_path),
        mission_count=result.successful_import_count,
    )
    return result
