"""Batch coordination for mission imports.

This module fans a set of files out to the per-file import pipeline,
folds their outcomes into one result, and reports the batch summary.
A batch never fails as a whole: every file settles to success or to a
recorded failure.
"""

from __future__ import annotations

import asyncio
from typing import Sequence

from core.errors import SortieImportStateError
from core.identifiers import IdGenerator
from core.logging_config import get_logger
from core.types import FailedImport, FileImportData, FileImportOutcome, ImportOptions, ImportResult
from ingest.pipeline import MissionImportPipeline, MissionWriter

_LOGGER = get_logger(__name__)


class ImportResultAccumulator:
    """Serialized counters for one import batch."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._successful_count = 0
        self._failures: list[FailedImport] = []

    @property
    def processed_count(self) -> int:
        """Return how many files have settled."""
        return self._successful_count + len(self._failures)

    async def record(self, outcome: FileImportOutcome) -> None:
        """Fold one settled file into the batch counters."""
        async with self._lock:
            if outcome.succeeded:
                self._successful_count += 1
                return
            self._failures.append(
                FailedImport(
                    file_name=outcome.file_name,
                    error_message=outcome.error_message or "",
                )
            )

    def snapshot(self) -> ImportResult:
        """Return the counters as an immutable result."""
        return ImportResult(
            successful_import_count=self._successful_count,
            failed_import_count=len(self._failures),
            failed_import_error_messages=tuple(self._failures),
        )


class MissionImport:
    """One batch import of mission files.

    Files are processed concurrently. Results are readable only after
    every file has settled.
    """

    def __init__(
        self,
        files: FileImportData | Sequence[FileImportData],
        store: MissionWriter,
        ids: IdGenerator,
        options: ImportOptions | None = None,
    ) -> None:
        """Create a batch import.

        Args:
            files: One file descriptor or an ordered list of them.
            store: Persistence collaborator for migrated missions.
            ids: Identifier generator handed to migrations.
            options: Creator attribution applied to every mission.
        """
        self._files: tuple[FileImportData, ...] = (
            (files,) if isinstance(files, FileImportData) else tuple(files)
        )
        self._pipeline = MissionImportPipeline(store, ids, options)
        self._accumulator: ImportResultAccumulator | None = None

    @property
    def file_count(self) -> int:
        """Return the number of files in the batch."""
        return len(self._files)

    @property
    def results(self) -> ImportResult:
        """Return the aggregated batch result.

        Raises:
            SortieImportStateError: If any file has not settled yet.
        """
        accumulator = self._accumulator
        if accumulator is None or accumulator.processed_count != self.file_count:
            raise SortieImportStateError(
                "Mission import results are not available yet: "
                f"{0 if accumulator is None else accumulator.processed_count} of "
                f"{self.file_count} files have been processed. Await execute() first."
            )
        return accumulator.snapshot()

    async def execute(self) -> ImportResult:
        """Import every file and return the aggregated result."""
        accumulator = ImportResultAccumulator()
        self._accumulator = accumulator
        await asyncio.gather(
            *(self._import_and_record(file, accumulator) for file in self._files)
        )
        result = accumulator.snapshot()
        _log_batch_summary(result)
        return result

    async def _import_and_record(
        self,
        file: FileImportData,
        accumulator: ImportResultAccumulator,
    ) -> None:
        outcome = await self._pipeline.import_one(file)
        if not outcome.succeeded:
            _LOGGER.warning(
                "mission_import_failed",
                file_name=outcome.file_name,
                stage=outcome.stage,
                error_message=outcome.error_message,
            )
        await accumulator.record(outcome)


async def import_missions(
    files: FileImportData | Sequence[FileImportData],
    store: MissionWriter,
    ids: IdGenerator,
    options: ImportOptions | None = None,
) -> ImportResult:
    """Run one batch import and return its result."""
    return await MissionImport(files, store, ids, options).execute()


def _log_batch_summary(result: ImportResult) -> None:
    if result.failed_import_count:
        _LOGGER.warning(
            "mission_imports_failed",
            successful_import_count=result.successful_import_count,
            failed_import_count=result.failed_import_count,
            failed_files=[failure.file_name for failure in result.failed_import_error_messages],
        )
        return
    _LOGGER.info(
        "mission_import_completed",
        successful_import_count=result.successful_import_count,
        failed_import_count=0,
    )
