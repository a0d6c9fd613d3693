"""Unit tests for batch import coordination."""

from __future__ import annotations

import asyncio
from dataclasses import replace

import pytest

from core.config import SortieConfig
from core.errors import SortieImportStateError
from core.identifiers import IdGenerator
from core.types import FileImportData
from ingest.batch import MissionImport, import_missions
from store.mission_store import MissionStore
from tests.fixture_paths import fixture_path


def _fixture_file(relative_path: str) -> FileImportData:
    path = fixture_path(relative_path)
    return FileImportData(name=path.name, path=path)


def _store(tmp_path) -> MissionStore:
    return MissionStore(replace(SortieConfig.from_env(), data_root=tmp_path))


def test_execute_counts_successes_and_failures(tmp_path) -> None:
    """A mixed batch should report every file exactly once."""
    files = [
        _fixture_file("missions/legacy_mission.cesar"),
        _fixture_file("missions/truncated.metis"),
        _fixture_file("missions/two_force_mission.metis"),
        FileImportData(name="wrong.json", content=b'{"schemaBuildNumber": 29}'),
    ]
    store = _store(tmp_path)

    result = asyncio.run(MissionImport(files, store, IdGenerator(seed=5)).execute())

    assert (result.successful_import_count, result.failed_import_count) == (2, 2)
    assert {failure.file_name for failure in result.failed_import_error_messages} == {
        "truncated.metis",
        "wrong.json",
    }
    assert store.count() == 2


def test_results_before_execute_raises_state_error(tmp_path) -> None:
    """Results should be unreadable until every file settles."""
    mission_import = MissionImport(
        _fixture_file("missions/legacy_mission.cesar"),
        _store(tmp_path),
        IdGenerator(seed=5),
    )

    with pytest.raises(SortieImportStateError):
        _ = mission_import.results

    assert mission_import.file_count == 1


def test_results_after_execute_match_returned_result(tmp_path) -> None:
    """The results property should mirror the execute return value."""
    mission_import = MissionImport(
        [_fixture_file("missions/legacy_mission.cesar")],
        _store(tmp_path),
        IdGenerator(seed=5),
    )

    result = asyncio.run(mission_import.execute())

    assert mission_import.results == result


def test_all_failed_batch_does_not_raise(tmp_path) -> None:
    """A batch of bad files should still produce a result."""
    files = [
        FileImportData(name="a.metis", content=b"not json"),
        FileImportData(name="b.metis", content=b"{}"),
    ]

    result = asyncio.run(import_missions(files, _store(tmp_path), IdGenerator(seed=5)))

    assert result.to_payload() == {
        "successfulImportCount": 0,
        "failedImportCount": 2,
        "failedImportErrorMessages": [
            {"fileName": failure.file_name, "errorMessage": failure.error_message}
            for failure in result.failed_import_error_messages
        ],
    }
    assert result.successful_import_count == 0


def test_empty_batch_settles_immediately(tmp_path) -> None:
    """A batch with no files should succeed with zero counts."""
    mission_import = MissionImport([], _store(tmp_path), IdGenerator(seed=5))

    result = asyncio.run(mission_import.execute())

    assert (result.successful_import_count, result.failed_import_count) == (0, 0)


_MIXED_BATCH_FILES = {
    "good": lambda: _fixture_file("missions/two_force_mission.metis"),
    "legacy": lambda: _fixture_file("missions/legacy_mission.cesar"),
    "bad_syntax": lambda: FileImportData(name="broken.metis", content=b'{"name": '),
    "no_generation": lambda: FileImportData(name="nogen.metis", content=b'{"name": "x"}'),
    "wrong_extension": lambda: FileImportData(
        name="wrong.json", content=b'{"schemaBuildNumber": 29}'
    ),
}


@pytest.mark.parametrize(
    "ordering",
    [
        ("good", "legacy", "bad_syntax", "no_generation", "wrong_extension"),
        ("wrong_extension", "no_generation", "bad_syntax", "legacy", "good"),
        ("bad_syntax", "good", "wrong_extension", "legacy", "no_generation"),
        ("no_generation", "wrong_extension", "good", "bad_syntax", "legacy"),
    ],
)
def test_execute_counts_hold_for_any_file_order(tmp_path, ordering: tuple[str, ...]) -> None:
    """Batch counts should not depend on the order files are given in."""
    files = [_MIXED_BATCH_FILES[label]() for label in ordering]
    store = _store(tmp_path)

    result = asyncio.run(MissionImport(files, store, IdGenerator(seed=5)).execute())

    counts = (
        result.successful_import_count,
        result.failed_import_count,
        len(result.failed_import_error_messages),
    )
    assert counts == (2, 3, 3)
    assert {failure.file_name for failure in result.failed_import_error_messages} == {
        "broken.metis",
        "nogen.metis",
        "wrong.json",
    }
    assert store.count() == 2
