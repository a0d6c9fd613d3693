"""Unit tests for the migration runner."""

from __future__ import annotations

import copy
import json

import pytest

from core.errors import SortieMigrationError
from core.identifiers import IdGenerator
from migrations.registry import LATEST_GENERATION, MIGRATION_REGISTRY, MigrationStep
from migrations.runner import migrate_document, read_generation
from tests.fixture_paths import fixture_path


def _legacy_document() -> dict:
    return json.loads(fixture_path("missions/legacy_mission.cesar").read_text(encoding="utf-8"))


def test_migrate_document_applies_every_step_to_oldest_document() -> None:
    """A generation-1 document should pass through every registered step."""
    document = _legacy_document()

    applied = migrate_document(document, IdGenerator(seed=1))

    assert applied == tuple(step.target_generation for step in MIGRATION_REGISTRY)
    assert document["schemaBuildNumber"] == LATEST_GENERATION


def test_migrate_document_reaches_final_shape() -> None:
    """Migrated legacy document should carry forces, prototypes, and structure."""
    document = _legacy_document()

    migrate_document(document, IdGenerator(seed=1))

    assert set(document) == {
        "name",
        "versionNumber",
        "schemaBuildNumber",
        "structure",
        "prototypes",
        "forces",
    }
    force = document["forces"][0]
    assert (force["name"], force["initialResources"]) == ("Friendly Force", 50)
    assert force["introMessage"] == "<p>Enter your overview message here.</p>"


def test_migrate_document_converts_legacy_color_keywords() -> None:
    """Legacy keyword colors should become hex codes."""
    document = _legacy_document()

    migrate_document(document, IdGenerator(seed=1))

    colors = [node["color"] for node in document["forces"][0]["nodes"]]
    assert colors == ["#65eb59", "#34a1fb"]


def test_migrate_document_leaves_unknown_colors_untouched() -> None:
    """Colors outside the legacy keyword set should pass through."""
    document = {
        "schemaBuildNumber": 9,
        "nodeData": [{"name": "n", "color": "teal", "actions": []}],
    }

    migrate_document(document, IdGenerator(seed=1), MIGRATION_REGISTRY[:3])

    assert document["nodeData"][0]["color"] == "teal"


def test_migrate_document_is_idempotent() -> None:
    """Re-running a migrated document should change nothing."""
    document = _legacy_document()
    migrate_document(document, IdGenerator(seed=1))
    migrated = copy.deepcopy(document)

    applied = migrate_document(document, IdGenerator(seed=2))

    assert applied == () and document == migrated


def test_migrate_document_skips_steps_at_or_below_declared_generation() -> None:
    """Only steps above the declared generation should run."""
    calls: list[str] = []
    registry = [
        MigrationStep(3, "three", lambda document, ids: calls.append("three")),
        MigrationStep(4, "four", lambda document, ids: calls.append("four")),
        MigrationStep(6, "six", lambda document, ids: calls.append("six")),
    ]
    document = {"schemaBuildNumber": 4}

    applied = migrate_document(document, IdGenerator(seed=1), registry)

    assert (applied, calls, document["schemaBuildNumber"]) == ((6,), ["six"], 6)


def test_migrate_document_missing_node_data_raises_error() -> None:
    """A pre-force document without nodes should fail migration."""
    document = {"schemaBuildNumber": 20, "name": "empty"}

    with pytest.raises(SortieMigrationError):
        migrate_document(document, IdGenerator(seed=1))


def test_read_generation_rejects_boolean_marker() -> None:
    """Boolean generation markers should not count as integers."""
    with pytest.raises(SortieMigrationError):
        read_generation({"schemaBuildNumber": True})


def _without_ids(value: object) -> object:
    if isinstance(value, dict):
        return {
            key: _without_ids(item)
            for key, item in value.items()
            if key not in ("_id", "prototypeId")
        }
    if isinstance(value, list):
        return [_without_ids(item) for item in value]
    return value


def _generation_11_document() -> dict:
    return {
        "schemaBuildNumber": 11,
        "missionID": "m-ridge",
        "live": False,
        "name": "Ridge",
        "versionNumber": 2,
        "initialResources": 30,
        "introMessage": "Hold the ridge.",
        "nodeStructure": {"gate": {"relay": {}}},
        "nodeData": [
            {
                "nodeID": "gate",
                "name": "Gate",
                "color": "#65eb59",
                "description": "Description not set...",
                "preExecutionText": "Node has not been executed.",
                "depthPadding": 0,
                "executable": False,
                "device": False,
                "actions": [],
            },
            {
                "nodeID": "relay",
                "name": "Relay",
                "color": "#34a1fb",
                "description": "Relay station.",
                "preExecutionText": "Stand by.",
                "depthPadding": 10,
                "executable": True,
                "device": True,
                "actions": [
                    {
                        "actionID": "jam-1",
                        "name": "Jam",
                        "description": "Jam the relay.",
                        "processTime": 2000,
                        "successChance": 0.5,
                        "resourceCost": 5,
                        "postExecutionSuccessText": "Jammed.",
                        "postExecutionFailureText": "Still up.",
                        "scripts": [],
                    }
                ],
            },
        ],
    }


def _generation_24_document() -> dict:
    return {
        "schemaBuildNumber": 24,
        "name": "Ridge",
        "versionNumber": 2,
        "initialResources": 30,
        "introMessage": "<p>Hold the ridge.</p>",
        "nodeStructure": {"gate": {"relay": {}}},
        "forces": [
            {
                "name": "Friendly Force",
                "color": "#52b1ff",
                "nodes": [
                    {
                        "structureKey": "gate",
                        "name": "Gate",
                        "color": "#65eb59",
                        "description": "<p><br></p>",
                        "preExecutionText": "<p><br></p>",
                        "depthPadding": 0,
                        "executable": False,
                        "device": False,
                        "actions": [],
                    },
                    {
                        "structureKey": "relay",
                        "name": "Relay",
                        "color": "#34a1fb",
                        "description": "<p>Relay station.</p>",
                        "preExecutionText": "<p>Stand by.</p>",
                        "depthPadding": 10,
                        "executable": True,
                        "device": True,
                        "actions": [
                            {
                                "name": "Jam",
                                "description": "<p>Jam the relay.</p>",
                                "processTime": 2000,
                                "successChance": 0.5,
                                "resourceCost": 5,
                                "postExecutionSuccessText": "<p>Jammed.</p>",
                                "postExecutionFailureText": "<p>Still up.</p>",
                                "externalEffects": [],
                                "internalEffects": [],
                            }
                        ],
                    },
                ],
            }
        ],
    }


def test_migrate_document_converges_from_early_and_late_generations() -> None:
    """One mission declared at two generations should migrate to the same document."""
    early = _generation_11_document()
    late = _generation_24_document()

    early_applied = migrate_document(early, IdGenerator(seed=1))
    late_applied = migrate_document(late, IdGenerator(seed=2))

    assert early_applied[0] == 12 and late_applied[0] == 25
    assert _without_ids(early) == _without_ids(late)
    assert early["forces"][0]["nodes"][0]["description"] == ""
