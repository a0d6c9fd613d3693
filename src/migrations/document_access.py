"""Shape-checked traversal helpers for in-flight mission documents.

Migration steps walk loosely typed documents whose shape depends on
their generation. These helpers fail with a migration error instead of
a bare ``KeyError`` when a required container is missing.
"""

from __future__ import annotations

from typing import Any, Iterator, MutableMapping

from core.errors import SortieMigrationError

MissionDocument = MutableMapping[str, Any]


def require_list(container: MissionDocument, key: str, location: str) -> list[Any]:
    """Return a required list field from a document container.

    Args:
        container: Mapping that should hold the list.
        key: Field name of the list.
        location: Human-readable location of the container for errors.

    Returns:
        The list stored under ``key``.

    Raises:
        SortieMigrationError: If the field is missing or not a list.
    """
    value = container.get(key)
    if not isinstance(value, list):
        found = "nothing" if value is None else type(value).__name__
        raise SortieMigrationError(
            f"Expected a list at {location}.{key} but found {found}. "
            "The mission data does not match any known mission format."
        )
    return value


def require_mapping(value: object, location: str) -> MissionDocument:
    """Return a value as a mapping or fail with a migration error."""
    if not isinstance(value, MutableMapping):
        raise SortieMigrationError(
            f"Expected an object at {location} but found {type(value).__name__}. "
            "The mission data does not match any known mission format."
        )
    return value


def iter_legacy_nodes(document: MissionDocument) -> Iterator[MissionDocument]:
    """Yield nodes of a document from before forces were introduced."""
    for index, node in enumerate(require_list(document, "nodeData", "mission")):
        yield require_mapping(node, f"mission.nodeData[{index}]")


def iter_force_nodes(document: MissionDocument) -> Iterator[MissionDocument]:
    """Yield nodes of every force in a document that has forces."""
    for force in iter_forces(document):
        location = f"force '{force.get('name', '?')}'"
        for index, node in enumerate(require_list(force, "nodes", location)):
            yield require_mapping(node, f"{location}.nodes[{index}]")


def iter_forces(document: MissionDocument) -> Iterator[MissionDocument]:
    """Yield forces of a document that has forces."""
    for index, force in enumerate(require_list(document, "forces", "mission")):
        yield require_mapping(force, f"mission.forces[{index}]")


def iter_actions(node: MissionDocument) -> Iterator[MissionDocument]:
    """Yield actions of one node."""
    location = f"node '{node.get('name', '?')}'"
    for index, action in enumerate(require_list(node, "actions", location)):
        yield require_mapping(action, f"{location}.actions[{index}]")


def iter_effects(action: MissionDocument) -> Iterator[MissionDocument]:
    """Yield effects of one action."""
    location = f"action '{action.get('name', '?')}'"
    for index, effect in enumerate(require_list(action, "effects", location)):
        yield require_mapping(effect, f"{location}.effects[{index}]")
