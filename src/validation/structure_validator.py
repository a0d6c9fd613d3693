"""Referential integrity checks for fully migrated mission documents.

The validator walks the final-generation shape and reports the first
violation it finds: duplicate identifiers, a structure map that disagrees
with the declared prototypes, dangling prototype references, or
executable nodes without actions. It never mutates the document.
"""

from __future__ import annotations

from typing import Any, Iterator, Mapping

from core.constants import STRUCTURE_ROOT_KEY
from core.errors import SortieStructureError
from core.types import StructureValidation

_MISSION_PREFIX = "Error in mission:\n"
_STRUCTURE_PREFIX = "Error in the mission's structure:\n"


def validate_mission_structure(document: Mapping[str, Any]) -> StructureValidation:
    """Check a migrated mission for structural integrity.

    Args:
        document: Mission document in the latest generation's shape.

    Returns:
        Validation result holding the first violation, if any.
    """
    try:
        assert_mission_structure(document)
    except SortieStructureError as error:
        return StructureValidation(error=str(error))
    return StructureValidation()


def assert_mission_structure(document: Mapping[str, Any]) -> None:
    """Raise on the first structural violation in a mission.

    Raises:
        SortieStructureError: If any integrity check fails.
    """
    _check_unique_identifiers(document)
    declared_keys = _declared_structure_keys(document)
    reachable_keys = _walk_structure(document.get("structure"), declared_keys)
    _check_key_sets_match(declared_keys, reachable_keys)
    _check_prototype_references(document)
    _check_executable_nodes_have_actions(document)


def _check_unique_identifiers(document: Mapping[str, Any]) -> None:
    seen_node_ids: set[Any] = set()
    for _, _, node in _iter_nodes(document):
        node_id = _hashable(node.get("_id"))
        if node_id is not None:
            if node_id in seen_node_ids:
                raise SortieStructureError(
                    f"{_MISSION_PREFIX}Duplicate node _id used ({node_id})."
                )
            seen_node_ids.add(node_id)
        seen_action_ids: set[Any] = set()
        actions = _list_of_mappings(node.get("actions"), f'node "{node.get("name")}" actions')
        for action in actions:
            action_id = _hashable(action.get("_id"))
            if action_id is None:
                continue
            if action_id in seen_action_ids:
                raise SortieStructureError(
                    f"{_MISSION_PREFIX}Duplicate action _id used ({action_id}) "
                    f'in node "{node.get("name")}".'
                )
            seen_action_ids.add(action_id)


def _declared_structure_keys(document: Mapping[str, Any]) -> set[str]:
    declared: set[str] = set()
    for prototype in _list_of_mappings(document.get("prototypes"), "prototypes"):
        structure_key = _hashable(prototype.get("structureKey"))
        if structure_key in declared:
            raise SortieStructureError(
                f"{_STRUCTURE_PREFIX}Duplicate structureKey declared by prototypes "
                f"({structure_key})."
            )
        declared.add(structure_key)
    return declared


def _walk_structure(structure: Any, declared_keys: set[str]) -> set[str]:
    """Walk the structure map depth-first and collect every key used."""
    visited: set[str] = set()
    pending: list[tuple[str, Any]] = [(STRUCTURE_ROOT_KEY, structure)]
    while pending:
        parent_key, level = pending.pop()
        if not isinstance(level, Mapping):
            raise SortieStructureError(
                f'{_STRUCTURE_PREFIX}"{parent_key}" is set to {level!r}, which is not an object.'
            )
        for key, children in level.items():
            if key in visited:
                raise SortieStructureError(
                    f"{_STRUCTURE_PREFIX}Duplicate structureKey used ({key})."
                )
            if key not in declared_keys:
                raise SortieStructureError(
                    f'{_STRUCTURE_PREFIX}Structure key "{key}" is not declared by any prototype.'
                )
            visited.add(key)
            pending.append((key, children))
    return visited


def _check_key_sets_match(declared_keys: set[str], reachable_keys: set[str]) -> None:
    orphaned = sorted(str(key) for key in declared_keys - reachable_keys)
    if orphaned:
        raise SortieStructureError(
            f'{_STRUCTURE_PREFIX}Structure key "{orphaned[0]}" is declared by a prototype '
            "but missing from the structure."
        )


def _check_prototype_references(document: Mapping[str, Any]) -> None:
    declared_ids = [
        _hashable(prototype.get("_id"))
        for prototype in _list_of_mappings(document.get("prototypes"), "prototypes")
    ]
    prototype_ids = set(declared_ids)
    used_by_force: dict[int, set[Any]] = {}
    for force_index, force, node in _iter_nodes(document):
        prototype_id = _hashable(node.get("prototypeId"))
        location = f'"{node.get("name")}" in "{force.get("name")}"'
        if prototype_id not in prototype_ids:
            raise SortieStructureError(
                f'{_MISSION_PREFIX}Prototype ID "{prototype_id}" for {location} '
                "does not exist in the mission's prototypes."
            )
        used = used_by_force.setdefault(force_index, set())
        if prototype_id in used:
            raise SortieStructureError(
                f'{_MISSION_PREFIX}Prototype ID "{prototype_id}" for {location} '
                "has already been used for another node."
            )
        used.add(prototype_id)
    # Every force carries its own node for each prototype.
    forces = _list_of_mappings(document.get("forces"), "forces")
    for force_index, force in enumerate(forces):
        used = used_by_force.get(force_index, set())
        for prototype_id in declared_ids:
            if prototype_id not in used:
                raise SortieStructureError(
                    f'{_MISSION_PREFIX}Prototype Node with ID "{prototype_id}" '
                    f'is missing from "{force.get("name")}".'
                )


def _check_executable_nodes_have_actions(document: Mapping[str, Any]) -> None:
    for _, force, node in _iter_nodes(document):
        if node.get("executable") is True and not node.get("actions"):
            raise SortieStructureError(
                f'{_MISSION_PREFIX}Node "{node.get("name")}" in "{force.get("name")}" '
                "is executable but has no actions."
            )


def _iter_nodes(
    document: Mapping[str, Any],
) -> Iterator[tuple[int, Mapping[str, Any], Mapping[str, Any]]]:
    forces = _list_of_mappings(document.get("forces"), "forces")
    for force_index, force in enumerate(forces):
        nodes = _list_of_mappings(force.get("nodes"), f'force "{force.get("name")}" nodes')
        for node in nodes:
            yield force_index, force, node


def _list_of_mappings(value: Any, location: str) -> list[Mapping[str, Any]]:
    if not isinstance(value, list) or not all(isinstance(item, Mapping) for item in value):
        raise SortieStructureError(
            f"{_MISSION_PREFIX}The mission's {location} must be a list of objects."
        )
    return value


def _hashable(value: Any) -> Any:
    """Return a set-safe stand-in for identifiers of unexpected types."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return repr(value)
