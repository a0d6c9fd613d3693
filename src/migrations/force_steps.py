"""Migration steps that introduce and reshape forces.

These steps cover generations 23 through 29: grouping nodes into forces,
settling the effect representation, replacing legacy identifiers,
moving mission settings onto forces, and extracting node prototypes.
"""

from __future__ import annotations

from typing import Any

from core.constants import DEFAULT_FORCE_COLOR, DEFAULT_FORCE_NAME, EMPTY_RICH_TEXT
from core.identifiers import IdGenerator, is_legacy_object_id
from migrations.document_access import (
    MissionDocument,
    iter_actions,
    iter_effects,
    iter_force_nodes,
    iter_forces,
    require_list,
    require_mapping,
)


def group_nodes_into_default_force(document: MissionDocument, ids: IdGenerator) -> None:
    """Move the flat node list into a single default force."""
    nodes = require_list(document, "nodeData", "mission")
    document["forces"] = [
        {
            "name": DEFAULT_FORCE_NAME,
            "color": DEFAULT_FORCE_COLOR,
            "nodes": nodes,
        }
    ]
    del document["nodeData"]


def split_effects_into_external_and_internal(
    document: MissionDocument,
    ids: IdGenerator,
) -> None:
    """Rename ``effects`` to ``externalEffects`` and add ``internalEffects``."""
    for node in iter_force_nodes(document):
        for action in iter_actions(node):
            action.setdefault("internalEffects", [])
            if "effects" in action:
                action["externalEffects"] = action.pop("effects")


def merge_external_effects(document: MissionDocument, ids: IdGenerator) -> None:
    """Collapse external/internal effects back into one ``effects`` list.

    Empty rich-text markers on descriptions become empty strings.
    """
    for node in iter_force_nodes(document):
        _clear_empty_rich_text(node, ("description", "preExecutionText"))
        for action in iter_actions(node):
            _clear_empty_rich_text(action, ("description",))
            action.pop("internalEffects", None)
            if "externalEffects" in action:
                action["effects"] = action.pop("externalEffects")
            for effect in iter_effects(action):
                _clear_empty_rich_text(effect, ("description",))


def replace_legacy_object_ids(document: MissionDocument, ids: IdGenerator) -> None:
    """Give forces, nodes, actions, and effects opaque string ids.

    Ids that are missing or shaped like legacy database object ids are
    regenerated; every other id is preserved.
    """
    for force in iter_forces(document):
        _ensure_opaque_id(force, ids)
    for node in iter_force_nodes(document):
        _ensure_opaque_id(node, ids)
        for action in iter_actions(node):
            _ensure_opaque_id(action, ids)
            for effect in iter_effects(action):
                _ensure_opaque_id(effect, ids)


def move_initial_resources_to_forces(document: MissionDocument, ids: IdGenerator) -> None:
    """Copy mission initial resources onto each force with none or zero."""
    _move_field_to_forces(document, "initialResources")


def move_intro_message_to_forces(document: MissionDocument, ids: IdGenerator) -> None:
    """Copy the mission introduction message onto each force with none or blank."""
    _move_field_to_forces(document, "introMessage")


def extract_node_prototypes(document: MissionDocument, ids: IdGenerator) -> None:
    """Extract shared prototypes from node structure keys.

    Renames ``nodeStructure`` to ``structure``, creates one prototype per
    distinct structure key carrying that key and its depth padding, points
    each node at its prototype, and removes both fields from the nodes.
    """
    structure = require_mapping(document.get("nodeStructure"), "mission.nodeStructure")
    document["structure"] = structure
    del document["nodeStructure"]

    prototypes_by_key: dict[Any, dict[str, Any]] = {}
    for node in iter_force_nodes(document):
        structure_key = node.get("structureKey")
        prototype = prototypes_by_key.get(structure_key)
        if prototype is None:
            prototype = {
                "_id": ids.generate_id(),
                "structureKey": structure_key,
                "depthPadding": node.get("depthPadding"),
            }
            prototypes_by_key[structure_key] = prototype
        node["prototypeId"] = prototype["_id"]
        node.pop("structureKey", None)
        node.pop("depthPadding", None)
    document["prototypes"] = list(prototypes_by_key.values())


def _clear_empty_rich_text(container: MissionDocument, field_names: tuple[str, ...]) -> None:
    for field_name in field_names:
        if container.get(field_name) == EMPTY_RICH_TEXT:
            container[field_name] = ""


def _ensure_opaque_id(container: MissionDocument, ids: IdGenerator) -> None:
    current_id = container.get("_id")
    if not current_id or is_legacy_object_id(current_id):
        container["_id"] = ids.generate_id()


def _move_field_to_forces(document: MissionDocument, field_name: str) -> None:
    for force in iter_forces(document):
        if not force.get(field_name) and field_name in document:
            force[field_name] = document[field_name]
    document.pop(field_name, None)
