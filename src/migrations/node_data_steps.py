"""Migration steps for documents that still store a flat ``nodeData`` list.

These steps cover generations 5 through 20, before nodes were grouped
into forces. Each step mutates the document in place.
"""

from __future__ import annotations

import secrets

from core.constants import (
    DEFAULT_INTRO_MESSAGE,
    DEFAULT_NODE_DESCRIPTION,
    EMPTY_RICH_TEXT,
    LEGACY_NODE_COLORS,
    MIGRATION_GENERATED_ACTION_ID,
    PLACEHOLDER_NODE_DESCRIPTIONS,
    PLACEHOLDER_PRE_EXECUTION_TEXTS,
)
from core.identifiers import IdGenerator
from migrations.document_access import MissionDocument, iter_actions, iter_legacy_nodes

_NODE_RICH_TEXT_FIELDS = ("description", "preExecutionText")
_ACTION_RICH_TEXT_FIELDS = (
    "description",
    "postExecutionSuccessText",
    "postExecutionFailureText",
)


def add_node_descriptions(document: MissionDocument, ids: IdGenerator) -> None:
    """Give every node a description."""
    for node in iter_legacy_nodes(document):
        node.setdefault("description", DEFAULT_NODE_DESCRIPTION)


def add_action_scripts(document: MissionDocument, ids: IdGenerator) -> None:
    """Give every action an empty script list."""
    for node in iter_legacy_nodes(document):
        for action in iter_actions(node):
            action.setdefault("scripts", [])


def convert_node_colors_to_hex(document: MissionDocument, ids: IdGenerator) -> None:
    """Map legacy color keywords to hex codes.

    Values outside the legacy keyword set are left untouched.
    """
    for node in iter_legacy_nodes(document):
        color = node.get("color")
        if isinstance(color, str) and color in LEGACY_NODE_COLORS:
            node["color"] = LEGACY_NODE_COLORS[color]


def add_intro_message(document: MissionDocument, ids: IdGenerator) -> None:
    """Give the mission an introduction message."""
    document.setdefault("introMessage", DEFAULT_INTRO_MESSAGE)


def wrap_rich_text_in_paragraphs(document: MissionDocument, ids: IdGenerator) -> None:
    """Wrap every rich-text field in a paragraph tag."""
    _wrap_fields(document, ("introMessage",))
    for node in iter_legacy_nodes(document):
        _wrap_fields(node, _NODE_RICH_TEXT_FIELDS)
        for action in iter_actions(node):
            _wrap_fields(action, _ACTION_RICH_TEXT_FIELDS)


def clear_placeholder_node_text(document: MissionDocument, ids: IdGenerator) -> None:
    """Replace canned placeholder node text with empty rich text."""
    for node in iter_legacy_nodes(document):
        if node.get("description") in PLACEHOLDER_NODE_DESCRIPTIONS:
            node["description"] = EMPTY_RICH_TEXT
        if node.get("preExecutionText") in PLACEHOLDER_PRE_EXECUTION_TEXTS:
            node["preExecutionText"] = EMPTY_RICH_TEXT


def replace_scripts_with_effects(document: MissionDocument, ids: IdGenerator) -> None:
    """Drop action scripts and introduce the effects list."""
    for node in iter_legacy_nodes(document):
        for action in iter_actions(node):
            action.setdefault("effects", [])
            action.pop("scripts", None)


def regenerate_placeholder_action_ids(document: MissionDocument, ids: IdGenerator) -> None:
    """Replace action ids written by an early server-side migration."""
    for node in iter_legacy_nodes(document):
        if not node.get("actions"):
            continue
        for action in iter_actions(node):
            if action.get("actionID") == MIGRATION_GENERATED_ACTION_ID:
                action["actionID"] = secrets.token_hex(13)


def rename_node_ids_to_structure_keys(document: MissionDocument, ids: IdGenerator) -> None:
    """Remove runtime ids and rename ``nodeID`` to ``structureKey``.

    Also drops the obsolete ``live`` flag and ``missionID`` from the mission,
    ``actionID`` from actions, and ``id`` from effects.
    """
    document.pop("live", None)
    if document.get("missionID"):
        del document["missionID"]
    for node in iter_legacy_nodes(document):
        if node.get("nodeID"):
            node["structureKey"] = node.pop("nodeID")
        for action in iter_actions(node):
            if action.get("actionID"):
                del action["actionID"]
            for effect in action.get("effects") or []:
                if isinstance(effect, dict) and effect.get("id"):
                    del effect["id"]


def _wrap_fields(container: MissionDocument, field_names: tuple[str, ...]) -> None:
    for field_name in field_names:
        value = container.get(field_name)
        if isinstance(value, str):
            container[field_name] = f"<p>{value}</p>"
