"""Ordered catalog of mission schema migration steps.

Each entry upgrades a document *to* its target generation. Entries are
listed in ascending target-generation order and the runner relies on
that order without re-sorting, so new generations are appended here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from core.errors import SortieMigrationError
from core.identifiers import IdGenerator
from migrations import force_steps, node_data_steps
from migrations.document_access import MissionDocument

StepFunction = Callable[[MissionDocument, IdGenerator], None]


@dataclass(frozen=True)
class MigrationStep:
    """One generation-tagged document transform.

    Attributes:
        target_generation: Generation a document has after this step.
        name: Stable step name used in logs and dry-run output.
        apply: In-place transform from the previous generation's shape.
    """

    target_generation: int
    name: str
    apply: StepFunction


def build_registry(steps: Sequence[MigrationStep]) -> tuple[MigrationStep, ...]:
    """Validate step ordering and freeze a registry.

    Args:
        steps: Steps in registration order.

    Returns:
        Immutable registry tuple.

    Raises:
        SortieMigrationError: If target generations are not strictly ascending.
    """
    previous_generation = -1
    for step in steps:
        if step.target_generation <= previous_generation:
            raise SortieMigrationError(
                f"Migration step '{step.name}' targets generation {step.target_generation}, "
                f"which does not follow generation {previous_generation}. "
                "Register steps in ascending target-generation order."
            )
        previous_generation = step.target_generation
    return tuple(steps)


MIGRATION_REGISTRY = build_registry(
    [
        MigrationStep(5, "add_node_descriptions", node_data_steps.add_node_descriptions),
        MigrationStep(9, "add_action_scripts", node_data_steps.add_action_scripts),
        MigrationStep(10, "convert_node_colors_to_hex", node_data_steps.convert_node_colors_to_hex),
        MigrationStep(11, "add_intro_message", node_data_steps.add_intro_message),
        MigrationStep(
            12, "wrap_rich_text_in_paragraphs", node_data_steps.wrap_rich_text_in_paragraphs
        ),
        MigrationStep(
            13, "clear_placeholder_node_text", node_data_steps.clear_placeholder_node_text
        ),
        MigrationStep(
            17, "replace_scripts_with_effects", node_data_steps.replace_scripts_with_effects
        ),
        MigrationStep(
            18,
            "regenerate_placeholder_action_ids",
            node_data_steps.regenerate_placeholder_action_ids,
        ),
        MigrationStep(
            20,
            "rename_node_ids_to_structure_keys",
            node_data_steps.rename_node_ids_to_structure_keys,
        ),
        MigrationStep(
            23, "group_nodes_into_default_force", force_steps.group_nodes_into_default_force
        ),
        MigrationStep(
            24,
            "split_effects_into_external_and_internal",
            force_steps.split_effects_into_external_and_internal,
        ),
        MigrationStep(25, "merge_external_effects", force_steps.merge_external_effects),
        MigrationStep(26, "replace_legacy_object_ids", force_steps.replace_legacy_object_ids),
        MigrationStep(
            27,
            "move_initial_resources_to_forces",
            force_steps.move_initial_resources_to_forces,
        ),
        MigrationStep(
            28, "move_intro_message_to_forces", force_steps.move_intro_message_to_forces
        ),
        MigrationStep(29, "extract_node_prototypes", force_steps.extract_node_prototypes),
    ]
)
LATEST_GENERATION = MIGRATION_REGISTRY[-1].target_generation
