"""Generic runner for the mission migration registry."""

from __future__ import annotations

from typing import Sequence

from core.constants import GENERATION_FIELD
from core.errors import SortieMigrationError
from core.identifiers import IdGenerator
from migrations.document_access import MissionDocument
from migrations.registry import MIGRATION_REGISTRY, MigrationStep


def migrate_document(
    document: MissionDocument,
    ids: IdGenerator,
    registry: Sequence[MigrationStep] = MIGRATION_REGISTRY,
) -> tuple[int, ...]:
    """Upgrade a mission document in place to the latest generation.

    Every step whose target generation exceeds the document's current
    generation runs in registry order. The generation field advances after
    each step, so a fully migrated document is left untouched by a rerun.

    Args:
        document: Parsed mission document carrying a generation field.
        ids: Identifier generator handed to steps that mint ids.
        registry: Ordered migration steps.

    Returns:
        Target generations of the steps that ran.

    Raises:
        SortieMigrationError: If the generation is invalid or a step
            cannot transform the document.
    """
    applied: list[int] = []
    for step in registry:
        if read_generation(document) < step.target_generation:
            step.apply(document, ids)
            document[GENERATION_FIELD] = step.target_generation
            applied.append(step.target_generation)
    return tuple(applied)


def read_generation(document: MissionDocument) -> int:
    """Return the document's declared generation.

    Raises:
        SortieMigrationError: If the generation is missing or not a
            non-negative integer.
    """
    generation = document.get(GENERATION_FIELD)
    if isinstance(generation, bool) or not isinstance(generation, int) or generation < 0:
        raise SortieMigrationError(
            f"The {GENERATION_FIELD} field is missing or invalid: {generation!r}. "
            "Set it to the non-negative schema generation of the mission."
        )
    return generation
