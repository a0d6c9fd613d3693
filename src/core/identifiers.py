"""Opaque identifier generation.

This module issues the string identifiers assigned to mission components
and recognizes legacy database identifiers that must be replaced.
"""

from __future__ import annotations

import random
import re
import uuid

from core.config import SortieConfig

_OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


class IdGenerator:
    """Generator of opaque UUID-formatted identifiers.

    A seeded generator yields a reproducible sequence, which keeps
    migrated fixtures and CLI dry-runs stable across runs.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed) if seed is not None else None

    def generate_id(self) -> str:
        """Return a new opaque identifier."""
        if self._rng is None:
            return str(uuid.uuid4())
        return str(uuid.UUID(int=self._rng.getrandbits(128), version=4))


def build_id_generator(config: SortieConfig) -> IdGenerator:
    """Build the identifier generator configured for this process."""
    return IdGenerator(config.id_seed)


def is_legacy_object_id(value: object) -> bool:
    """Return whether a value looks like a legacy database object id.

    Accepts both the bare 24-character hex form and the extended JSON
    ``{"$oid": "..."}`` form produced by database exports.
    """
    if isinstance(value, dict) and set(value) == {"$oid"}:
        value = value["$oid"]
    return isinstance(value, str) and _OBJECT_ID_PATTERN.match(value) is not None
