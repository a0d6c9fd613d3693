"""Sortie exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations

from typing import Sequence


class SortieError(Exception):
    """Base exception for all Sortie failures."""


class SortieConfigError(SortieError):
    """Raised for invalid runtime configuration."""


class SortieIngestError(SortieError):
    """Raised when import sources cannot be collected."""


class SortieImportFileError(SortieError):
    """Raised for transport failures attributable to one import file.

    Attributes:
        stage: Pipeline stage that rejected the file.
    """

    def __init__(self, message: str, stage: str) -> None:
        super().__init__(message)
        self.stage = stage


class SortieMigrationError(SortieError):
    """Raised when a migration step cannot transform a document."""


class SortieStructureError(SortieError):
    """Raised when a mission violates structural integrity."""


class SortieStoreError(SortieError):
    """Raised for mission store persistence failures."""


class SortieSchemaViolation(SortieStoreError):
    """Raised when a document does not match the stored mission schema.

    Attributes:
        unknown_fields: Dotted paths of fields the schema does not recognize.
    """

    def __init__(self, message: str, unknown_fields: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.unknown_fields = tuple(unknown_fields)


class SortieImportStateError(SortieError):
    """Raised when batch results are read before every file has settled."""


class SortieSeedError(SortieError):
    """Raised when default missions cannot be seeded."""


class SortieDependencyError(SortieError):
    """Raised when an optional runtime dependency is missing."""


class SortieManifestError(SortieError):
    """Raised for invalid or unsupported import manifest files."""
