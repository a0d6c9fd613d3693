"""Parsing and envelope checks for raw mission files.

This module turns file text into an in-flight document and verifies the
transport envelope: a generation marker and a file extension that agrees
with it.
"""

from __future__ import annotations

import json
from typing import Any

from core.constants import (
    CURRENT_EXTENSION,
    GENERATION_FIELD,
    LAST_LEGACY_GENERATION,
    LEGACY_EXTENSION,
)
from core.errors import SortieImportFileError
from ingest.source_reader import has_recognized_extension


def parse_document_text(text: str) -> Any:
    """Parse mission file text into a document.

    Args:
        text: Decoded file contents.

    Returns:
        Parsed JSON payload.

    Raises:
        SortieImportFileError: If the text is not valid JSON.
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as error:
        raise SortieImportFileError(
            "Error parsing JSON.\n"
            f"Unexpected token in JSON at character {error.pos + 1} "
            f"(line {error.lineno}, column {error.colno}).",
            "parsing",
        ) from error
    return payload


def check_document_envelope(file_name: str, document: Any) -> int:
    """Validate the generation marker against the file extension.

    Generations up to and including the last legacy generation must use
    the legacy extension; later generations must use the current one.

    Args:
        file_name: Original file name.
        document: Parsed JSON payload.

    Returns:
        Declared schema generation.

    Raises:
        SortieImportFileError: If the payload is not an object, the marker
            is missing, or the extension does not match it.
    """
    if not isinstance(document, dict):
        raise SortieImportFileError(
            "Expected a JSON object at the top level. This file is either not actually a .cesar file, "
            "not actually a .metis file, or is corrupted.",
            "validating-envelope",
        )
    generation = document.get(GENERATION_FIELD)
    if isinstance(generation, bool) or not isinstance(generation, int) or generation < 0:
        raise SortieImportFileError(
            f"The {GENERATION_FIELD} field is missing or invalid in the JSON.",
            "validating-envelope",
        )
    lowered_name = file_name.lower()
    if not has_recognized_extension(lowered_name):
        raise _extension_error(file_name, f"{CURRENT_EXTENSION} or {LEGACY_EXTENSION}")
    if generation <= LAST_LEGACY_GENERATION and not lowered_name.endswith(LEGACY_EXTENSION):
        raise _extension_error(file_name, LEGACY_EXTENSION)
    if generation > LAST_LEGACY_GENERATION and not lowered_name.endswith(CURRENT_EXTENSION):
        raise _extension_error(file_name, CURRENT_EXTENSION)
    return generation


def _extension_error(file_name: str, expected: str) -> SortieImportFileError:
    return SortieImportFileError(
        f'The file "{file_name}" was rejected because it did not have the {expected} extension.',
        "validating-envelope",
    )
