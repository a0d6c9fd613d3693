"""Core constants used across Sortie modules.

This module centralizes file formats, schema markers, and defaults.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".sortie")
MISSIONS_DIR_NAME = "missions"
CATALOG_FILE_NAME = "catalog.json"
SEED_DATA_DIR_NAME = "seed_data"
DEFAULT_SEED_MISSION_FILE_NAME = "default.metis"

GENERATION_FIELD = "schemaBuildNumber"
LEGACY_EXTENSION = ".cesar"
CURRENT_EXTENSION = ".metis"
RECOGNIZED_EXTENSIONS = (LEGACY_EXTENSION, CURRENT_EXTENSION)
LAST_LEGACY_GENERATION = 9

ERROR_MESSAGE_BACKTICK = "`"
ERROR_MESSAGE_BACKTICK_REPLACEMENT = "*"

DEFAULT_FORCE_NAME = "Friendly Force"
DEFAULT_FORCE_COLOR = "#52b1ff"
DEFAULT_NODE_DESCRIPTION = "Description not set..."
DEFAULT_INTRO_MESSAGE = "Enter your overview message here."
MIGRATION_GENERATED_ACTION_ID = "migration-generated-action"
EMPTY_RICH_TEXT = "<p><br></p>"

LEGACY_NODE_COLORS = {
    "default": "#ffffff",
    "green": "#65eb59",
    "pink": "#fa39ac",
    "yellow": "#f7e346",
    "blue": "#34a1fb",
    "purple": "#ae66d6",
    "red": "#f9484f",
    "brown": "#ac8750",
    "orange": "#ffab50",
}
PLACEHOLDER_NODE_DESCRIPTIONS = (
    "<p>No description set...</p>",
    "<p>Description text goes here.</p>",
    "<p>Description not set...</p>",
)
PLACEHOLDER_PRE_EXECUTION_TEXTS = (
    "<p>No pre-execution text set...</p>",
    "<p>Node has not been executed.</p>",
)

MIN_FORCE_COUNT = 1
MAX_FORCE_COUNT = 8
MIN_NODES_PER_FORCE = 1
MAX_PROCESS_TIME_MS = 3600 * 1000
MAX_MISSION_NAME_LENGTH = 175
MAX_FORCE_NAME_LENGTH = 175
MAX_NODE_NAME_LENGTH = 175
MAX_ACTION_NAME_LENGTH = 175
MAX_EFFECT_NAME_LENGTH = 175
HEX_COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"
STRUCTURE_ROOT_KEY = "ROOT"
