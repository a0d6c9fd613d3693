"""Runtime configuration model for Sortie.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import DEFAULT_DATA_ROOT
from core.errors import SortieConfigError


@dataclass(frozen=True)
class SortieConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory for the mission store.
        seed_mission_path: Optional override for the default seed mission file.
        id_seed: Optional seed for deterministic identifier generation.
        s3_region: Optional default AWS region for S3 sources.
        s3_profile: Optional AWS profile for boto3 session initialization.
    """

    data_root: Path
    seed_mission_path: Path | None
    id_seed: int | None
    s3_region: str | None
    s3_profile: str | None

    @classmethod
    def from_env(cls) -> "SortieConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            SortieConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("SORTIE_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        seed_mission_value = os.getenv("SORTIE_SEED_MISSION")
        id_seed_value = os.getenv("SORTIE_ID_SEED")
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            seed_mission_path=_parse_optional_path(seed_mission_value),
            id_seed=_parse_id_seed(id_seed_value),
            s3_region=os.getenv("SORTIE_S3_REGION"),
            s3_profile=os.getenv("SORTIE_S3_PROFILE"),
        )


def _parse_optional_path(raw_value: str | None) -> Path | None:
    """Resolve an optional path environment value."""
    if not raw_value:
        return None
    return Path(raw_value).expanduser().resolve()


def _parse_id_seed(raw_value: str | None) -> int | None:
    """Parse the identifier seed environment value.

    Args:
        raw_value: Raw string from environment, if set.

    Returns:
        Parsed integer seed, or None when unset.

    Raises:
        SortieConfigError: If value cannot be parsed into int.
    """
    if raw_value is None or not raw_value.strip():
        return None
    try:
        return int(raw_value)
    except ValueError as error:
        raise SortieConfigError(
            "Invalid SORTIE_ID_SEED value: "
            f"expected integer, got '{raw_value}'. "
            "Set SORTIE_ID_SEED to a numeric value or unset it."
        ) from error
