"""Unit tests for core config parsing."""

from __future__ import annotations

import os

import pytest

from core.config import SortieConfig
from core.errors import SortieConfigError


def test_from_env_reads_data_root(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should resolve data root from environment."""
    monkeypatch.setenv("SORTIE_DATA_ROOT", "./.tmp-sortie")

    config = SortieConfig.from_env()

    assert config.data_root.name == ".tmp-sortie"


def test_from_env_raises_for_invalid_id_seed(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for non-numeric identifier seed."""
    monkeypatch.setenv("SORTIE_ID_SEED", "not-a-number")

    with pytest.raises(SortieConfigError):
        SortieConfig.from_env()

    assert os.getenv("SORTIE_ID_SEED") == "not-a-number"


def test_from_env_reads_optional_values(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Config should parse seed mission path, id seed, and S3 defaults."""
    monkeypatch.setenv("SORTIE_SEED_MISSION", str(tmp_path / "seed.metis"))
    monkeypatch.setenv("SORTIE_ID_SEED", "7")
    monkeypatch.setenv("SORTIE_S3_REGION", "us-east-2")
    monkeypatch.delenv("SORTIE_S3_PROFILE", raising=False)

    config = SortieConfig.from_env()

    assert (config.seed_mission_path, config.id_seed, config.s3_region, config.s3_profile) == (
        (tmp_path / "seed.metis").resolve(),
        7,
        "us-east-2",
        None,
    )


def test_from_env_treats_blank_id_seed_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    """Blank identifier seed should leave generation random."""
    monkeypatch.setenv("SORTIE_ID_SEED", "  ")

    assert SortieConfig.from_env().id_seed is None
