"""Pytest configuration for Sortie test runs."""

from __future__ import annotations

import sys
from pathlib import Path


def pytest_sessionstart() -> None:
    """Put the src tree ahead of installed copies for test imports."""
    src_path = Path(__file__).resolve().parent.parent / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))
