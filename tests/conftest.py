"""Shared fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from roi_files import build_roi_csv

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def roi_csv_text() -> str:
    return build_roi_csv()


@pytest.fixture
def roi_csv_path(tmp_path: Path, roi_csv_text: str) -> Path:
    path = tmp_path / "harvard_DB_1000_3day.csv"
    path.write_text(roi_csv_text)
    return path
