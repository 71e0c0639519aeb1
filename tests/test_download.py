"""Tests for ROI time-series downloads."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import pytest

from phenocam_seasons.datasources.phenocam import (
    check_frequency,
    download_timeseries,
    fetch_timeseries_csv,
    timeseries_filename,
    timeseries_url,
)
from phenocam_seasons.errors import InvalidInputError, NoMatchingRoiError
from phenocam_seasons.schemas import RoiInfo

if TYPE_CHECKING:
    from pathlib import Path

HARVARD = RoiInfo(site="harvard", veg_type="DB", roi_id=1000, site_years=16.0)
CATALOG = [
    HARVARD,
    RoiInfo(site="harvard", veg_type="EN", roi_id=1000),
    RoiInfo(site="bartlett", veg_type="DB", roi_id=1000),
]


class TestFrequency:
    @pytest.mark.parametrize("frequency", [1, 3])
    def test_valid(self, frequency: int) -> None:
        assert check_frequency(frequency) == frequency

    @pytest.mark.parametrize("frequency", [0, 2, 7])
    def test_invalid(self, frequency: int) -> None:
        with pytest.raises(InvalidInputError, match="frequency"):
            check_frequency(frequency)


class TestUrls:
    def test_filename(self) -> None:
        assert timeseries_filename(HARVARD, 3) == "harvard_DB_1000_3day.csv"
        assert timeseries_filename(HARVARD, 1) == "harvard_DB_1000_1day.csv"

    def test_url(self) -> None:
        assert timeseries_url(HARVARD) == (
            "https://phenocam.nau.edu/data/archive/harvard/ROI/harvard_DB_1000_3day.csv"
        )

    def test_url_rejects_frequency(self) -> None:
        with pytest.raises(InvalidInputError):
            timeseries_url(HARVARD, 5)


class TestFetchTimeseriesCsv:
    @patch("phenocam_seasons.datasources.phenocam.download.session.get")
    def test_returns_content(self, mock_get: Mock) -> None:
        mock_response = Mock()
        mock_response.content = b"date,gcc_90\n"
        mock_response.raise_for_status = Mock()
        mock_get.return_value = mock_response

        assert fetch_timeseries_csv(HARVARD, 1) == b"date,gcc_90\n"
        mock_get.assert_called_once_with(timeseries_url(HARVARD, 1))


class TestDownloadTimeseries:
    @patch("phenocam_seasons.datasources.phenocam.download.fetch_timeseries_csv")
    def test_writes_matching_files(self, mock_fetch: Mock, tmp_path: Path) -> None:
        mock_fetch.return_value = b"date,gcc_90\n2020-01-01,0.3\n"

        written = download_timeseries(
            "^harvard$", "DB", 1000, frequency=3, out_dir=tmp_path / "out", rois=CATALOG
        )

        assert written == [tmp_path / "out" / "harvard_DB_1000_3day.csv"]
        assert written[0].read_bytes() == b"date,gcc_90\n2020-01-01,0.3\n"
        mock_fetch.assert_called_once_with(HARVARD, 3)

    @patch("phenocam_seasons.datasources.phenocam.download.fetch_timeseries_csv")
    def test_all_veg_types(self, mock_fetch: Mock, tmp_path: Path) -> None:
        mock_fetch.return_value = b""
        written = download_timeseries("^harvard$", out_dir=tmp_path, rois=CATALOG)
        assert [p.name for p in written] == [
            "harvard_DB_1000_3day.csv",
            "harvard_EN_1000_3day.csv",
        ]

    @patch("phenocam_seasons.datasources.phenocam.download.fetch_timeseries_csv")
    def test_no_match_raises(self, mock_fetch: Mock, tmp_path: Path) -> None:
        with pytest.raises(NoMatchingRoiError) as exc_info:
            download_timeseries("^konza$", "GR", out_dir=tmp_path, rois=CATALOG)
        assert exc_info.value.site_pattern == "^konza$"
        assert exc_info.value.veg_type == "GR"
        mock_fetch.assert_not_called()

    @patch("phenocam_seasons.datasources.phenocam.download.fetch_rois")
    @patch("phenocam_seasons.datasources.phenocam.download.fetch_timeseries_csv")
    def test_fetches_catalog_when_omitted(
        self, mock_fetch: Mock, mock_rois: Mock, tmp_path: Path
    ) -> None:
        mock_rois.return_value = CATALOG
        mock_fetch.return_value = b""
        written = download_timeseries("bartlett", out_dir=tmp_path)
        assert [p.name for p in written] == ["bartlett_DB_1000_3day.csv"]
        mock_rois.assert_called_once()

    def test_invalid_frequency_before_network(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidInputError):
            download_timeseries("^harvard$", frequency=2, out_dir=tmp_path, rois=CATALOG)
