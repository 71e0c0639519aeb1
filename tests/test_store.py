"""Tests for the DataStore module."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from phenocam_seasons.store import ARCHIVE_TTL, REFERENCE_TTL, DataStore

CSV = b"# Site: harvard\ndate,gcc_90\n2020-01-01,0.33\n"


class TestDataStoreInit:
    """Test DataStore initialization."""

    def test_creates_tier_paths(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        assert store.base == tmp_path
        assert store.reference == tmp_path / "reference"
        assert store.archive == tmp_path / "archive"
        assert store.derived == tmp_path / "derived"

    def test_ttls(self) -> None:
        assert REFERENCE_TTL == timedelta(days=7)
        assert ARCHIVE_TTL == timedelta(hours=24)


class TestDataStoreWrite:
    """Test writing data with metadata envelopes."""

    def test_write_envelope_format(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        valid = datetime(2026, 3, 1, tzinfo=UTC)
        path = store.write(
            Path("reference/rois.json"), [{"site": "harvard"}], source="phenocam", valid_until=valid
        )

        assert path == tmp_path / "reference" / "rois.json"
        data = json.loads(path.read_text())
        assert data["meta"]["source"] == "phenocam"
        assert "fetched_at" in data["meta"]
        assert data["meta"]["valid_until"] == valid.isoformat()
        assert data["data"] == [{"site": "harvard"}]

    def test_write_extra_params(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        store.write(
            Path("derived/transitions/x.json"), {}, source="test", thresholds=[0.1, 0.5]
        )
        data = json.loads((tmp_path / "derived" / "transitions" / "x.json").read_text())
        assert data["meta"]["thresholds"] == [0.1, 0.5]
        assert "valid_until" not in data["meta"]

    def test_write_outside_base_rejected(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path / "data")
        with pytest.raises(ValueError, match="escapes"):
            store.write(Path("../elsewhere.json"), {}, source="test")


class TestDataStoreRead:
    """Test reading data from the store."""

    def test_read_returns_data_payload(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        store.write(Path("reference/sites.json"), {"key": "value"}, source="test")
        assert store.read(Path("reference/sites.json")) == {"key": "value"}

    def test_read_missing_file(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        assert store.read(Path("nonexistent.json")) is None

    def test_read_raw_returns_full_envelope(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        store.write(Path("reference/sites.json"), {"key": "value"}, source="test")
        result = store.read_raw(Path("reference/sites.json"))
        assert result is not None
        assert result["meta"]["source"] == "test"
        assert result["data"] == {"key": "value"}


class TestDataStoreIsFresh:
    """Test freshness checking."""

    def test_missing_file_not_fresh(self, tmp_path: Path) -> None:
        assert DataStore(tmp_path).is_fresh(Path("nonexistent.json")) is False

    def test_expired_file_not_fresh(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        past = datetime.now(UTC) - timedelta(hours=1)
        store.write(Path("reference/rois.json"), {}, source="test", valid_until=past)
        assert store.is_fresh(Path("reference/rois.json")) is False

    def test_future_valid_until_is_fresh(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        future = datetime.now(UTC) + REFERENCE_TTL
        store.write(Path("reference/rois.json"), {}, source="test", valid_until=future)
        assert store.is_fresh(Path("reference/rois.json")) is True

    def test_no_valid_until_not_fresh(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        store.write(Path("derived/test.json"), {}, source="test")
        assert store.is_fresh(Path("derived/test.json")) is False


class TestDataStoreWriteBytes:
    """Downloaded CSVs with sidecar metadata."""

    def test_write_bytes_and_sidecar(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        valid = datetime(2026, 6, 1, tzinfo=UTC)
        result = store.write_bytes(
            Path("archive/harvard_DB_1000_3day.csv"),
            CSV,
            source="phenocam",
            valid_until=valid,
            roi_id=1000,
        )

        assert result.read_bytes() == CSV
        sidecar = result.with_suffix(".csv.meta.json")
        meta = json.loads(sidecar.read_text())["meta"]
        assert meta["source"] == "phenocam"
        assert meta["valid_until"] == valid.isoformat()
        assert meta["roi_id"] == 1000

    def test_fresh_via_sidecar(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        path = Path("archive/harvard_DB_1000_3day.csv")
        store.write_bytes(path, CSV, source="test", valid_until=datetime.now(UTC) + ARCHIVE_TTL)
        assert store.is_fresh(path) is True

    def test_expired_sidecar(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        path = Path("archive/old_3day.csv")
        past = datetime.now(UTC) - timedelta(days=1)
        store.write_bytes(path, CSV, source="test", valid_until=past)
        assert store.is_fresh(path) is False

    def test_read_meta(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        store.write_bytes(Path("archive/a_3day.csv"), CSV, source="test", frequency=3)
        store.write(Path("reference/rois.json"), [], source="api")
        assert store.read_meta(Path("archive/a_3day.csv"))["frequency"] == 3
        assert store.read_meta(Path("reference/rois.json"))["source"] == "api"
        assert store.read_meta(Path("archive/missing.csv")) == {}


class TestDataStoreListFiles:
    def test_sorted_without_sidecars(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        for name in ["b_3day.csv", "a_3day.csv", "a_1day.csv"]:
            store.write_bytes(Path("archive") / name, CSV, source="test")

        assert [p.name for p in store.list_files(store.archive)] == [
            "a_1day.csv",
            "a_3day.csv",
            "b_3day.csv",
        ]
        assert [p.name for p in store.list_files(store.archive, "*_3day.csv")] == [
            "a_3day.csv",
            "b_3day.csv",
        ]

    def test_missing_tier(self, tmp_path: Path) -> None:
        store = DataStore(tmp_path)
        assert store.list_files(store.derived) == []
