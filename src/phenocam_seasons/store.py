"""Tiered data store with freshness-aware caching.

Files are organized into tiers by how often they change:
  - reference/: Site and ROI catalogs, 7-day TTL
  - archive/: Downloaded ROI time-series CSVs, 24h TTL (the archive is
    regenerated nightly)
  - derived/: Transition dates computed from archive files, always recomputed

JSON files are wrapped in a metadata envelope with ``valid_until`` so the
fetch flow can skip sources that are still fresh. CSV downloads keep their
native format and carry a sidecar ``.meta.json`` with the same metadata.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta
from pathlib import Path  # noqa: TC003
from typing import Any

REFERENCE_TTL = timedelta(days=7)
ARCHIVE_TTL = timedelta(hours=24)

META_SUFFIX = ".meta.json"


class DataStore:
    """Manages read/write of cached data files with TTL."""

    def __init__(self, base_dir: Path) -> None:
        self.base = base_dir
        self.reference = base_dir / "reference"
        self.archive = base_dir / "archive"
        self.derived = base_dir / "derived"

    def read(self, path: Path) -> Any | None:
        """Read data payload from a metadata-enveloped JSON file.

        Returns the ``data`` field, or None if the file doesn't exist.
        """
        envelope = self.read_raw(path)
        if envelope is None:
            return None
        return envelope.get("data", envelope)

    def read_raw(self, path: Path) -> dict[str, Any] | None:
        """Read the full envelope (meta + data) from a JSON file."""
        full = self._resolve(path)
        if not full.exists():
            return None
        with full.open() as f:
            result: dict[str, Any] = json.load(f)
        return result

    def write(
        self,
        path: Path,
        data: Any,
        source: str,
        valid_until: datetime | None = None,
        **params: Any,
    ) -> Path:
        """Write data wrapped in a metadata envelope.

        Args:
            path: Relative path under base_dir (e.g. ``reference/rois.json``).
            data: Payload to store under the ``data`` key.
            source: Data source identifier (e.g. ``"phenocam.nau.edu"``).
            valid_until: Expiry timestamp. None means derived/no-cache.
            **params: Extra metadata fields (site, ROI, thresholds, ...).

        Returns:
            Absolute path of the written file.
        """
        full = self._resolve(path)
        full.parent.mkdir(parents=True, exist_ok=True)

        envelope = {"meta": self._meta(source, valid_until, params), "data": data}
        with full.open("w") as f:
            json.dump(envelope, f, indent=2)

        return full

    def write_bytes(
        self,
        path: Path,
        content: bytes,
        source: str,
        valid_until: datetime | None = None,
        **params: Any,
    ) -> Path:
        """Store a downloaded file as-is with sidecar metadata.

        Args:
            path: Relative destination (e.g. ``archive/harvard_DB_1000_3day.csv``).
            content: Raw file content.
            source: Data source identifier.
            valid_until: Expiry timestamp.
            **params: Extra metadata fields.

        Returns:
            Absolute path of the stored file.
        """
        full = self._resolve(path)
        full.parent.mkdir(parents=True, exist_ok=True)
        full.write_bytes(content)

        meta_path = full.with_suffix(full.suffix + META_SUFFIX)
        with meta_path.open("w") as f:
            json.dump({"meta": self._meta(source, valid_until, params)}, f, indent=2)

        return full

    def list_files(self, tier_dir: Path, pattern: str = "*") -> list[Path]:
        """Stored data files in a tier directory, sidecars excluded, sorted."""
        if not tier_dir.exists():
            return []
        return sorted(
            p for p in tier_dir.glob(pattern) if p.is_file() and not p.name.endswith(META_SUFFIX)
        )

    def read_meta(self, path: Path) -> dict[str, Any]:
        """Metadata of a stored file (JSON envelope or sidecar), {} if none."""
        return self._read_meta(self._resolve(path))

    def is_fresh(self, path: Path) -> bool:
        """Check if a file exists and hasn't expired.

        Works with both JSON envelopes and sidecar .meta.json files.
        Returns False if the file is missing, has no ``valid_until``, or
        the expiry time has passed.
        """
        full = self._resolve(path)
        if not full.exists():
            return False

        valid_until = self._read_meta(full).get("valid_until")
        if valid_until is None:
            return False

        expiry = datetime.fromisoformat(valid_until)
        if expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=UTC)
        return datetime.now(UTC) < expiry

    @staticmethod
    def _meta(source: str, valid_until: datetime | None, params: dict[str, Any]) -> dict[str, Any]:
        meta: dict[str, Any] = {
            "source": source,
            "fetched_at": datetime.now(UTC).isoformat(),
        }
        if valid_until is not None:
            meta["valid_until"] = valid_until.isoformat()
        meta.update(params)
        return meta

    def _resolve(self, path: Path) -> Path:
        full = self.base / path if not path.is_absolute() else path
        try:
            full.resolve().relative_to(self.base.resolve())
        except ValueError:
            msg = f"Path escapes store base directory: {path}"
            raise ValueError(msg) from None
        return full

    def _read_meta(self, full: Path) -> dict[str, Any]:
        sidecar = full.with_suffix(full.suffix + META_SUFFIX)
        if sidecar.exists():
            with sidecar.open() as f:
                result: dict[str, Any] = json.load(f)
            return result.get("meta", {})

        # Fall back to embedded metadata in JSON files
        if full.suffix == ".json" and full.exists():
            with full.open() as f:
                envelope: dict[str, Any] = json.load(f)
            return envelope.get("meta", {})

        return {}
