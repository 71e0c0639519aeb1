"""PhenoCam time-series file models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date

    import pandas as pd


@dataclass
class SeriesMetadata:
    """Leading ``# key: value`` block of an ROI summary file."""

    site: str | None = None
    veg_type: str | None = None
    roi_id: int | None = None
    lat: float | None = None
    lon: float | None = None
    elevation_m: float | None = None
    utc_offset: float | None = None
    aggregation_period: int | None = None
    version: str | None = None
    extra: dict[str, str] = field(default_factory=dict)


@dataclass
class PhenocamTimeseries:
    """A parsed ROI summary file: metadata plus the CSV body.

    ``data`` has one row per observation with ``date`` parsed to datetimes;
    ``NA`` and empty cells are NaN.
    """

    metadata: SeriesMetadata
    data: pd.DataFrame

    def __len__(self) -> int:
        return len(self.data)

    @property
    def columns(self) -> list[str]:
        return [str(c) for c in self.data.columns]

    def has_column(self, name: str) -> bool:
        return name in self.data.columns

    @property
    def dates(self) -> list[date]:
        return [ts.date() for ts in self.data["date"]]
