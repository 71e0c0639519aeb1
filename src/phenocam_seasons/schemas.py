"""
Domain models for phenocam-seasons.

Pydantic models for catalog data from the PhenoCam API.
These define the canonical schema - datasources normalize API responses to these.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, Field, field_validator

# =============================================================================
# Geographic
# =============================================================================


class BoundingBox(BaseModel):
    """Geographic bounding box for site selection."""

    south: float = Field(..., ge=-90, le=90)
    west: float = Field(..., ge=-180, le=180)
    north: float = Field(..., ge=-90, le=90)
    east: float = Field(..., ge=-180, le=180)

    def contains(self, lat: float, lon: float) -> bool:
        """True if the point lies inside the box (edges included)."""
        return self.south <= lat <= self.north and self.west <= lon <= self.east


# =============================================================================
# Catalog
# =============================================================================


def _parse_date(value: Any) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


class SiteInfo(BaseModel):
    """A PhenoCam camera site."""

    name: str = Field(..., description="Site name, e.g. 'harvard'")
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)
    elevation_m: float | None = None
    active: bool = True
    primary_veg_type: str | None = None
    secondary_veg_type: str | None = None
    site_type: str | None = None
    date_first: date | None = None
    date_last: date | None = None

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> SiteInfo:
        """Normalize one ``/api/cameras/`` result."""
        meta = raw.get("sitemetadata") or {}
        return cls(
            name=raw["Sitename"],
            lat=raw["Lat"],
            lon=raw["Lon"],
            elevation_m=raw.get("Elev"),
            active=bool(raw.get("active", True)),
            primary_veg_type=meta.get("primary_veg_type") or None,
            secondary_veg_type=meta.get("secondary_veg_type") or None,
            site_type=meta.get("site_type") or None,
            date_first=_parse_date(raw.get("date_first")),
            date_last=_parse_date(raw.get("date_last")),
        )


class RoiInfo(BaseModel):
    """A region of interest (ROI) defined on a site's field of view."""

    site: str
    veg_type: str = Field(..., description="Vegetation type code, e.g. DB, EN, GR")
    roi_id: int = Field(..., description="ROI sequence number, e.g. 1000")
    description: str = ""
    first_date: date | None = None
    last_date: date | None = None
    site_years: float = 0.0
    missing_data_pct: float | None = None

    @field_validator("veg_type")
    @classmethod
    def _upper_veg_type(cls, value: str) -> str:
        return value.upper()

    @property
    def roi_name(self) -> str:
        """Canonical ROI name, e.g. ``harvard_DB_1000``."""
        return f"{self.site}_{self.veg_type}_{self.roi_id:04d}"

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> RoiInfo:
        """Normalize one ``/api/roilists/`` result."""
        return cls(
            site=raw["site"],
            veg_type=raw["roitype"],
            roi_id=int(raw["sequence_number"]),
            description=raw.get("description") or "",
            first_date=_parse_date(raw.get("first_date")),
            last_date=_parse_date(raw.get("last_date")),
            site_years=float(raw.get("site_years") or 0.0),
            missing_data_pct=raw.get("missing_data_pct"),
        )
