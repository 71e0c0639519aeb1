"""Site and ROI catalog listing and filtering."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from phenocam_seasons.datasources.phenocam import client
from phenocam_seasons.schemas import RoiInfo, SiteInfo

if TYPE_CHECKING:
    from phenocam_seasons.schemas import BoundingBox

# =============================================================================
# API Fetching
# =============================================================================


def fetch_sites(*, max_pages: int = 20) -> list[SiteInfo]:
    """Fetch the PhenoCam camera site catalog.

    Entries without coordinates are skipped.
    """
    raw = client.get_paginated(client.CAMERAS_API, max_pages=max_pages)
    return [
        SiteInfo.from_api(r)
        for r in raw
        if r.get("Sitename") and r.get("Lat") is not None and r.get("Lon") is not None
    ]


def fetch_rois(*, max_pages: int = 20) -> list[RoiInfo]:
    """Fetch the catalog of ROIs across all sites."""
    raw = client.get_paginated(client.ROILISTS_API, max_pages=max_pages)
    return [
        RoiInfo.from_api(r)
        for r in raw
        if r.get("site") and r.get("roitype") and r.get("sequence_number") is not None
    ]


# =============================================================================
# Filtering (pure)
# =============================================================================


def filter_sites(
    sites: list[SiteInfo],
    *,
    veg_type: str | None = None,
    name_pattern: str | None = None,
    bbox: BoundingBox | None = None,
    active: bool | None = None,
) -> list[SiteInfo]:
    """
    Select sites by primary vegetation type, name regex, area and status.

    Args:
        sites: Site catalog.
        veg_type: Primary vegetation code (case-insensitive), e.g. ``"DB"``.
        name_pattern: Regular expression searched in the site name.
        bbox: Keep only sites inside this box.
        active: Keep only active (True) or inactive (False) cameras.
    """
    regex = re.compile(name_pattern) if name_pattern else None
    wanted_veg = veg_type.upper() if veg_type else None
    selected: list[SiteInfo] = []
    for site in sites:
        if wanted_veg and (site.primary_veg_type or "").upper() != wanted_veg:
            continue
        if regex and not regex.search(site.name):
            continue
        if bbox and not bbox.contains(site.lat, site.lon):
            continue
        if active is not None and site.active != active:
            continue
        selected.append(site)
    return selected


def filter_rois(
    rois: list[RoiInfo],
    *,
    site_pattern: str | None = None,
    veg_type: str | None = None,
    roi_id: int | None = None,
    min_years: float | None = None,
) -> list[RoiInfo]:
    """
    Select ROIs by site regex, vegetation type, ROI number and record length.

    Args:
        rois: ROI catalog.
        site_pattern: Regular expression searched in the site name
            (``"^harvard$"`` for an exact match).
        veg_type: Vegetation code (case-insensitive).
        roi_id: ROI sequence number, e.g. 1000.
        min_years: Minimum years of record.
    """
    regex = re.compile(site_pattern) if site_pattern else None
    wanted_veg = veg_type.upper() if veg_type else None
    return [
        roi
        for roi in rois
        if (regex is None or regex.search(roi.site))
        and (wanted_veg is None or roi.veg_type == wanted_veg)
        and (roi_id is None or roi.roi_id == roi_id)
        and (min_years is None or roi.site_years >= min_years)
    ]
