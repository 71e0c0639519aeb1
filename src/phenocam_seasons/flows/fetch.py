"""
Prefect flow for fetching PhenoCam catalogs and ROI time series.

Run locally:
    python -m phenocam_seasons.flows.fetch

Run with Prefect dashboard:
    prefect server start &
    python -m phenocam_seasons.flows.fetch
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from prefect import flow, task

from phenocam_seasons.config import get_settings
from phenocam_seasons.datasources import phenocam
from phenocam_seasons.errors import NoMatchingRoiError
from phenocam_seasons.schemas import RoiInfo
from phenocam_seasons.store import ARCHIVE_TTL, REFERENCE_TTL, DataStore

# Data store with tiered directories
store = DataStore(get_settings().data_dir)

# Relative paths within the store
SITES_PATH = Path("reference/sites.json")
ROIS_PATH = Path("reference/rois.json")

SOURCE = "phenocam.nau.edu"


def archive_path(roi: RoiInfo, frequency: int) -> Path:
    """Store path of a downloaded ROI summary file."""
    return Path("archive") / phenocam.timeseries_filename(roi, frequency)


@task(name="fetch-site-catalog", retries=2, retry_delay_seconds=5)
def fetch_site_catalog() -> list[dict[str, Any]]:
    """Fetch the camera site catalog."""
    return [s.model_dump(mode="json") for s in phenocam.fetch_sites()]


@task(name="fetch-roi-catalog", retries=2, retry_delay_seconds=5)
def fetch_roi_catalog() -> list[dict[str, Any]]:
    """Fetch the ROI catalog for all sites."""
    return [r.model_dump(mode="json") for r in phenocam.fetch_rois()]


@task(name="save-site-catalog")
def save_site_catalog(sites: list[dict[str, Any]]) -> Path:
    """Save the site catalog via store."""
    return store.write(
        SITES_PATH,
        sites,
        source=SOURCE,
        valid_until=datetime.now(UTC) + REFERENCE_TTL,
    )


@task(name="save-roi-catalog")
def save_roi_catalog(rois: list[dict[str, Any]]) -> Path:
    """Save the ROI catalog via store."""
    return store.write(
        ROIS_PATH,
        rois,
        source=SOURCE,
        valid_until=datetime.now(UTC) + REFERENCE_TTL,
    )


@task(name="download-roi-series", retries=2, retry_delay_seconds=5)
def download_roi_series(roi: dict[str, Any], frequency: int = 3) -> Path:
    """Download one ROI summary CSV into the archive tier."""
    info = RoiInfo.model_validate(roi)
    content = phenocam.fetch_timeseries_csv(info, frequency)
    return store.write_bytes(
        archive_path(info, frequency),
        content,
        source=SOURCE,
        valid_until=datetime.now(UTC) + ARCHIVE_TTL,
        site=info.site,
        veg_type=info.veg_type,
        roi_id=info.roi_id,
        frequency=frequency,
        url=phenocam.timeseries_url(info, frequency),
    )


def load_roi_catalog() -> list[dict[str, Any]]:
    """ROI catalog from the store, fetched first if missing or stale."""
    if store.is_fresh(ROIS_PATH):
        print("ROI catalog is fresh, skipping fetch.")
        return store.read(ROIS_PATH) or []
    print("Fetching ROI catalog...")
    rois = fetch_roi_catalog()
    path = save_roi_catalog(rois)
    print(f"Saved {len(rois)} ROIs to {path}")
    return rois


@flow(name="fetch-data", log_prints=True)
def fetch_all(
    site_pattern: str = "^harvard$",
    veg_type: str | None = "DB",
    roi_id: int | None = 1000,
    frequency: int = 3,
) -> dict[str, Any]:
    """
    Fetch catalogs and the time series of every matching ROI.

    Checks freshness before fetching and skips sources that are still valid.

    Raises:
        NoMatchingRoiError: If no ROI matches the selection.
    """
    phenocam.check_frequency(frequency)
    results: dict[str, Any] = {}

    # --- Site catalog ---
    if store.is_fresh(SITES_PATH):
        print("Site catalog is fresh, skipping fetch.")
        sites = store.read(SITES_PATH) or []
    else:
        print("Fetching site catalog...")
        sites = fetch_site_catalog()
        sites_path = save_site_catalog(sites)
        print(f"Saved {len(sites)} sites to {sites_path}")

    results["sites"] = len(sites)

    # --- ROI catalog + selection ---
    rois = [RoiInfo.model_validate(r) for r in load_roi_catalog()]
    results["rois"] = len(rois)

    matches = phenocam.filter_rois(
        rois, site_pattern=site_pattern, veg_type=veg_type, roi_id=roi_id
    )
    if not matches:
        raise NoMatchingRoiError(site_pattern, veg_type, roi_id)
    results["matched"] = len(matches)

    # --- ROI time series ---
    files: list[str] = []
    downloaded = 0
    for roi in matches:
        path = archive_path(roi, frequency)
        if store.is_fresh(path):
            print(f"{roi.roi_name} ({frequency}-day) is fresh, skipping download.")
        else:
            print(f"Downloading {roi.roi_name} ({frequency}-day)...")
            download_roi_series(roi.model_dump(mode="json"), frequency)
            downloaded += 1
        files.append(str(store.base / path))

    results["downloaded"] = downloaded
    results["files"] = files
    return results


if __name__ == "__main__":
    settings = get_settings()
    result = fetch_all(
        site_pattern=settings.site_pattern,
        veg_type=settings.veg_type,
        roi_id=settings.roi_id,
        frequency=settings.frequency,
    )
    print(f"Flow complete: {result}")
