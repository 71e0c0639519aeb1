"""ROI time-series downloads from the PhenoCam data archive."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from phenocam_seasons.datasources.phenocam import client
from phenocam_seasons.datasources.phenocam.catalog import fetch_rois, filter_rois
from phenocam_seasons.errors import InvalidInputError, NoMatchingRoiError
from phenocam_seasons.services.http import session

if TYPE_CHECKING:
    from phenocam_seasons.schemas import RoiInfo


def check_frequency(frequency: int) -> int:
    """Validate an aggregation frequency (days)."""
    if frequency not in client.VALID_FREQUENCIES:
        msg = f"frequency must be one of {client.VALID_FREQUENCIES}, got {frequency!r}"
        raise InvalidInputError(msg)
    return frequency


def timeseries_filename(roi: RoiInfo, frequency: int = 3) -> str:
    """Archive file name, e.g. ``harvard_DB_1000_3day.csv``."""
    return f"{roi.roi_name}_{check_frequency(frequency)}day.csv"


def timeseries_url(roi: RoiInfo, frequency: int = 3) -> str:
    """Archive URL of an ROI summary file."""
    return f"{client.ARCHIVE_URL}/{roi.site}/ROI/{timeseries_filename(roi, frequency)}"


def fetch_timeseries_csv(roi: RoiInfo, frequency: int = 3) -> bytes:
    """
    Download the raw CSV content of one ROI summary file.

    Raises:
        InvalidInputError: If ``frequency`` is not 1 or 3.
        requests.HTTPError: If the archive request fails.
    """
    resp = session.get(timeseries_url(roi, frequency))
    resp.raise_for_status()
    return resp.content


def download_timeseries(
    site_pattern: str,
    veg_type: str | None = None,
    roi_id: int | None = None,
    frequency: int = 3,
    out_dir: Path | str = Path(),
    *,
    rois: list[RoiInfo] | None = None,
) -> list[Path]:
    """
    Download ROI summary files for every ROI matching the selection.

    Args:
        site_pattern: Regular expression searched in site names.
        veg_type: Vegetation code filter, e.g. ``"DB"``.
        roi_id: ROI sequence number filter, e.g. 1000.
        frequency: Aggregation period in days (1 or 3).
        out_dir: Directory receiving the CSV files.
        rois: ROI catalog to match against (fetched when omitted).

    Returns:
        Paths of the written files, in catalog order.

    Raises:
        NoMatchingRoiError: If nothing in the catalog matches.
    """
    check_frequency(frequency)
    catalog = rois if rois is not None else fetch_rois()
    matches = filter_rois(catalog, site_pattern=site_pattern, veg_type=veg_type, roi_id=roi_id)
    if not matches:
        raise NoMatchingRoiError(site_pattern, veg_type, roi_id)

    target = Path(out_dir)
    target.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for roi in matches:
        path = target / timeseries_filename(roi, frequency)
        path.write_bytes(fetch_timeseries_csv(roi, frequency))
        written.append(path)
    return written
