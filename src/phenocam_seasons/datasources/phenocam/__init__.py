"""PhenoCam network data source.

Lists camera sites and ROIs, downloads ROI time-series summary files and
reads them into daily greenness series.

Public API:
  - client: API URLs, pagination
  - catalog: fetch_sites, fetch_rois, filter_sites, filter_rois
  - download: timeseries_url, fetch_timeseries_csv, download_timeseries
  - reader: parse_timeseries, read_timeseries, to_greenness_series
  - models: SeriesMetadata, PhenocamTimeseries
"""

from phenocam_seasons.datasources.phenocam.catalog import (
    fetch_rois,
    fetch_sites,
    filter_rois,
    filter_sites,
)
from phenocam_seasons.datasources.phenocam.client import (
    ARCHIVE_URL,
    CAMERAS_API,
    ROILISTS_API,
    VALID_FREQUENCIES,
)
from phenocam_seasons.datasources.phenocam.download import (
    check_frequency,
    download_timeseries,
    fetch_timeseries_csv,
    timeseries_filename,
    timeseries_url,
)
from phenocam_seasons.datasources.phenocam.models import PhenocamTimeseries, SeriesMetadata
from phenocam_seasons.datasources.phenocam.reader import (
    parse_timeseries,
    read_timeseries,
    to_greenness_series,
)

__all__ = [
    "ARCHIVE_URL",
    "CAMERAS_API",
    "ROILISTS_API",
    "VALID_FREQUENCIES",
    "PhenocamTimeseries",
    "SeriesMetadata",
    "check_frequency",
    "download_timeseries",
    "fetch_rois",
    "fetch_sites",
    "fetch_timeseries_csv",
    "filter_rois",
    "filter_sites",
    "parse_timeseries",
    "read_timeseries",
    "timeseries_filename",
    "timeseries_url",
    "to_greenness_series",
]
