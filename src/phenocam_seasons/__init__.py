"""PhenoCam Seasons - greenness time series and seasonal transition dates.

Architecture::

    datasources/   PhenoCam API + archive (site/ROI catalogs, CSV download, reader)
    phenology/     Cycle segmentation and amplitude-threshold transition dates
    store.py       Tiered cache with TTL (reference → archive → derived)
    flows/         Prefect orchestration (fetch checks freshness, analyze writes JSON)
    services/      Shared utilities (HTTP client with retry)

Data flow: datasources → store (cache) → phenology → derived/transitions/

Extension points (see each package's docstring for step-by-step guides):
  - New data source:   datasources/__init__.py
"""

__version__ = "0.1.0"

from phenocam_seasons.config import Settings
from phenocam_seasons.errors import InvalidInputError, NoMatchingRoiError, PhenocamError
from phenocam_seasons.phenology import Direction, GreennessSeries, detect_transitions

__all__ = [
    "Direction",
    "GreennessSeries",
    "InvalidInputError",
    "NoMatchingRoiError",
    "PhenocamError",
    "Settings",
    "__version__",
    "detect_transitions",
]
