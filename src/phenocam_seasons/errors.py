"""Error types raised by phenocam-seasons.

Everything the package raises on purpose derives from ``PhenocamError`` so the
CLI can report it without a traceback. Network failures are left as
``requests.HTTPError``.
"""

from __future__ import annotations


class PhenocamError(Exception):
    """Base class for package errors."""


class InvalidInputError(PhenocamError, ValueError):
    """Input data or parameters cannot be processed.

    Raised for empty or malformed greenness series, thresholds outside
    ``[0, 1]``, unsupported aggregation frequencies and unreadable files.
    """


class NoMatchingRoiError(PhenocamError, LookupError):
    """No ROI in the catalog matches the requested site / veg type / ROI id."""

    def __init__(self, site_pattern: str, veg_type: str | None, roi_id: int | None) -> None:
        self.site_pattern = site_pattern
        self.veg_type = veg_type
        self.roi_id = roi_id
        super().__init__(
            f"No ROI matches site={site_pattern!r} veg_type={veg_type!r} roi_id={roi_id!r}"
        )
