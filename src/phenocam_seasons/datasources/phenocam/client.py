"""PhenoCam API client constants and pagination.

API docs: https://phenocam.nau.edu/api/
Archive layout: https://phenocam.nau.edu/data/archive/{site}/ROI/
"""

from __future__ import annotations

from typing import Any

from phenocam_seasons.services.http import session

PHENOCAM_BASE = "https://phenocam.nau.edu"
CAMERAS_API = f"{PHENOCAM_BASE}/api/cameras/"
ROILISTS_API = f"{PHENOCAM_BASE}/api/roilists/"
ARCHIVE_URL = f"{PHENOCAM_BASE}/data/archive"

PAGE_SIZE = 500
VALID_FREQUENCIES = (1, 3)  # days per aggregation period


def get_paginated(
    url: str,
    params: dict[str, Any] | None = None,
    *,
    max_pages: int = 20,
) -> list[dict[str, Any]]:
    """
    Fetch every page of a paginated PhenoCam API listing.

    The API returns ``{"count", "next", "previous", "results"}``; ``next`` is a
    full URL that already carries the query string.

    Returns a flat list of result dicts (``results`` concatenated).

    Raises:
        requests.HTTPError: If any page request fails.
    """
    query: dict[str, Any] | None = {"format": "json", "limit": PAGE_SIZE, **(params or {})}
    next_url: str | None = url
    all_results: list[dict[str, Any]] = []
    for _ in range(max_pages):
        if not next_url:
            break
        resp = session.get(next_url, params=query)
        resp.raise_for_status()
        data: dict[str, Any] = resp.json()
        all_results.extend(data.get("results", []))
        next_url = data.get("next")
        query = None
    return all_results
