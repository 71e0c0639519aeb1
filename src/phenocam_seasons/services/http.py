"""
HTTP session for the PhenoCam API and data archive.

Retry count, backoff and the per-request timeout come from ``Settings``
(``PHENOCAM_HTTP_RETRIES``, ``PHENOCAM_HTTP_BACKOFF``,
``PHENOCAM_HTTP_TIMEOUT``). The archive answers 503 while summary files are
regenerated and throttles bulk downloads with 429, so those statuses are
retried; a missing ROI file (404) fails on the first response.

Usage::

    from phenocam_seasons.services.http import session

    resp = session.get(ROILISTS_API, params={"format": "json"})
    resp.raise_for_status()
"""

from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from phenocam_seasons import __version__
from phenocam_seasons.config import Settings, get_settings

RETRY_STATUSES = (429, 502, 503, 504)

RETRY_METHODS = ("GET", "HEAD", "OPTIONS")


def user_agent(settings: Settings) -> str:
    return f"{settings.app_name}/{__version__}"


def build_retry(settings: Settings) -> Retry:
    """Retry strategy for archive and API requests."""
    return Retry(
        total=settings.http_retries,
        backoff_factor=settings.http_backoff,
        status_forcelist=RETRY_STATUSES,
        allowed_methods=RETRY_METHODS,
        raise_on_status=False,  # callers use resp.raise_for_status()
    )


def create_session(
    settings: Settings | None = None,
    retry: Retry | None = None,
) -> requests.Session:
    """
    Build a session with the retry adapter mounted and a default timeout.

    Args:
        settings: Source of retry, backoff and timeout (defaults to
            ``get_settings()``).
        retry: Replaces the strategy built from settings.
    """
    settings = settings or get_settings()
    timeout = settings.http_timeout

    s = requests.Session()
    adapter = HTTPAdapter(max_retries=retry or build_retry(settings))
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.headers["User-Agent"] = user_agent(settings)

    # Archive CSVs for long records are several MB; every request gets the
    # configured timeout unless the caller passes one.
    _original_send = s.send

    def _send_with_timeout(
        prepared: requests.PreparedRequest, **kwargs: object
    ) -> requests.Response:
        kwargs.setdefault("timeout", timeout)
        return _original_send(prepared, **kwargs)  # type: ignore[arg-type]

    s.send = _send_with_timeout  # type: ignore[method-assign]
    return s


#: Shared session used by every PhenoCam request.
session: requests.Session = create_session()
