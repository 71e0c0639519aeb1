"""Tests for the shared HTTP session."""

from __future__ import annotations

from unittest.mock import patch

import pytest
import requests
from urllib3.util.retry import Retry

from phenocam_seasons import __version__
from phenocam_seasons.config import Settings
from phenocam_seasons.services.http import (
    RETRY_STATUSES,
    build_retry,
    create_session,
    session,
)

ARCHIVE = "https://phenocam.nau.edu/data/archive/harvard/ROI/harvard_DB_1000_3day.csv"


def _settings(**overrides: object) -> Settings:
    return Settings(_env_file=None, **overrides)  # type: ignore[arg-type]


def _sent_timeout(s: requests.Session, **kwargs: object) -> object:
    prep = requests.Request("GET", ARCHIVE).prepare()
    with patch.object(
        requests.adapters.HTTPAdapter, "send", return_value=requests.Response()
    ) as mock_send:
        s.send(prep, **kwargs)
    return mock_send.call_args.kwargs.get("timeout")


class TestBuildRetry:
    """Retry strategy built from settings."""

    def test_defaults(self) -> None:
        retry = build_retry(_settings())
        assert retry.total == 4
        assert retry.backoff_factor == 2

    def test_from_settings(self) -> None:
        retry = build_retry(_settings(http_retries=7, http_backoff=0.5))
        assert retry.total == 7
        assert retry.backoff_factor == 0.5

    @pytest.mark.parametrize("status", [429, 502, 503, 504])
    def test_retries_on_transient_status(self, status: int) -> None:
        assert status in build_retry(_settings()).status_forcelist

    @pytest.mark.parametrize("status", [400, 404, 500])
    def test_no_retry_on_client_errors(self, status: int) -> None:
        """A missing archive file (404) fails immediately."""
        assert status not in RETRY_STATUSES

    def test_only_safe_methods(self) -> None:
        allowed = build_retry(_settings()).allowed_methods
        assert "GET" in allowed
        assert "POST" not in allowed

    def test_status_left_to_caller(self) -> None:
        assert build_retry(_settings()).raise_on_status is False


class TestCreateSession:
    """Session factory."""

    @pytest.mark.parametrize("url", ["https://phenocam.nau.edu", "http://example.com"])
    def test_adapter_uses_settings(self, url: str) -> None:
        adapter = create_session(_settings(http_retries=2)).get_adapter(url)
        assert isinstance(adapter, requests.adapters.HTTPAdapter)
        assert adapter.max_retries.total == 2

    def test_custom_retry(self) -> None:
        s = create_session(_settings(), retry=Retry(total=10, backoff_factor=1))
        assert s.get_adapter("https://phenocam.nau.edu").max_retries.total == 10

    def test_user_agent_header(self) -> None:
        s = create_session(_settings(app_name="harvard-sync"))
        assert s.headers["User-Agent"] == f"harvard-sync/{__version__}"

    def test_timeout_from_settings(self) -> None:
        s = create_session(_settings(http_timeout=42))
        assert _sent_timeout(s) == 42

    def test_explicit_timeout_not_overridden(self) -> None:
        s = create_session(_settings(http_timeout=42))
        assert _sent_timeout(s, timeout=99) == 99

    def test_env_configures_session(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PHENOCAM_HTTP_RETRIES", "9")
        monkeypatch.setenv("PHENOCAM_HTTP_TIMEOUT", "15")
        s = create_session(Settings(_env_file=None))
        assert s.get_adapter(ARCHIVE).max_retries.total == 9
        assert _sent_timeout(s) == 15


class TestModuleSession:
    """The shared session every datasource uses."""

    def test_session_has_retry_adapter(self) -> None:
        adapter = session.get_adapter("https://phenocam.nau.edu")
        assert adapter.max_retries.status_forcelist == RETRY_STATUSES

    def test_session_user_agent(self) -> None:
        assert session.headers["User-Agent"].endswith(f"/{__version__}")
