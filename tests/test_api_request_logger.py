"""Tests for API request logger."""

import logging

import pytest

from gw2_presence.adapters.api_request_logger import (
    build_url,
    log_api_request,
    should_log_requests,
)


class TestShouldLogRequests:
    """Tests for should_log_requests function."""

    def test_when_env_not_set_then_returns_false(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Given GW2P_LOG_REQUESTS not set, when checking, then returns False."""
        monkeypatch.delenv("GW2P_LOG_REQUESTS", raising=False)

        assert should_log_requests() is False

    @pytest.mark.parametrize("value", ["true", "True", "TRUE"])
    def test_when_env_set_to_true_then_returns_true(
        self, monkeypatch: pytest.MonkeyPatch, value: str
    ) -> None:
        """Given GW2P_LOG_REQUESTS=true in any case, when checking, then returns True."""
        monkeypatch.setenv("GW2P_LOG_REQUESTS", value)

        assert should_log_requests() is True

    def test_when_env_set_to_false_then_returns_false(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Given GW2P_LOG_REQUESTS=false, when checking, then returns False."""
        monkeypatch.setenv("GW2P_LOG_REQUESTS", "false")

        assert should_log_requests() is False


class TestBuildUrl:
    """Tests for build_url function."""

    def test_without_params_returns_url(self) -> None:
        assert build_url("https://api.guildwars2.com/v2/maps/15", None) == (
            "https://api.guildwars2.com/v2/maps/15"
        )

    def test_params_are_sorted(self) -> None:
        """Given params, when building, then they are appended in key order."""
        url = build_url("https://api.guildwars2.com/v2/worlds", {"lang": "en", "ids": "all"})

        assert url == "https://api.guildwars2.com/v2/worlds?ids=all&lang=en"

    def test_existing_query_is_extended(self) -> None:
        url = build_url("https://example.test/v2/worlds?x=1", {"lang": "de"})

        assert url == "https://example.test/v2/worlds?x=1&lang=de"


class TestLogApiRequest:
    """Tests for log_api_request function."""

    def test_when_logging_disabled_then_does_not_log(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        monkeypatch.delenv("GW2P_LOG_REQUESTS", raising=False)

        with caplog.at_level(logging.INFO):
            log_api_request("GET", "https://api.guildwars2.com/v2/maps/15")

        assert "API Request" not in caplog.text

    def test_when_logging_enabled_then_logs_full_url(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        monkeypatch.setenv("GW2P_LOG_REQUESTS", "true")

        with caplog.at_level(logging.INFO):
            log_api_request("GET", "https://api.guildwars2.com/v2/maps/15", {"lang": "en"})

        assert "API Request: GET https://api.guildwars2.com/v2/maps/15?lang=en" in caplog.text
