"""Tests for Sentry SDK configuration and PII scrubbing."""

import os
from typing import Any
from unittest.mock import patch

import pytest

from core.sentry_config import (
    _before_send,
    _before_send_transaction,
    _traces_sampler,
    init_sentry,
)


class TestBeforeSend:
    """Tests for PII scrubbing in _before_send."""

    def test_keeps_only_user_id(self) -> None:
        event: dict[str, Any] = {
            "user": {
                "id": "12",
                "email": "student@studysphere.edu",
                "username": "student12",
                "ip_address": "10.0.0.7",
            }
        }

        result = _before_send(event, {})  # type: ignore[arg-type]

        assert result is not None
        assert result["user"] == {"id": "12", "ip_address": "{{auto}}"}

    def test_filters_authorization_and_cookies(self) -> None:
        event: dict[str, Any] = {
            "request": {
                "headers": {"Authorization": "Bearer secret-token"},
                "cookies": {"session": "abc"},
            }
        }

        result = _before_send(event, {})  # type: ignore[arg-type]

        assert result is not None
        assert result["request"]["headers"]["Authorization"] == "[Filtered]"
        assert "cookies" not in result["request"]

    def test_drops_upload_bodies(self) -> None:
        event: dict[str, Any] = {"request": {"data": "%PDF-1.4 ..."}}

        result = _before_send(event, {})  # type: ignore[arg-type]

        assert result is not None
        assert "data" not in result["request"]

    def test_event_without_user_or_request(self) -> None:
        event: dict[str, Any] = {"message": "boom"}

        assert _before_send(event, {}) == {"message": "boom"}  # type: ignore[arg-type]


class TestBeforeSendTransaction:
    """Tests for health-check filtering."""

    @pytest.mark.parametrize("path", ["/api/health", "GET /api/health", "/"])
    def test_drops_health_checks(self, path: str) -> None:
        event: dict[str, Any] = {"transaction": path}

        assert _before_send_transaction(event, {}) is None  # type: ignore[arg-type]

    def test_keeps_other_transactions(self) -> None:
        event: dict[str, Any] = {"transaction": "/api/discussions"}

        assert _before_send_transaction(event, {}) == event  # type: ignore[arg-type]


class TestTracesSampler:
    """Tests for per-path trace sampling."""

    def _rate(self, path: str) -> float:
        return _traces_sampler({"asgi_scope": {"path": path}})

    def test_health_checks_never_sampled(self) -> None:
        assert self._rate("/api/health") == 0.0

    def test_admin_and_auth_sampled_higher(self) -> None:
        assert self._rate("/api/admin/stats") == 0.5
        assert self._rate("/api/auth/login") == 0.5

    def test_default_rate(self) -> None:
        assert self._rate("/api/groups") == 0.2

    def test_respects_parent_decision(self) -> None:
        assert _traces_sampler({"parent_sampled": True}) == 1.0

    def test_missing_scope(self) -> None:
        assert _traces_sampler({}) == 0.2


class TestInitSentry:
    """Tests for init_sentry."""

    def test_without_dsn_does_nothing(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            with patch("core.sentry_config.sentry_sdk.init") as mock_init:
                init_sentry()

        mock_init.assert_not_called()

    def test_with_dsn_initializes(self) -> None:
        env = {
            "SENTRY_DSN": "https://key@sentry.example.com/1",
            "ENVIRONMENT": "production",
        }
        with patch.dict(os.environ, env, clear=True):
            with patch("core.sentry_config.sentry_sdk.init") as mock_init:
                init_sentry()

        mock_init.assert_called_once()
        kwargs = mock_init.call_args.kwargs
        assert kwargs["environment"] == "production"
        assert kwargs["release"] == "unknown"
        assert kwargs["send_default_pii"] is False
