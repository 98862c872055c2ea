"""
Sentry SDK configuration.

Sentry stays disabled unless ``SENTRY_DSN`` is set. Student emails, usernames
and bearer tokens are scrubbed before events leave the process.
"""

import os
from typing import Any

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.loguru import LoguruIntegration
from sentry_sdk.types import Event, Hint

HEALTH_PATHS = ("/api/health", "GET /api/health", "/", "GET /")


def _before_send(event: Event, hint: Hint) -> Event | None:
    """
    Remove PII from an error event.

    Keeps the user id only; drops email, username, cookies and the
    Authorization header.
    """
    user = event.get("user")
    if user:
        user.pop("email", None)
        user.pop("username", None)
        if "ip_address" in user:
            user["ip_address"] = "{{auto}}"

    request = event.get("request")
    if request and isinstance(request, dict):
        request.pop("cookies", None)
        headers = request.get("headers")
        if isinstance(headers, dict) and "Authorization" in headers:
            headers["Authorization"] = "[Filtered]"
        # Uploaded papers can be large; never ship multipart bodies.
        request.pop("data", None)

    return event


def _before_send_transaction(event: Event, hint: Hint) -> Event | None:
    """Drop health-check transactions."""
    if event.get("transaction", "") in HEALTH_PATHS:
        return None
    return event


def _traces_sampler(sampling_context: dict[str, Any]) -> float:
    """
    Sample rate per request.

    Admin and auth traffic is sampled more heavily since it is the
    security-relevant part of the API.
    """
    if sampling_context.get("parent_sampled") is True:
        return 1.0

    asgi_scope = sampling_context.get("asgi_scope", {})
    path = asgi_scope.get("path", "")

    if path in ("/", "/api/health"):
        return 0.0

    if path.startswith("/api/admin") or path.startswith("/api/auth"):
        return 0.5

    return 0.2


def init_sentry() -> None:
    """
    Initialize Sentry with FastAPI and Loguru integrations.

    Call before the FastAPI app is created.
    """
    dsn = os.getenv("SENTRY_DSN")
    if not dsn:
        return

    sentry_sdk.init(
        dsn=dsn,
        environment=os.getenv("ENVIRONMENT", "development"),
        release=os.getenv("SENTRY_RELEASE", "unknown"),
        send_default_pii=False,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            LoguruIntegration(),
        ],
        traces_sampler=_traces_sampler,
        sample_rate=1.0,
        before_send=_before_send,
        before_send_transaction=_before_send_transaction,
        attach_stacktrace=True,
        max_breadcrumbs=50,
        ignore_errors=[KeyboardInterrupt, SystemExit],
    )
