"""Sentry error tracking integration.

No-op unless SENTRY_DSN is set. Provider credentials travel in request
headers (Authorization, x-api-key) and in custom extra headers, so every
event and breadcrumb is scrubbed before it leaves the process.
"""

import logging
from typing import Any

from llm_playground.core.config import settings

logger = logging.getLogger(__name__)

SENSITIVE_HEADERS = frozenset({"authorization", "x-api-key", "api-key", "proxy-authorization", "cookie"})
FILTERED = "[Filtered]"


def _scrub_headers(headers: Any) -> Any:
    if not isinstance(headers, dict):
        return headers
    return {k: FILTERED if str(k).lower() in SENSITIVE_HEADERS else v for k, v in headers.items()}


def scrub_event(event: dict[str, Any], hint: dict[str, Any] | None = None) -> dict[str, Any]:
    """before_send hook: mask credential headers in the request and breadcrumbs."""
    request = event.get("request")
    if isinstance(request, dict) and "headers" in request:
        request["headers"] = _scrub_headers(request["headers"])

    breadcrumbs = event.get("breadcrumbs")
    values = breadcrumbs.get("values", []) if isinstance(breadcrumbs, dict) else breadcrumbs or []
    for crumb in values:
        data = crumb.get("data") if isinstance(crumb, dict) else None
        if isinstance(data, dict) and "headers" in data:
            data["headers"] = _scrub_headers(data["headers"])
    return event


def init_sentry() -> None:
    if not settings.sentry_dsn:
        logger.debug("Sentry DSN not configured, skipping")
        return

    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.httpx import HttpxIntegration

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.app_env,
        release="llm-playground@1.0.0",
        traces_sample_rate=0.1 if settings.app_env == "production" else 1.0,
        send_default_pii=False,
        before_send=scrub_event,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            # Outbound provider calls show up as spans and breadcrumbs
            HttpxIntegration(),
        ],
    )
    logger.info("Sentry initialized (env=%s)", settings.app_env)
