"""Sentry error tracking integration.

Initializes Sentry SDK if SENTRY_DSN env variable is set.
Does nothing otherwise, so it is safe to call unconditionally.
"""

import logging

from app.core.config import settings
from app.core.logging import NO_REQUEST_ID, request_id_var

logger = logging.getLogger(__name__)

SERVICE_NAME = "image-description"


def _before_send(event, hint):
    """Drop the caller's provider key and tag the event with its request id."""
    headers = event.get("request", {}).get("headers")
    if isinstance(headers, dict):
        for name in list(headers):
            if name.lower() == "x-api-key":
                headers[name] = "[Filtered]"

    request_id = request_id_var.get()
    if request_id != NO_REQUEST_ID:
        event.setdefault("tags", {})["request_id"] = request_id
    return event


def init_sentry() -> None:
    """Initialize Sentry if SENTRY_DSN is configured."""
    if not settings.sentry_dsn:
        logger.debug("Sentry DSN not configured, skipping")
        return

    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.app_env,
        release=settings.app_version,
        traces_sample_rate=0.1 if settings.app_env == "production" else 1.0,
        send_default_pii=False,
        before_send=_before_send,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
        ],
    )
    sentry_sdk.set_tag("service", SERVICE_NAME)
    logger.info("Sentry initialized (env=%s)", settings.app_env)
