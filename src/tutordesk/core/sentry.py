"""Sentry error tracking configuration and initialization."""

import os

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.utils import BadDsn

from tutordesk.core.logging import get_logger

logger = get_logger(__name__)

_sentry_initialized = False


def init_sentry() -> bool:
    """
    Initialize Sentry SDK for error tracking.

    Only initializes if SENTRY_DSN is set and looks like a URL, so local
    development and CI run without Sentry. Safe to call more than once.

    Returns:
        True when Sentry is active after the call
    """
    global _sentry_initialized

    if _sentry_initialized:
        return True

    sentry_dsn = os.getenv("SENTRY_DSN", "").strip()
    if not sentry_dsn:
        logger.info("sentry.disabled", message="Sentry DSN not found, error tracking disabled")
        return False

    # Catches placeholder values like "xxx" set in CI
    if not sentry_dsn.startswith(("https://", "http://")):
        logger.info(
            "sentry.disabled",
            message="Sentry DSN appears to be invalid or placeholder, error tracking disabled",
            dsn_preview=sentry_dsn[:20] + "..." if len(sentry_dsn) > 20 else sentry_dsn,
        )
        return False

    environment = os.getenv("ENVIRONMENT", "development")

    try:
        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=environment,
            traces_sample_rate=0.0,
            # Proof-of-payment uploads and emails must not reach Sentry
            send_default_pii=False,
            max_request_body_size="never",
            integrations=[
                FastApiIntegration(transaction_style="endpoint"),
                LoggingIntegration(level=None, event_level=None),
            ],
            before_send=_filter_sensitive_data,
        )
    except BadDsn as exc:
        logger.warning(
            "sentry.init_failed",
            message="Failed to initialize Sentry due to invalid DSN, error tracking disabled",
            error=str(exc),
        )
        return False

    _sentry_initialized = True
    logger.info(
        "sentry.initialized", message="Sentry error tracking enabled", environment=environment
    )
    return True


def _filter_sensitive_data(event: dict, hint: dict) -> dict:
    """Drop SQL breadcrumbs and user emails from Sentry events."""
    breadcrumbs = event.get("breadcrumbs")
    if isinstance(breadcrumbs, dict):
        values = breadcrumbs.get("values", [])
        breadcrumbs["values"] = [
            b for b in values if "sql" not in str(b.get("category", "")).lower()
        ]

    user = event.get("user")
    if isinstance(user, dict):
        user.pop("email", None)

    return event
