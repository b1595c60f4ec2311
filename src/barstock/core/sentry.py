"""Sentry error tracking configuration and initialization."""

import os

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.utils import BadDsn

from barstock.core.logging import get_logger

logger = get_logger(__name__)

_sentry_initialized = False

# Event keys whose values may carry SQL or credentials
_SENSITIVE_MARKERS = ("sql", "password", "hashed_password", "session")


def init_sentry() -> bool:
    """
    Initialize Sentry if SENTRY_DSN holds an http(s) URL.

    Returns True when error tracking is active. Safe to call more than once.
    Performance tracing and PII are off; SqlalchemyIntegration is not
    enabled so queries never reach event payloads.
    """
    global _sentry_initialized

    if _sentry_initialized:
        return True

    sentry_dsn = (os.getenv("SENTRY_DSN") or "").strip()
    if not sentry_dsn:
        logger.info("sentry.disabled", reason="no_dsn")
        return False

    if not sentry_dsn.startswith(("https://", "http://")):
        logger.info("sentry.disabled", reason="invalid_dsn")
        return False

    environment = os.getenv("ENVIRONMENT", "development")

    try:
        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=environment,
            traces_sample_rate=0.0,
            send_default_pii=False,
            integrations=[
                FastApiIntegration(transaction_style="endpoint"),
                LoggingIntegration(level=None, event_level=None),
            ],
            before_send=filter_sensitive_data,
        )
    except BadDsn as exc:
        logger.warning("sentry.init_failed", error=str(exc))
        return False

    _sentry_initialized = True
    logger.info("sentry.initialized", environment=environment)
    return True


def _is_sensitive(*values) -> bool:
    text = " ".join(str(v).lower() for v in values)
    return any(marker in text for marker in _SENSITIVE_MARKERS)


def filter_sensitive_data(event: dict, hint: dict) -> dict:
    """Drop extras and breadcrumbs that mention SQL, passwords or session data."""
    extra = event.get("extra")
    if isinstance(extra, dict):
        event["extra"] = {k: v for k, v in extra.items() if not _is_sensitive(k, v)}

    breadcrumbs = event.get("breadcrumbs")
    if isinstance(breadcrumbs, dict):
        values = breadcrumbs.get("values")
        if isinstance(values, list):
            breadcrumbs["values"] = [
                b for b in values if not _is_sensitive(b.get("category", ""), b.get("message", ""))
            ]
    elif isinstance(breadcrumbs, list):
        event["breadcrumbs"] = [
            b
            for b in breadcrumbs
            if not _is_sensitive(
                b.get("category", "") if isinstance(b, dict) else "",
                b.get("message", "") if isinstance(b, dict) else b,
            )
        ]

    return event
