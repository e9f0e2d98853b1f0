"""
Sentry Integration for Error Tracking.

Initialised once at API start-up. Every helper is a no-op when SENTRY_DSN
is not configured.
"""
from __future__ import annotations

import logging
import os

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

logger = logging.getLogger(__name__)

_initialized = False


def init_sentry(environment: str = "production", traces_sample_rate: float = 0.1) -> bool:
    """
    Initialize Sentry SDK for error tracking.

    Returns:
        True if Sentry was initialized, False otherwise.
    """
    global _initialized

    sentry_dsn = os.getenv("SENTRY_DSN", "")
    if not sentry_dsn:
        logger.info("Sentry DSN not configured, skipping initialization")
        return False

    try:
        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=environment,
            traces_sample_rate=traces_sample_rate,
            integrations=[
                LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
            ],
            # Addresses and phone numbers stay out of events
            send_default_pii=False,
            release=os.getenv("GIT_COMMIT_SHA", "local"),
        )
    except Exception as e:
        logger.error(f"Failed to initialize Sentry: {e}")
        return False

    _initialized = True
    logger.info(f"Sentry initialized for environment: {environment}")
    return True


def capture_exception(error: Exception, **extra) -> None:
    """Capture an exception and send to Sentry."""
    if not _initialized:
        return
    with sentry_sdk.new_scope() as scope:
        for key, value in extra.items():
            scope.set_extra(key, value)
        sentry_sdk.capture_exception(error)
