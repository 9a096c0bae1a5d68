"""Sentry error tracking.

Reporting is enabled only when ``SENTRY_DSN`` is configured. Neither
initialization nor capture ever raises into request handling.
"""

import logging
from typing import Any, Dict, Optional

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from guestbook.core.config import Settings

logger = logging.getLogger(__name__)

_initialized = False


def init_error_tracking(config: Settings) -> bool:
    """Initialize the Sentry SDK with FastAPI/Starlette integrations.

    Returns:
        True if Sentry was initialized, False if skipped (no DSN) or failed.
    """
    global _initialized
    if not config.SENTRY_DSN:
        logger.debug("Sentry initialization skipped (DSN not configured)")
        return False

    try:
        sentry_sdk.init(
            dsn=config.SENTRY_DSN,
            environment=config.ENV,
            release=config.APP_VERSION,
            traces_sample_rate=config.SENTRY_TRACES_SAMPLE_RATE,
            integrations=[
                LoggingIntegration(level=None, event_level=None),
                FastApiIntegration(transaction_style="endpoint"),
                StarletteIntegration(transaction_style="endpoint"),
            ],
            # Comment bodies carry emails
            send_default_pii=False,
        )
    except Exception as e:
        logger.error(f"Failed to initialize Sentry: {e}", exc_info=True)
        return False

    _initialized = True
    logger.info(
        f"Sentry initialized for environment '{config.ENV}' "
        f"with {config.SENTRY_TRACES_SAMPLE_RATE * 100:.0f}% trace sampling"
    )
    return True


def capture_error(
    exception: BaseException, context: Optional[Dict[str, Any]] = None
) -> Optional[str]:
    """Send an exception to Sentry with request context.

    Returns:
        The Sentry event id, or None when tracking is disabled.
    """
    if not _initialized:
        return None
    try:
        with sentry_sdk.push_scope() as scope:
            if context:
                scope.set_context("request", context)
            return sentry_sdk.capture_exception(exception)
    except Exception as e:
        logger.warning(f"Failed to capture error in Sentry: {e}")
        return None
