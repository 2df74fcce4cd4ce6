"""
Observability module for the Workout Tracker API.

Error tracking and performance monitoring using GlitchTip
(open-source, Sentry-compatible).
"""

import sentry_sdk
import structlog
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from src.config.settings import settings

logger = structlog.get_logger(__name__)

# Transient transport failures that are not actionable.
_IGNORED_MESSAGES = ("connection refused", "connection reset", "broken pipe")


def init_observability() -> bool:
    """Initialize GlitchTip/Sentry. Returns whether reporting is enabled."""
    if not settings.GLITCHTIP_DSN:
        logger.info("observability_disabled", reason="no DSN configured")
        return False

    traces_sample_rate = settings.GLITCHTIP_TRACES_SAMPLE_RATE
    profiles_sample_rate = settings.GLITCHTIP_PROFILES_SAMPLE_RATE

    if settings.is_development:
        traces_sample_rate = 1.0
        profiles_sample_rate = 1.0

    sentry_sdk.init(
        dsn=settings.GLITCHTIP_DSN,
        environment=settings.APP_ENV,
        release=f"workout-tracker@{settings.APP_VERSION}",
        traces_sample_rate=traces_sample_rate,
        profiles_sample_rate=profiles_sample_rate,
        send_default_pii=False,
        integrations=[
            StarletteIntegration(transaction_style="endpoint"),
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        before_send=before_send,
    )

    logger.info("observability_initialized", environment=settings.APP_ENV)
    return True


def before_send(event: dict, hint: dict) -> dict | None:
    """Drop events for transient connection errors."""
    if "exc_info" in hint:
        _, exc_value, _ = hint["exc_info"]
        message = str(exc_value).lower()
        if any(m in message for m in _IGNORED_MESSAGES):
            return None

    return event
