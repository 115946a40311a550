"""
Error reporting with optional Sentry
"""
import logging

import sentry_sdk

from around.config import Settings

logger = logging.getLogger(__name__)


def init_observability(settings: Settings) -> bool:
    """Initialise Sentry when a DSN is configured. Returns whether it was enabled."""
    if not settings.SENTRY_DSN:
        logger.info("Sentry disabled (no SENTRY_DSN)")
        return False
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        traces_sample_rate=0.1,
        environment=settings.APP_ENV,
    )
    logger.info("Sentry initialized")
    return True
