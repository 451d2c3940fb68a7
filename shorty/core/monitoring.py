"""
Error Monitoring

Sentry reporting is enabled only when SENTRY_DSN is configured. With the
DSN unset every capture call is a no-op, so callers never need to check.
"""

import logging

import sentry_sdk

from shorty.core.setting import Settings

logger = logging.getLogger(__name__)


def init_sentry(settings: Settings) -> bool:
    """
    Initialise the Sentry SDK.

    The FastAPI and Starlette integrations are enabled automatically by
    sentry_sdk when those packages are importable.

    Returns:
        True if Sentry was initialised, False if it is disabled
    """
    if not settings.SENTRY_DSN:
        logger.info("SENTRY_DSN is empty, sentry disabled")
        return False

    try:
        sentry_sdk.init(
            dsn=settings.SENTRY_DSN,
            environment=settings.ENV_SETTING.value,
            traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        )
    except Exception as e:
        logger.error(f"Sentry init failed: {str(e)}")
        return False

    logger.info("Sentry error reporting enabled")
    return True


def report_exception(exc: BaseException) -> None:
    """Forward an exception to Sentry (no-op when Sentry is disabled)."""
    sentry_sdk.capture_exception(exc)
