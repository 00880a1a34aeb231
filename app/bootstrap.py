# =============================================================================
# app/bootstrap.py - Interceptor Factory
# =============================================================================
# Builds a FailureInterceptor from application settings.
#
# Usage:
#   from app.bootstrap import create_interceptor
#   interceptor = create_interceptor()
#   interceptor.catch_all()
# =============================================================================

import logging

from app.config import Settings, get_settings
from core.interceptor import FailureInterceptor, Terminator
from core.services.response_service import ResponseChannel

logger = logging.getLogger(__name__)


def create_interceptor(
    settings: Settings | None = None,
    *,
    channel: ResponseChannel | None = None,
    terminate: Terminator | None = None,
) -> FailureInterceptor:
    """
    Create and configure a FailureInterceptor.

    Hooks are not registered here; call catch_all() (or the individual
    catch_* methods) once the host is ready.

    Args:
        settings: Settings to use (defaults to the cached environment settings)
        channel: Response channel override
        terminate: Terminator override

    Returns:
        Configured FailureInterceptor instance
    """
    settings = settings or get_settings()
    config = settings.interceptor_config()

    if config.expose_failures and settings.is_production:
        logger.warning("Failure detail is exposed to callers in production")

    interceptor = FailureInterceptor(config=config, channel=channel, terminate=terminate)

    logger.info(
        f"Failure interceptor ready (log: {interceptor.filename or 'host logging'}, "
        f"expose: {config.expose_failures})"
    )

    return interceptor
