# =============================================================================
# app/main.py - Example FastAPI Host
# =============================================================================
# A minimal ASGI service guarded by lastline:
# - FailureMiddleware answers requests whose handler raised
# - the lifespan routes process-level failures (warnings, uncaught
#   exceptions, fatal exits) through the same interceptor
#
# Usage:
#   uvicorn app.main:app
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.bootstrap import create_interceptor
from app.config import get_settings
from app.middleware import FailureMiddleware
from app.routers import health
from core.interceptor import FailureInterceptor

logging.basicConfig(
    level=logging.DEBUG if get_settings().DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_NAME = "lastline API"
API_VERSION = "1.0.0"


def create_app(interceptor: FailureInterceptor | None = None) -> FastAPI:
    """
    Build the example service around an interceptor.

    Args:
        interceptor: Interceptor to use (defaults to one built from settings)
    """
    interceptor = interceptor or create_interceptor()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Process hooks live exactly as long as the server
        logger.info(f"{API_NAME} starting ({get_settings().ENVIRONMENT})")
        interceptor.catch_all()
        try:
            yield
        finally:
            interceptor.release()
            logger.info(f"{API_NAME} stopped")

    app = FastAPI(
        title=API_NAME,
        description="Example service whose failures are handled by lastline.",
        version=API_VERSION,
        lifespan=lifespan,
    )
    app.state.interceptor = interceptor

    app.add_middleware(FailureMiddleware, interceptor=interceptor)
    app.include_router(health.router, prefix="/api/v1", tags=["Health"])

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "name": API_NAME,
            "version": API_VERSION,
            "health": "/api/v1/health",
        }

    return app


app = create_app()
