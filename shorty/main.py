"""
FastAPI Application Entry Point

This module builds the FastAPI application and configures:
- API routes
- Middleware (logging, CORS)
- Exception handlers
- Error monitoring
- The link validator shared by the handlers

create_app() takes an explicit Settings object; the module-level `app`
is built from the environment and is what uvicorn serves:

    uvicorn shorty.main:app
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shorty.api import endpoints
from shorty.api.errors import register_exception_handlers
from shorty.core.logging_config import configure_logging
from shorty.core.monitoring import init_sentry
from shorty.core.setting import Settings, settings as default_settings
from shorty.core.validators import create_validator
from shorty.db.session import engine
from shorty.middleware.logging import add_logging_middleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info(f"Shorty starting, base URL {app.state.settings.public_base_url}")
    yield
    logger.info("Shorty shutting down, disposing database engine")
    await engine.dispose()


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Build a configured FastAPI application.

    Args:
        app_settings: Settings to use; defaults to the environment settings

    Returns:
        The FastAPI application
    """
    app_settings = app_settings or default_settings

    configure_logging(app_settings.LOG_LEVEL)
    init_sentry(app_settings)

    app = FastAPI(
        title="Shorty URL Shortener",
        description="Shortens URLs, redirects visitors and records every visit",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.link_validator = create_validator(app_settings)

    register_exception_handlers(app)
    add_logging_middleware(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Range"],
    )

    app.include_router(endpoints.router)
    app.include_router(endpoints.api_router)

    return app


app = create_app()
