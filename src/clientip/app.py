"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from clientip.api.ip import health_router
from clientip.api.ip import router as ip_router
from clientip.configs.config import AppConfig, get_app_config
from clientip.core.resolver import build_resolver
from clientip.infra.logging import setup_logging

logger = logging.getLogger(__name__)


def get_app(config: Optional[AppConfig] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    The resolver is built during startup, so a missing or invalid
    configuration raises ``ConfigurationError`` before any request is
    served.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        app_config = config if config is not None else get_app_config()
        setup_logging(app_config.logging)
        app.state.client_ip_resolver = build_resolver(app_config)
        logger.info("Starting clientip application")

        yield

        logger.info("Shutting down clientip application")

    app = FastAPI(
        title="clientip",
        description="CloudFlare and proxy aware client IP resolution",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(health_router)
    app.include_router(ip_router)

    return app


app = get_app()
