"""
This module builds the FastAPI demo application for crosscors.

The application exists to exercise the middleware against a real ASGI stack:
it installs the CORS middleware with the given configuration and exposes a
root info endpoint, a health check and an echo endpoint. `create_app` is also
the factory used by `crosscors serve`.
"""

import os

from fastapi import FastAPI

from .. import __version__
from ..config import CorsConfig
from ..my_logging import setup_debug_logging, setup_event_logging
from .middleware.cors import add_cors_middleware
from .routes import echo, health

CONFIG_ENV_VAR = "CROSSCORS_CONFIG"


def create_app(config: CorsConfig | None = None) -> FastAPI:
    """
    Creates the demo application.

    Args:
        config: The CORS configuration. When omitted, it is loaded with
            `CorsConfig.load`, using the file named by `CROSSCORS_CONFIG` if set.

    Returns:
        The configured `FastAPI` instance.
    """
    setup_debug_logging()
    if config is None:
        config = CorsConfig.load(os.environ.get(CONFIG_ENV_VAR))
    if config.log:
        setup_event_logging()

    app = FastAPI(
        title="crosscors demo server",
        description="Request-time CORS decisions in front of a minimal API",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.cors_config = config

    add_cors_middleware(app, config)

    app.include_router(health.router, prefix="/api/v1")
    app.include_router(echo.router, prefix="/api/v1")

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint with basic server information."""
        return {
            "name": "crosscors demo server",
            "version": __version__,
            "docs_url": "/docs",
            "health_url": "/api/v1/health",
        }

    return app
