"""
This module defines the health check endpoint for the crosscors demo server.

Besides liveness, it reports the CORS policy the middleware enforces, so a
deployment can be checked from a browser console with a cross-origin fetch.
"""

from typing import Any

from fastapi import APIRouter, Request

from ... import __version__
from ...config import CorsConfig
from ...origin import describe_origin
from ..models.response import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> Any:
    """
    Reports the server status and the active CORS policy.

    Returns:
        A `HealthResponse` with the package version, the configured origin
        policy, whether credentials are allowed and how preflights are handled.
    """
    config: CorsConfig = request.app.state.cors_config
    return HealthResponse(
        status="healthy",
        version=__version__,
        origin=describe_origin(config.origin),
        credentials=config.credentials,
        preflight="continue" if config.preflight_continue else "terminate",
    )
