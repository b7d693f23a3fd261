"""
This module wires the crosscors decision into a FastAPI application.

The middleware runs the decision against an in-memory `CorsResponse` before the
request reaches any route. A terminated preflight is answered right away with
an empty body; any other allowed request continues to the application and the
collected CORS headers are copied onto whatever response it produces. Denied
requests pass through untouched, leaving the final status to the routes.
"""

from collections.abc import Callable
from typing import Any, cast

from fastapi import FastAPI, Request, Response

from ...config import CorsConfig
from ...decision import VARY, CorsResponse, DecisionState, evaluate


def merge_vary(existing: str | None, value: str) -> str:
    """Adds `value` to a Vary header unless it already lists that token."""
    if not existing:
        return value
    tokens = [token.strip().lower() for token in existing.split(",")]
    if value.lower() in tokens or "*" in tokens:
        return existing
    return f"{existing}, {value}"


def add_cors_middleware(app: FastAPI, config: CorsConfig) -> None:
    """
    Adds the crosscors middleware to the FastAPI application.

    Args:
        app: The `FastAPI` application instance.
        config: The CORS configuration shared by every request.
    """

    @app.middleware("http")
    async def apply_cors(request: Request, call_next: Callable[[Request], Any]) -> Response:
        """
        Middleware function that decides CORS before routing.

        Args:
            request: The incoming `Request` object.
            call_next: The next middleware or endpoint in the processing chain.

        Returns:
            Either the terminated preflight response or the downstream response
            with CORS headers added.
        """
        cors_response = CorsResponse()
        state = await evaluate(config, request, cors_response)

        if state is DecisionState.PREFLIGHT_TERMINATED:
            return Response(content=cors_response.body, status_code=cors_response.status_code, headers=cors_response.headers)

        response = cast(Response, await call_next(request))

        for name, value in cors_response.headers.items():
            if name == VARY:
                value = merge_vary(response.headers.get(VARY), value)
            response.headers[name] = value

        return response
