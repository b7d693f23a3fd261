"""
This module defines the Pydantic models for the demo server's API responses.
"""

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """
    Represents the response model for the server health check endpoint.

    Attributes:
        status: The health status of the server (e.g., 'healthy').
        version: The version number of the crosscors package.
        origin: The configured origin policy, as `describe_origin` renders it.
        credentials: Whether credentialed requests are allowed.
        preflight: `terminate` when preflights are answered by the middleware,
            `continue` when they are passed to the application.
    """

    status: str = Field(..., description="Server health status")
    version: str = Field(..., description="crosscors version")
    origin: Any = Field(None, description="Configured origin policy, null when unchecked")
    credentials: bool = Field(False, description="Whether credentials are allowed")
    preflight: str = Field("terminate", description="Preflight handling mode")

    model_config = {
        "json_schema_extra": {
            "examples": [{"status": "healthy", "version": "0.1.0", "origin": "*", "credentials": False, "preflight": "terminate"}]
        }
    }


class EchoResponse(BaseModel):
    """
    Echoes what the server saw of a cross-origin request.

    Attributes:
        method: The HTTP method of the request.
        origin: The value of the `Origin` header, if any.
    """

    method: str = Field(..., description="HTTP method of the request")
    origin: str | None = Field(None, description="Origin header of the request")

    model_config = {"json_schema_extra": {"examples": [{"method": "GET", "origin": "https://app.example.com"}]}}
