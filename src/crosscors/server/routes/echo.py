"""
This module defines an echo endpoint for trying cross-origin requests by hand.

Every method is routed, including OPTIONS, so a preflight configured to pass
through reaches the application and gets a regular response.
"""

from typing import Any

from fastapi import APIRouter, Request

from ..models.response import EchoResponse

router = APIRouter(tags=["echo"])


@router.api_route("/echo", methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"], response_model=EchoResponse)
async def echo(request: Request) -> Any:
    """Returns the method and origin of the request."""
    return EchoResponse(method=request.method, origin=request.headers.get("origin"))
