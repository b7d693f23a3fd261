"""
This module implements the per-request CORS decision.

`decide` takes an immutable `CorsConfig`, a request view and a response view.
It matches the request origin against the configured policy and, only once the
origin is allowed, writes the CORS headers and decides whether a preflight is
answered here or handed back to the caller.

The function is host-agnostic: any object with `method` and `headers` works as
a request, and any object with a `status_code`, `set_header()` and `end()`
works as a response. `CorsResponse` is an in-memory response for hosts that
want to collect the headers first and apply them later.
"""

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from .config import CorsConfig
from .my_logging import debug_log
from .origin import is_wildcard, match_origin

logger = logging.getLogger(__name__)

ALLOW_ORIGIN = "Access-Control-Allow-Origin"
VARY = "Vary"
ALLOW_METHODS = "Access-Control-Allow-Methods"
ALLOW_HEADERS = "Access-Control-Allow-Headers"
EXPOSE_HEADERS = "Access-Control-Expose-Headers"
ALLOW_CREDENTIALS = "Access-Control-Allow-Credentials"
MAX_AGE = "Access-Control-Max-Age"
REQUEST_HEADERS = "Access-Control-Request-Headers"


class RequestView(Protocol):
    """The parts of an inbound request the decision reads."""

    method: str
    headers: Mapping[str, str]


class ResponseView(Protocol):
    """The parts of an outgoing response the decision may change."""

    status_code: int

    def set_header(self, name: str, value: str) -> None: ...

    def end(self) -> None: ...


class DecisionState(str, Enum):
    """Terminal states of a single CORS decision."""

    DENIED = "denied"
    PREFLIGHT_TERMINATED = "preflight_terminated"
    PREFLIGHT_PASSED_THROUGH = "preflight_passed_through"
    SIMPLE_ALLOWED = "simple_allowed"


def _header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is None:
        lowered = name.lower()
        for key, candidate in headers.items():
            if key.lower() == lowered:
                return candidate
    return value


@dataclass(frozen=True)
class RequestContext:
    """What the decision needs from a request, extracted once per call."""

    origin: str | None
    method: str
    request_headers: str | None = None

    @classmethod
    def from_request(cls, request: RequestView) -> "RequestContext":
        headers = request.headers
        return cls(
            origin=_header(headers, "Origin"),
            method=(request.method or "").upper(),
            request_headers=_header(headers, REQUEST_HEADERS),
        )


@dataclass
class CorsResponse:
    """
    An in-memory response view.

    Attributes:
        status_code: The status set by the decision, 200 until changed.
        headers: Headers in the order they were set.
        ended: Whether the decision finalized the response.
    """

    status_code: int = 200
    headers: dict[str, str] = field(default_factory=dict)
    ended: bool = False
    body: bytes = b""

    def set_header(self, name: str, value: str) -> None:
        self.headers[name] = value

    def end(self) -> None:
        self.ended = True


def _apply_headers(config: CorsConfig, context: RequestContext, response: ResponseView) -> None:
    if context.origin:
        response.set_header(ALLOW_ORIGIN, "*" if is_wildcard(config.origin) else context.origin)
        response.set_header(VARY, "Origin")

    response.set_header(ALLOW_METHODS, ",".join(config.methods))

    if config.allowed_headers is not None:
        response.set_header(ALLOW_HEADERS, ",".join(config.allowed_headers))
    elif context.request_headers:
        response.set_header(ALLOW_HEADERS, context.request_headers)

    if config.exposed_headers is not None:
        response.set_header(EXPOSE_HEADERS, ",".join(config.exposed_headers))

    if config.credentials:
        response.set_header(ALLOW_CREDENTIALS, "true")

    if config.max_age is not None:
        response.set_header(MAX_AGE, str(config.max_age))


async def evaluate(config: CorsConfig, request: RequestView, response: ResponseView) -> DecisionState:
    """
    Runs the CORS decision and reports which terminal state it reached.

    Args:
        config: The immutable CORS configuration.
        request: The inbound request view.
        response: The response view; untouched when the origin is denied.

    Returns:
        The `DecisionState` reached for this request.
    """
    context = RequestContext.from_request(request)
    debug_log("Matching origin", origin=context.origin, method=context.method)

    if not await match_origin(config.origin, context.origin, request):
        if config.log and context.origin:
            logger.warning(f"[crosscors] Blocked: {context.origin}")
        return DecisionState.DENIED

    _apply_headers(config, context, response)

    if config.log and context.origin:
        logger.info(f"[crosscors] Allowed: {context.origin}")

    if context.method != "OPTIONS":
        return DecisionState.SIMPLE_ALLOWED

    if config.preflight_continue:
        return DecisionState.PREFLIGHT_PASSED_THROUGH

    response.status_code = config.options_success_status
    response.end()
    return DecisionState.PREFLIGHT_TERMINATED


async def decide(config: CorsConfig, request: RequestView, response: ResponseView) -> bool:
    """
    Applies CORS to a request/response pair.

    Returns:
        True if the response was finalized here (a terminated preflight) and
        the caller must not process the request further; False otherwise.
    """
    return await evaluate(config, request, response) is DecisionState.PREFLIGHT_TERMINATED


def decide_sync(config: CorsConfig, request: RequestView, response: ResponseView) -> bool:
    """Blocking variant of `decide` for hosts without a running event loop."""
    return asyncio.run(decide(config, request, response))


class CorsHandler:
    """An async callable that applies `decide` with one fixed configuration."""

    def __init__(self, config: CorsConfig):
        self.config = config

    async def __call__(self, request: RequestView, response: ResponseView) -> bool:
        return await decide(self.config, request, response)


def crosscors(config: CorsConfig | None = None, **options: Any) -> CorsHandler:
    """
    Builds a CORS handler bound to one configuration.

    Args:
        config: A ready configuration. When omitted, one is built from `options`
            using `CorsConfig.from_dict`, so the original option names
            (`allowedHeaders`, `maxAge`, ...) are accepted as well.
        **options: Configuration options, used only when `config` is None.

    Returns:
        A `CorsHandler`; `await handler(request, response)` has the semantics of `decide`.
    """
    if config is None:
        config = CorsConfig.from_dict(options)
    elif options:
        raise TypeError("Pass either a CorsConfig or keyword options, not both")
    return CorsHandler(config)
