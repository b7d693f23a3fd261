"""
This module defines origin policies and the matcher that evaluates them.

An origin policy describes which request origins may receive CORS headers. It
is a closed set of variants:

- `Wildcard`: any origin.
- `ExactOrigin`: one literal origin, compared byte-for-byte.
- `PatternOrigin`: a compiled regular expression searched against the origin.
- `OriginList`: any of several exact origins or patterns.
- `DynamicOrigin`: a user-supplied predicate, sync or async.

Policies are immutable and can be shared across concurrent requests.
"""

import inspect
import logging
import re
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

OriginPredicate = Callable[[str | None, Any], bool | Awaitable[bool]]


class CorsConfigError(ValueError):
    """Raised when a CORS configuration value cannot be understood."""


@dataclass(frozen=True)
class Wildcard:
    """Allows every request that declares an origin."""


WILDCARD = Wildcard()


@dataclass(frozen=True)
class ExactOrigin:
    """A single origin, matched case-sensitively with no normalization."""

    value: str

    def matches(self, origin: str) -> bool:
        return self.value == "*" or self.value == origin


@dataclass(frozen=True)
class PatternOrigin:
    """A regular expression that must be found somewhere in the origin."""

    pattern: re.Pattern[str]

    def matches(self, origin: str) -> bool:
        return self.pattern.search(origin) is not None


@dataclass(frozen=True)
class OriginList:
    """Allows an origin when any entry matches it."""

    entries: tuple[ExactOrigin | PatternOrigin, ...] = ()

    def matches(self, origin: str) -> bool:
        return any(entry.matches(origin) for entry in self.entries)


@dataclass(frozen=True)
class DynamicOrigin:
    """
    Delegates the decision to a callable.

    The predicate receives the request origin (or None) and the request object,
    and returns a bool or an awaitable resolving to one.
    """

    predicate: OriginPredicate


OriginPolicy = Wildcard | ExactOrigin | PatternOrigin | OriginList | DynamicOrigin


def is_wildcard(policy: OriginPolicy | None) -> bool:
    """Returns True when the allow-origin header should be the literal '*'."""
    if policy is None or isinstance(policy, Wildcard):
        return True
    return isinstance(policy, ExactOrigin) and policy.value == "*"


def _coerce_entry(value: Any) -> ExactOrigin | PatternOrigin:
    if isinstance(value, ExactOrigin | PatternOrigin):
        return value
    if value == "":
        raise CorsConfigError("Origin must not be an empty string; use None for no origin check")
    if isinstance(value, str):
        return ExactOrigin(value)
    if isinstance(value, re.Pattern):
        return PatternOrigin(value)
    if isinstance(value, dict) and "regex" in value:
        return PatternOrigin(_compile(value["regex"]))
    raise CorsConfigError(f"Unsupported origin list entry: {value!r}")


def _compile(expression: str) -> re.Pattern[str]:
    try:
        return re.compile(expression)
    except re.error as e:
        raise CorsConfigError(f"Invalid origin pattern {expression!r}: {e}") from e


def coerce_origin(value: Any) -> OriginPolicy:
    """
    Converts a loosely-typed origin option into an `OriginPolicy`.

    Accepts an existing policy, None or "*" (wildcard), a non-empty string, a
    compiled pattern, a `{"regex": ...}` mapping, a list or tuple of strings and
    patterns, or a callable predicate.

    Args:
        value: The raw origin option.

    Returns:
        The matching policy variant.

    Raises:
        CorsConfigError: If the value has no policy equivalent.
    """
    if isinstance(value, Wildcard | ExactOrigin | PatternOrigin | OriginList | DynamicOrigin):
        return value
    if value is None or value == "*":
        return WILDCARD
    if isinstance(value, str | re.Pattern | dict):
        return _coerce_entry(value)
    if isinstance(value, list | tuple):
        return OriginList(tuple(_coerce_entry(entry) for entry in value))
    if callable(value):
        return DynamicOrigin(value)
    raise CorsConfigError(f"Unsupported origin option: {value!r}")


async def _run_predicate(policy: DynamicOrigin, request_origin: str | None, request: Any) -> bool:
    try:
        result = policy.predicate(request_origin, request)
        if inspect.isawaitable(result):
            result = await result
    except Exception:
        logger.warning(f"Origin predicate failed for {request_origin!r}, denying", exc_info=True)
        return False
    return result is True


async def match_origin(policy: OriginPolicy | None, request_origin: str | None, request: Any = None) -> bool:
    """
    Decides whether a request origin is permitted by a policy.

    Rules apply in order: no policy allows everything; a request without an
    origin is denied; otherwise the policy variant decides. Only a dynamic
    predicate can suspend, and its failures count as a denial.

    Args:
        policy: The configured origin policy, or None for default-allow.
        request_origin: The value of the request's `Origin` header, if any.
        request: The request object, passed through to dynamic predicates.

    Returns:
        True if the origin is allowed.
    """
    if policy is None:
        return True
    if not request_origin:
        return False
    if isinstance(policy, Wildcard):
        return True
    if isinstance(policy, ExactOrigin | PatternOrigin | OriginList):
        return policy.matches(request_origin)
    if isinstance(policy, DynamicOrigin):
        return await _run_predicate(policy, request_origin, request)
    return False


def describe_origin(policy: OriginPolicy | None) -> Any:
    """Returns a JSON-friendly description of a policy."""
    if policy is None:
        return None
    if is_wildcard(policy):
        return "*"
    if isinstance(policy, ExactOrigin):
        return policy.value
    if isinstance(policy, PatternOrigin):
        return {"regex": policy.pattern.pattern}
    if isinstance(policy, OriginList):
        return [describe_origin(entry) for entry in policy.entries]
    if isinstance(policy, DynamicOrigin):
        return getattr(policy.predicate, "__qualname__", repr(policy.predicate))
    return None


def origins_from_strings(values: Iterable[str]) -> OriginPolicy:
    """Builds a policy from comma-separated style values, as found in env vars."""
    items = [v.strip() for v in values if v.strip()]
    if items == ["*"]:
        return WILDCARD
    if len(items) == 1:
        return ExactOrigin(items[0])
    return OriginList(tuple(ExactOrigin(item) for item in items))
