"""crosscors - request-time CORS decisions for Python web hosts."""

__version__ = "0.1.0"

from .config import DEFAULT_METHODS, CorsConfig
from .decision import CorsHandler, CorsResponse, DecisionState, RequestContext, RequestView, ResponseView, crosscors, decide, decide_sync, evaluate
from .origin import (
    WILDCARD,
    CorsConfigError,
    DynamicOrigin,
    ExactOrigin,
    OriginList,
    OriginPolicy,
    PatternOrigin,
    Wildcard,
    coerce_origin,
    is_wildcard,
    match_origin,
)

__all__ = [
    "CorsConfig",
    "CorsConfigError",
    "CorsHandler",
    "CorsResponse",
    "DEFAULT_METHODS",
    "DecisionState",
    "DynamicOrigin",
    "ExactOrigin",
    "OriginList",
    "OriginPolicy",
    "PatternOrigin",
    "RequestContext",
    "RequestView",
    "ResponseView",
    "WILDCARD",
    "Wildcard",
    "coerce_origin",
    "crosscors",
    "decide",
    "decide_sync",
    "evaluate",
    "is_wildcard",
    "match_origin",
]
