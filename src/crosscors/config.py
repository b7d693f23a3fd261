"""Configuration management for crosscors."""

import json
import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from .origin import WILDCARD, CorsConfigError, OriginPolicy, coerce_origin, describe_origin, origins_from_strings

logger = logging.getLogger(__name__)

DEFAULT_METHODS: tuple[str, ...] = ("GET", "HEAD", "PUT", "PATCH", "POST", "DELETE")
ENV_PREFIX = "CROSSCORS_"

# Option names accepted in config files besides the field names
_ALIASES = {
    "allowedHeaders": "allowed_headers",
    "exposedHeaders": "exposed_headers",
    "maxAge": "max_age",
    "preflightContinue": "preflight_continue",
    "optionsSuccessStatus": "options_success_status",
}


def _split(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def _as_tuple(value: Any, name: str) -> tuple[str, ...] | None:
    if value is None:
        return None
    if isinstance(value, str):
        return tuple(_split(value))
    if isinstance(value, list | tuple):
        return tuple(str(v) for v in value)
    raise CorsConfigError(f"{name} must be a list of strings, got {value!r}")


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no", ""):
        return False
    raise CorsConfigError(f"Invalid boolean value: {value!r}")


def _parse_int(value: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise CorsConfigError(f"Invalid integer value: {value!r}") from e


def _as_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return _parse_bool(value)
    raise CorsConfigError(f"{name} must be a boolean, got {value!r}")


def _as_int(value: Any, name: str) -> int:
    # bool is an int subclass
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        return _parse_int(value)
    raise CorsConfigError(f"{name} must be an integer, got {value!r}")


@dataclass(frozen=True)
class CorsConfig:
    """
    Immutable CORS settings shared by every request.

    The defaults describe an allow-all policy with the standard methods and
    no credentials, so `CorsConfig()` is a complete configuration.
    `origin=None` drops the origin check altogether, so even requests without an
    `Origin` header are annotated.

    Note:
        A wildcard origin combined with `credentials=True` is accepted as is,
        even though browsers refuse credentialed responses with
        `Access-Control-Allow-Origin: *`.
    """

    origin: OriginPolicy | None = WILDCARD
    methods: tuple[str, ...] = DEFAULT_METHODS
    allowed_headers: tuple[str, ...] | None = None
    exposed_headers: tuple[str, ...] | None = None
    credentials: bool = False
    max_age: int | None = None
    preflight_continue: bool = False
    options_success_status: int = 204
    log: bool = False

    def __post_init__(self) -> None:
        if self.origin is not None:
            object.__setattr__(self, "origin", coerce_origin(self.origin))
        object.__setattr__(self, "methods", _as_tuple(self.methods, "methods") or ())
        object.__setattr__(self, "allowed_headers", _as_tuple(self.allowed_headers, "allowed_headers"))
        object.__setattr__(self, "exposed_headers", _as_tuple(self.exposed_headers, "exposed_headers"))
        object.__setattr__(self, "credentials", _as_bool(self.credentials, "credentials"))
        object.__setattr__(self, "preflight_continue", _as_bool(self.preflight_continue, "preflight_continue"))
        object.__setattr__(self, "log", _as_bool(self.log, "log"))
        if self.max_age is not None:
            object.__setattr__(self, "max_age", _as_int(self.max_age, "max_age"))
        object.__setattr__(self, "options_success_status", _as_int(self.options_success_status, "options_success_status"))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CorsConfig":
        """Create CorsConfig from dictionary, ignoring unknown keys."""
        names = {f.name for f in fields(cls) if f.init}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _ALIASES.get(key, key)
            if name in names:
                kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def load(cls, path: str | Path | None = None) -> "CorsConfig":
        """Load configuration from a JSON file and CROSSCORS_* environment variables."""
        data: dict[str, Any] = {}

        # 1. Load from the first config file that exists
        config_paths = [Path.cwd() / "crosscors.json", Path.cwd() / ".crosscors.json", Path.home() / ".crosscors" / "config.json"]
        if path is not None:
            config_paths.insert(0, Path(path))

        for config_path in config_paths:
            if config_path.exists():
                try:
                    with open(config_path) as f:
                        loaded = json.load(f)
                except (OSError, json.JSONDecodeError) as e:
                    logger.warning(f"Skipping unreadable config file {config_path}: {e}")
                    continue
                if not isinstance(loaded, dict):
                    logger.warning(f"Skipping config file {config_path}: expected a JSON object")
                    continue
                data.update({_ALIASES.get(k, k): v for k, v in loaded.items()})
                logger.debug(f"Loaded CORS configuration from {config_path}")
                break

        # 2. Override with environment variables
        env_mappings: dict[str, tuple[str, Callable[[str], Any]]] = {
            "ORIGIN": ("origin", lambda x: origins_from_strings(x.split(","))),
            "METHODS": ("methods", _split),
            "ALLOWED_HEADERS": ("allowed_headers", _split),
            "EXPOSED_HEADERS": ("exposed_headers", _split),
            "CREDENTIALS": ("credentials", _parse_bool),
            "MAX_AGE": ("max_age", _parse_int),
            "PREFLIGHT_CONTINUE": ("preflight_continue", _parse_bool),
            "OPTIONS_SUCCESS_STATUS": ("options_success_status", _parse_int),
            "LOG": ("log", _parse_bool),
        }

        for suffix, (name, converter) in env_mappings.items():
            value = os.environ.get(ENV_PREFIX + suffix)
            if value is not None:
                data[name] = converter(value)

        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a JSON-friendly dictionary."""
        return {
            "origin": describe_origin(self.origin),
            "methods": list(self.methods),
            "allowed_headers": list(self.allowed_headers) if self.allowed_headers is not None else None,
            "exposed_headers": list(self.exposed_headers) if self.exposed_headers is not None else None,
            "credentials": self.credentials,
            "max_age": self.max_age,
            "preflight_continue": self.preflight_continue,
            "options_success_status": self.options_success_status,
            "log": self.log,
        }
