"""
This module provides a simple, environment-variable-based logging setup for crosscors.

Setting `CROSSCORS_DEBUG` to a truthy value turns on debug-level output for the
`crosscors` logger hierarchy, which includes a trace of every origin decision.
Allow and deny events requested through `CorsConfig.log` are emitted at INFO and
WARNING; `setup_event_logging` routes them to stderr.
"""

import logging
import os
import sys
from typing import Any

logger = logging.getLogger("crosscors")

DEBUG_ENV_VAR = "CROSSCORS_DEBUG"


def debug_enabled() -> bool:
    """Returns True if the CROSSCORS_DEBUG environment variable is truthy."""
    return os.environ.get(DEBUG_ENV_VAR, "").lower() in ("true", "1", "yes")


def _attach_stderr_handler() -> None:
    if not any(getattr(h, "_crosscors_stderr", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("[CROSSCORS] %(levelname)s %(name)s: %(message)s"))
        handler._crosscors_stderr = True  # type: ignore[attr-defined]
        logger.addHandler(handler)


def setup_debug_logging() -> bool:
    """
    Enables debug logging if the CROSSCORS_DEBUG environment variable is set.

    Attaches a stderr handler to the `crosscors` logger and lowers its level to
    DEBUG. Calling it more than once does not add duplicate handlers.

    Returns:
        True if debug mode is enabled, False otherwise.
    """
    if not debug_enabled():
        return False

    _attach_stderr_handler()
    logger.setLevel(logging.DEBUG)
    logger.debug("Debug mode enabled")
    return True


def setup_event_logging() -> None:
    """
    Makes allow and deny events visible on stderr.

    Used when `CorsConfig.log` is on. Attaches the same stderr handler as debug
    mode and lowers the `crosscors` logger to INFO, unless it is already more
    verbose.
    """
    _attach_stderr_handler()
    if logger.getEffectiveLevel() > logging.INFO:
        logger.setLevel(logging.INFO)


def debug_log(message: str, **kwargs: Any) -> None:
    """
    Logs a debug message with optional key-value context.

    Args:
        message: The debug message.
        **kwargs: Additional key-value pairs to include for context.
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return
    context = " ".join(f"{key}={value!r}" for key, value in kwargs.items())
    logger.debug(f"{message} {context}" if context else message)
