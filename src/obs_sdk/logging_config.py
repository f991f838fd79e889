"""Logging configuration for the OBS Python SDK."""

import logging
import sys
from typing import Optional, TextIO, Union

PACKAGE_LOGGER = "obs_sdk"

LOG_FORMAT = "[%(levelname)s][%(module)s:%(lineno)d] %(funcName)s - %(message)s"

# "none" silences the SDK entirely
LOG_LEVELS = {
    "none": logging.CRITICAL + 10,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def resolve_log_level(level: Union[str, int]) -> int:
    """Map a level name (none/error/warning/info/debug) or number to a logging level.

    Raises:
        ValueError: If the name is unknown.
    """
    if isinstance(level, int):
        return level
    try:
        return LOG_LEVELS[level.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown log level: {level!r}; expected one of {sorted(LOG_LEVELS)}")


def configure_logging(level: Union[str, int] = "info", stream: Optional[TextIO] = None) -> logging.Logger:
    """Attach a stream handler to the SDK logger.

    Calling this more than once replaces the previously installed handler
    rather than adding another one.

    Args:
        level: Level name or number.
        stream: Output stream (stderr by default).

    Returns:
        The configured ``obs_sdk`` logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(resolve_log_level(level))

    for existing in list(logger.handlers):
        if getattr(existing, "_obs_sdk_handler", False):
            logger.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._obs_sdk_handler = True
    logger.addHandler(handler)
    return logger
