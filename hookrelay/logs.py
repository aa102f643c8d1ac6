"""Logging setup shared by the app factory."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def normalize_log_level(level: str | None) -> tuple[str, bool]:
    """
    Normalize a log level name.

    Returns the level and a flag telling whether the input was invalid
    (in which case ``INFO`` is used).
    """
    if not level:
        return "INFO", True
    normalized = level.strip().upper()
    if normalized == "WARN":
        normalized = "WARNING"
    if normalized in _LEVELS:
        return normalized, False
    return "INFO", True


def configure_logging(level: str | None) -> str:
    normalized, invalid = normalize_log_level(level)
    logging.basicConfig(level=normalized, format=LOG_FORMAT)
    if invalid and level:
        logging.getLogger(__name__).warning(
            "Unknown LOG_LEVEL %r, using %s", level, normalized
        )
    return normalized
