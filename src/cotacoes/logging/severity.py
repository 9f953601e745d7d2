"""
Severity mapping between level names and OpenTelemetry severity.

Two vocabularies reach this module: the winston-style names used by the rest
of the platform (``warn``, ``http``, ``verbose``, ``silly``) and the stdlib
names structlog emits (``warning``, ``critical``).
"""

from __future__ import annotations

import logging
from typing import NamedTuple


class Severity(NamedTuple):
    text: str
    number: int


_DEFAULT = Severity("INFO", 9)

_SEVERITIES: dict[str, Severity] = {
    "error": Severity("ERROR", 17),
    "warn": Severity("WARN", 13),
    "info": Severity("INFO", 9),
    "http": Severity("INFO", 9),
    "verbose": Severity("DEBUG", 7),
    "debug": Severity("DEBUG", 5),
    "silly": Severity("TRACE", 1),
    # stdlib names
    "warning": Severity("WARN", 13),
    "critical": Severity("FATAL", 21),
}

_MIN_LEVELS: dict[str, int] = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "http": logging.INFO,
    "verbose": logging.DEBUG,
    "debug": logging.DEBUG,
    "silly": logging.DEBUG,
}


def map_severity(level: str | None) -> Severity:
    """Return the (text, number) severity for a level name. Unknown names map to INFO."""
    if not level:
        return _DEFAULT
    return _SEVERITIES.get(str(level).lower(), _DEFAULT)


def resolve_min_level(name: str | None) -> int:
    """Translate a LOG_LEVEL value into a stdlib numeric level."""
    if not name:
        return logging.INFO
    return _MIN_LEVELS.get(name.strip().lower(), logging.INFO)
