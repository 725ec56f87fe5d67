"""Severity levels shared by the facade, the logger adapter and the formatters.

The numeric values are the standard :mod:`logging` ones so thresholds set on
stdlib loggers and handlers keep working unchanged. Names follow the four
levels the facade exposes; anything in between renders as an offset from the
nearest named level (``INFO+5``).
"""

from __future__ import annotations

import logging
from typing import Final

from .errors import InvalidLevel

DEBUG: Final[int] = logging.DEBUG
INFO: Final[int] = logging.INFO
WARN: Final[int] = logging.WARNING
ERROR: Final[int] = logging.ERROR

_NAMED: Final[tuple[tuple[int, str], ...]] = (
    (ERROR, "ERROR"),
    (WARN, "WARN"),
    (INFO, "INFO"),
    (DEBUG, "DEBUG"),
)

_ALIASES: Final[dict[str, int]] = {
    "debug": DEBUG,
    "info": INFO,
    "warn": WARN,
    "warning": WARN,
    "error": ERROR,
}


def level_name(level: int) -> str:
    """Return the display name for *level*.

    Examples
    --------
    >>> level_name(WARN)
    'WARN'
    >>> level_name(INFO + 5)
    'INFO+5'
    >>> level_name(50)
    'ERROR+10'
    >>> level_name(5)
    'DEBUG-5'
    """

    for value, name in _NAMED:
        if level >= value:
            return name if level == value else f"{name}+{level - value}"
    return f"DEBUG-{DEBUG - level}"


def parse_level(value: int | str) -> int:
    """Translate *value* into a numeric level.

    Why
    ----
    Environment variables and CLI options carry levels as text; the facade
    works with integers.

    What
    ----
    Integers pass through. Strings may be a number, a name
    (``debug|info|warn|warning|error``, case-insensitive) or a name with a
    signed offset (``info+2``).

    Raises
    ------
    InvalidLevel
        When *value* is neither an integer nor a recognised name.

    Examples
    --------
    >>> parse_level("warn")
    30
    >>> parse_level(" Info+2 ")
    22
    >>> parse_level("15")
    15
    >>> parse_level("loud")
    Traceback (most recent call last):
    ...
    lib_context_log.domain.errors.InvalidLevel: unknown level: 'loud'
    """

    if isinstance(value, bool):
        raise InvalidLevel(f"unknown level: {value!r}")
    if isinstance(value, int):
        return value
    text = str(value).strip().lower()
    try:
        return int(text)
    except ValueError:
        pass
    name, sign, offset = _split_offset(text)
    if name not in _ALIASES:
        raise InvalidLevel(f"unknown level: {value!r}")
    if not sign:
        return _ALIASES[name]
    try:
        delta = int(offset)
    except ValueError as exc:
        raise InvalidLevel(f"unknown level: {value!r}") from exc
    return _ALIASES[name] + delta if sign == "+" else _ALIASES[name] - delta


def _split_offset(text: str) -> tuple[str, str, str]:
    """Split ``name+n`` / ``name-n`` into its parts; ``sign`` is empty without offset."""

    for sign in ("+", "-"):
        name, found, offset = text.partition(sign)
        if found:
            return name.strip(), sign, offset.strip()
    return text, "", ""
