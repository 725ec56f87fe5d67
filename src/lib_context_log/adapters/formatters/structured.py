"""Formatters that render facade records for :mod:`logging` handlers.

Purpose
-------
Records emitted through :class:`lib_context_log.adapters.stdlib.logger.Logger`
carry their attributes in two extras: ``context`` (flat, dotted keys) and
``attrs`` (the structured tuple). These formatters turn them into one line of
text, either ``key=value`` pairs or a JSON object.

Contents
--------
* :class:`TextFormatter` – ``time=... level=INFO msg=hello k=v g.k=v``.
* :class:`JSONFormatter` – ``{"time": ..., "level": ..., "msg": ..., "g": {"k": ...}}``.
* :func:`build_formatter` – select a formatter by name (``text``/``json``).

Text output keeps every attribute in emission order, repeated keys included.
JSON output merges repeated keys and moves attributes named like a record
field (``time``, ``level``, ``msg``, ``exc``) under ``attr.``. Records from
plain stdlib calls (no extras) still format, with only the message fields.
"""

from __future__ import annotations

import json
import logging
import time
from datetime import date, datetime, timedelta
from typing import Any, Final, Mapping

from ...domain.attrs import flatten_pairs, nest
from ...domain.errors import InvalidSetting
from ...domain.levels import level_name

FORMATS: Final[tuple[str, ...]] = ("text", "json")
RESERVED_KEYS: Final[frozenset[str]] = frozenset({"time", "level", "msg", "exc"})
"""Record fields an attribute may not overwrite in JSON output."""
RESERVED_PREFIX: Final[str] = "attr."


def _timestamp(record: logging.LogRecord) -> str:
    stamp = time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
    return f"{stamp}.{int(record.msecs):03d}Z"


def _render(value: Any) -> str:
    """Return the text form of an attribute value.

    >>> _render(True), _render(None), _render(timedelta(seconds=1.5))
    ('true', 'null', '1.5s')
    """

    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, timedelta):
        return f"{value.total_seconds():g}s"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _quote(text: str) -> str:
    """Quote *text* when it would break ``key=value`` parsing.

    >>> _quote("plain"), _quote("two words"), _quote("")
    ('plain', '"two words"', '""')
    """

    if not text or any(char.isspace() or char in '="' or not char.isprintable() for char in text):
        return json.dumps(text, ensure_ascii=False)
    return text


def _json_default(value: Any) -> Any:
    if isinstance(value, timedelta):
        return _render(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _record_pairs(record: logging.LogRecord) -> list[tuple[str, Any]]:
    """Return the record's attributes in emission order, repeats included.

    Falls back to the flat ``context`` mapping for records that carry no
    ``attrs`` tuple.
    """

    attrs = getattr(record, "attrs", None)
    if attrs:
        return flatten_pairs(attrs)
    context = getattr(record, "context", None)
    if isinstance(context, Mapping):
        return list(context.items())
    return []


def _unreserved(tree: Mapping[str, Any]) -> dict[str, Any]:
    """Move top-level keys that clash with record fields under :data:`RESERVED_PREFIX`.

    >>> _unreserved({"msg": "shadow", "k": 1})
    {'attr.msg': 'shadow', 'k': 1}
    """

    return {f"{RESERVED_PREFIX}{key}" if key in RESERVED_KEYS else key: value for key, value in tree.items()}


class TextFormatter(logging.Formatter):
    """Render records as a single line of ``key=value`` pairs."""

    def __init__(self, *, include_time: bool = True) -> None:
        super().__init__()
        self.include_time = include_time

    def format(self, record: logging.LogRecord) -> str:
        parts: list[str] = []
        if self.include_time:
            parts.append(f"time={_timestamp(record)}")
        parts.append(f"level={level_name(record.levelno)}")
        parts.append(f"msg={_quote(record.getMessage())}")
        for key, value in _record_pairs(record):
            parts.append(f"{_quote(key)}={_quote(_render(value))}")
        if record.exc_info:
            parts.append(f"exc={_quote(self.formatException(record.exc_info))}")
        return " ".join(parts)


class JSONFormatter(logging.Formatter):
    """Render records as single-line JSON with groups as nested objects."""

    def __init__(self, *, include_time: bool = True) -> None:
        super().__init__()
        self.include_time = include_time

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {}
        if self.include_time:
            payload["time"] = _timestamp(record)
        payload["level"] = level_name(record.levelno)
        payload["msg"] = record.getMessage()
        attrs = getattr(record, "attrs", None)
        payload.update(_unreserved(nest(attrs) if attrs else dict(_record_pairs(record))))
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=_json_default, ensure_ascii=False)


def build_formatter(fmt: str, *, include_time: bool = True) -> logging.Formatter:
    """Return the formatter registered under *fmt*.

    Raises
    ------
    InvalidSetting
        If *fmt* is not one of :data:`FORMATS`.
    """

    name = fmt.strip().lower()
    if name == "text":
        return TextFormatter(include_time=include_time)
    if name == "json":
        return JSONFormatter(include_time=include_time)
    raise InvalidSetting(f"unknown log format: {fmt!r} (expected one of {', '.join(FORMATS)})")
