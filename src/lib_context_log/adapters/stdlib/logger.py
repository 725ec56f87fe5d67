"""Stdlib-backed logger adapter.

Purpose
-------
Implement :class:`lib_context_log.application.ports.LoggerPort` on top of a
:class:`logging.Logger`, the engine that owns levels, handlers and output. The
adapter adds what ``logging`` lacks: immutable derivation with pre-bound
attributes and group namespacing.

Contents
--------
* :class:`Logger` – frozen handle around a ``logging.Logger``.
* :func:`new_logger` – private engine writing to one stream.
* :func:`get_logger` – wrap a registered ``logging.getLogger`` logger.

Record layout
-------------
Every emission calls ``engine.log`` with two extras: ``context`` (flattened
``{"group.key": value}`` mapping) and ``attrs`` (the structured tuple, bound
attributes first). :mod:`lib_context_log.adapters.formatters.structured`
renders both.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, replace
from typing import IO, Any

from ...domain.attrs import Attr, flatten, nest_under, to_attrs
from ...domain.levels import DEBUG, ERROR, INFO, WARN
from ..formatters.structured import build_formatter

_SINK_SERIAL = itertools.count(1)


@dataclass(frozen=True, slots=True)
class Logger:
    """Immutable logger handle.

    Why
    ----
    A context may be shared by many threads or tasks; deriving a logger for a
    subtree must not leak attributes into siblings.

    What
    ----
    Holds the stdlib ``engine``, the attributes bound so far (already nested
    under the groups that were open when they were bound) and the names of the
    groups that later attributes belong to.

    Examples
    --------
    >>> import io
    >>> buffer = io.StringIO()
    >>> log = new_logger("doc", stream=buffer, include_time=False)
    >>> log.with_(service="api").with_group("req").info("served", status=200)
    >>> buffer.getvalue()
    'level=INFO msg=served service=api req.status=200\\n'
    """

    engine: logging.Logger
    bound: tuple[Attr, ...] = ()
    groups: tuple[str, ...] = ()

    def enabled(self, level: int) -> bool:
        return self.engine.isEnabledFor(level)

    def log_attrs(self, level: int, msg: str, *attrs: Attr, stacklevel: int = 1) -> None:
        """Emit *msg* with *attrs* when *level* is enabled.

        *stacklevel* has the ``logging`` meaning relative to the caller of this
        method, so wrappers add one per frame they introduce.
        """

        if not self.engine.isEnabledFor(level):
            return
        record_attrs = self.bound + nest_under(self.groups, attrs)
        self.engine.log(
            level,
            msg,
            extra={"context": flatten(record_attrs), "attrs": record_attrs},
            stacklevel=stacklevel + 1,
        )

    def log(self, level: int, msg: str, *args: Any, **fields: Any) -> None:
        if self.engine.isEnabledFor(level):
            self.log_attrs(level, msg, *to_attrs(args, fields), stacklevel=2)

    def debug(self, msg: str, *args: Any, **fields: Any) -> None:
        if self.engine.isEnabledFor(DEBUG):
            self.log_attrs(DEBUG, msg, *to_attrs(args, fields), stacklevel=2)

    def info(self, msg: str, *args: Any, **fields: Any) -> None:
        if self.engine.isEnabledFor(INFO):
            self.log_attrs(INFO, msg, *to_attrs(args, fields), stacklevel=2)

    def warn(self, msg: str, *args: Any, **fields: Any) -> None:
        if self.engine.isEnabledFor(WARN):
            self.log_attrs(WARN, msg, *to_attrs(args, fields), stacklevel=2)

    def error(self, msg: str, *args: Any, **fields: Any) -> None:
        if self.engine.isEnabledFor(ERROR):
            self.log_attrs(ERROR, msg, *to_attrs(args, fields), stacklevel=2)

    def with_attrs(self, *attrs: Attr) -> Logger:
        if not attrs:
            return self
        return replace(self, bound=self.bound + nest_under(self.groups, attrs))

    def with_(self, *args: Any, **fields: Any) -> Logger:
        """Return a logger that adds the coerced ``args``/``fields`` to every record."""

        return self.with_attrs(*to_attrs(args, fields))

    def with_group(self, name: str) -> Logger:
        if not name:
            return self
        return replace(self, groups=self.groups + (name,))


def new_logger(
    name: str = "lib_context_log",
    *,
    stream: IO[str] | None = None,
    level: int = INFO,
    fmt: str = "text",
    include_time: bool = True,
) -> Logger:
    """Return a logger whose engine writes to *stream* and nothing else.

    Why
    ----
    Tests and dedicated sinks need loggers that do not share handlers with
    the rest of the application's logger hierarchy.

    What
    ----
    Registers a fresh child ``<name>.<serial>`` through :func:`logging.getLogger`
    so ``setLevel`` and :func:`logging.disable` take effect immediately, turns
    off propagation and attaches a single :class:`logging.StreamHandler`.
    ``stream=None`` means ``sys.stderr``. Each call registers one logger for
    the lifetime of the process.

    Raises
    ------
    InvalidSetting
        If *fmt* is not a known formatter name.
    """

    formatter = build_formatter(fmt, include_time=include_time)
    engine = logging.getLogger(f"{name}.{next(_SINK_SERIAL)}")
    engine.setLevel(level)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)
    engine.addHandler(handler)
    engine.propagate = False
    return Logger(engine)


def get_logger(name: str) -> Logger:
    """Wrap the registered stdlib logger *name* so application config applies."""

    return Logger(logging.getLogger(name))
