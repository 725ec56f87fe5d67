"""Composition root for ``lib_context_log``: the context logger facade.

Purpose
-------
Let call sites emit leveled, attribute-tagged records without passing a logger
around. The effective logger travels inside a :class:`Context`; any subtree of
execution can swap or decorate it by deriving a new context.

Contents
--------
* :func:`set_default` / :func:`get_default` – process-wide fallback logger.
* :func:`with_logger` – bind a logger to a context.
* :func:`enabled`, :func:`debug`, :func:`info`, :func:`warn`, :func:`error`,
  :func:`log`, :func:`log_attrs` – dispatch to the effective logger.
* :func:`with_`, :func:`with_attrs`, :func:`with_group` – derive a context
  carrying a decorated logger.

System Role
-----------
Every operation takes ``ctx`` first. ``None`` stands for the ambient context
(:func:`lib_context_log.domain.context.current`). Dispatchers never raise;
handler failures follow :meth:`logging.Handler.handleError`.
"""

from __future__ import annotations

import logging
import sys
import threading
from typing import Any, Final

from .adapters.env.default import Settings, load_settings
from .adapters.formatters.structured import build_formatter
from .adapters.stdlib.logger import Logger
from .application.ports import LoggerPort
from .domain.attrs import Attr, to_attrs
from .domain.context import Context, current
from .domain.errors import InvalidSetting
from .domain.levels import DEBUG, ERROR, INFO, WARN

BASELINE_LOGGER_NAME: Final[str] = "lib_context_log"


class _LoggerKey:
    """Private slot identity; only this module holds the instance."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<lib_context_log logger>"


_LOGGER_KEY: Final = _LoggerKey()


class _BaselineHandler(logging.StreamHandler):
    """Stream handler installed by :func:`baseline_logger`; the only one it replaces."""


def baseline_logger(settings: Settings | None = None) -> Logger:
    """Build the fallback logger installed at import time.

    Why
    ----
    A lookup must always resolve, even before the application configures
    anything.

    What
    ----
    Wraps the stdlib logger :data:`BASELINE_LOGGER_NAME` with ``propagate``
    disabled and its own stream handler. Settings come from the environment
    unless given; invalid environment values fall back to :class:`Settings`
    defaults and are reported once through the new logger.

    Side Effects
    ------------
    Configures the named stdlib logger (level, handler, propagation). Its own
    handler is replaced on repeated calls rather than duplicated; handlers the
    application attached are left in place.
    """

    problem: InvalidSetting | None = None
    if settings is None:
        try:
            settings = load_settings()
        except InvalidSetting as exc:
            problem = exc
            settings = Settings()
    engine = logging.getLogger(BASELINE_LOGGER_NAME)
    engine.setLevel(settings.level)
    engine.propagate = False
    for handler in list(engine.handlers):
        if isinstance(handler, _BaselineHandler):
            engine.removeHandler(handler)
    handler = _BaselineHandler(sys.stdout if settings.stream == "stdout" else sys.stderr)
    handler.setFormatter(build_formatter(settings.fmt))
    engine.addHandler(handler)
    logger = Logger(engine)
    if problem is not None:
        logger.warn("invalid_environment_setting", error=str(problem))
    return logger


_default_lock = threading.Lock()
_default: LoggerPort = baseline_logger()


def set_default(logger: LoggerPort) -> None:
    """Replace the process-wide fallback logger.

    Contexts that already carry a bound logger are unaffected. A call that
    resolved the old default before the swap may still use it.
    """

    global _default
    with _default_lock:
        _default = logger


def get_default() -> LoggerPort:
    """Return the process-wide fallback logger."""

    with _default_lock:
        return _default


def _context(ctx: Context | None) -> Context:
    return current() if ctx is None else ctx


def with_logger(ctx: Context | None, logger: LoggerPort) -> Context:
    """Return a child of *ctx* whose effective logger is *logger*."""

    return _context(ctx).with_value(_LOGGER_KEY, logger)


def _logger_from_context(ctx: Context | None) -> LoggerPort:
    logger = _context(ctx).value(_LOGGER_KEY)
    if logger is None:
        return get_default()
    return logger


def enabled(ctx: Context | None, level: int) -> bool:
    """Report whether the effective logger emits records at *level*.

    Use it to guard expensive argument construction; it has no side effects.
    """

    return _logger_from_context(ctx).enabled(level)


def _dispatch(ctx: Context | None, level: int, msg: str, args: tuple[Any, ...], fields: dict[str, Any]) -> None:
    logger = _logger_from_context(ctx)
    if logger.enabled(level):
        # caller -> public dispatcher -> _dispatch -> log_attrs
        logger.log_attrs(level, msg, *to_attrs(args, fields), stacklevel=3)


def debug(ctx: Context | None, msg: str, *args: Any, **fields: Any) -> None:
    """Log at :data:`~lib_context_log.domain.levels.DEBUG`."""

    _dispatch(ctx, DEBUG, msg, args, fields)


def info(ctx: Context | None, msg: str, *args: Any, **fields: Any) -> None:
    """Log at :data:`~lib_context_log.domain.levels.INFO`."""

    _dispatch(ctx, INFO, msg, args, fields)


def warn(ctx: Context | None, msg: str, *args: Any, **fields: Any) -> None:
    """Log at :data:`~lib_context_log.domain.levels.WARN`."""

    _dispatch(ctx, WARN, msg, args, fields)


def error(ctx: Context | None, msg: str, *args: Any, **fields: Any) -> None:
    """Log at :data:`~lib_context_log.domain.levels.ERROR`."""

    _dispatch(ctx, ERROR, msg, args, fields)


def log(ctx: Context | None, level: int, msg: str, *args: Any, **fields: Any) -> None:
    """Log *msg* at *level*.

    ``args`` alternate key and value (``Attr`` instances are taken as is);
    ``fields`` follow them. Unpaired input is tagged ``!BADKEY``.
    """

    _dispatch(ctx, level, msg, args, fields)


def log_attrs(ctx: Context | None, level: int, msg: str, *attrs: Attr) -> None:
    """Like :func:`log` but takes pre-built attributes and skips coercion."""

    _logger_from_context(ctx).log_attrs(level, msg, *attrs, stacklevel=2)


def with_group(ctx: Context | None, name: str) -> Context:
    """Return a context whose logger qualifies later attribute keys with *name*.

    Examples
    --------
    >>> import io
    >>> from lib_context_log import new_logger
    >>> buffer = io.StringIO()
    >>> ctx = with_logger(None, new_logger(stream=buffer, include_time=False))
    >>> info(with_group(with_group(ctx, "http"), "req"), "done", status=204)
    >>> buffer.getvalue()
    'level=INFO msg=done http.req.status=204\\n'
    """

    ctx = _context(ctx)
    return with_logger(ctx, _logger_from_context(ctx).with_group(name))


def with_attrs(ctx: Context | None, *attrs: Attr) -> Context:
    """Return a context whose logger adds *attrs* to every record."""

    ctx = _context(ctx)
    return with_logger(ctx, _logger_from_context(ctx).with_attrs(*attrs))


def with_(ctx: Context | None, *args: Any, **fields: Any) -> Context:
    """Return a context whose logger adds the coerced ``args``/``fields`` to every record.

    Attributes accumulate: a second call layers its attributes onto the ones
    already bound.
    """

    ctx = _context(ctx)
    return with_logger(ctx, _logger_from_context(ctx).with_attrs(*to_attrs(args, fields)))
