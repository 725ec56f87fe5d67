"""Public package surface of the context logger facade.

Call sites emit through module-level functions that take a
:class:`~lib_context_log.domain.context.Context` first; the effective logger is
resolved from that context or falls back to the process-wide default.

Example
-------
>>> import lib_context_log as clog
>>> logger, buffer = clog.memory_logger()
>>> ctx = clog.with_(clog.with_logger(clog.background(), logger), "req", "42")
>>> clog.warn(ctx, "slow")
>>> buffer.getvalue()
'level=WARN msg=slow req=42\\n'
"""

from __future__ import annotations

from .adapters.env.default import Settings, default_env_prefix, load_settings
from .adapters.formatters.structured import JSONFormatter, TextFormatter
from .adapters.stdlib.logger import Logger, get_logger, new_logger
from .application.ports import LoggerPort
from .core import (
    debug,
    enabled,
    error,
    get_default,
    info,
    log,
    log_attrs,
    set_default,
    warn,
    with_,
    with_attrs,
    with_group,
    with_logger,
)
from .domain.attrs import BAD_KEY, Attr, Group, attr, boolean, duration, floating, group, integer, string
from .domain.context import Context, background, current, use
from .domain.errors import ContextLogError, InvalidLevel, InvalidSetting
from .domain.levels import DEBUG, ERROR, INFO, WARN, level_name, parse_level
from .testing import i_should_fail, memory_logger

__all__ = [
    "Attr",
    "BAD_KEY",
    "Context",
    "ContextLogError",
    "DEBUG",
    "ERROR",
    "Group",
    "INFO",
    "InvalidLevel",
    "InvalidSetting",
    "JSONFormatter",
    "Logger",
    "LoggerPort",
    "Settings",
    "TextFormatter",
    "WARN",
    "attr",
    "background",
    "boolean",
    "current",
    "debug",
    "default_env_prefix",
    "duration",
    "enabled",
    "error",
    "floating",
    "get_default",
    "get_logger",
    "group",
    "i_should_fail",
    "info",
    "integer",
    "level_name",
    "load_settings",
    "log",
    "log_attrs",
    "memory_logger",
    "new_logger",
    "parse_level",
    "set_default",
    "string",
    "use",
    "warn",
    "with_",
    "with_attrs",
    "with_group",
    "with_logger",
]
