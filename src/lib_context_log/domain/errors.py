"""Domain-level exception hierarchy.

Purpose
-------
The facade itself never raises: malformed key/value input is tagged, lookups
always resolve. Errors exist only for configuration input (environment
settings, level names) so callers can tell a bad setting apart from any other
failure.

Contents
--------
* :class:`ContextLogError` – umbrella base class for all library errors.
* :class:`InvalidSetting` – an environment setting cannot be used.
* :class:`InvalidLevel` – a level name or number cannot be parsed.
"""

from __future__ import annotations


class ContextLogError(Exception):
    """Base type for all exceptions emitted by ``lib_context_log``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """


class InvalidSetting(ContextLogError):
    """Raised when a configuration value is present but unusable.

    Typical Sources
    ---------------
    :func:`lib_context_log.adapters.env.default.load_settings` when
    ``LIB_CONTEXT_LOG_FORMAT`` or ``LIB_CONTEXT_LOG_STREAM`` hold unknown values.
    """


class InvalidLevel(InvalidSetting):
    """Raised by :func:`lib_context_log.domain.levels.parse_level` for unknown levels."""
