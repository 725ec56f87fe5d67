"""Environment variable adapter for the baseline logger settings.

Purpose
-------
Let operators tune the process-wide fallback logger (level, output format,
stream) without code changes.

Key behaviours
--------------
* Enforces a prefix (``default_env_prefix``) so only relevant keys are read.
* Keys are matched case-insensitively after the prefix and stored lowercase.
* :func:`load_settings` validates values and raises
  :class:`~lib_context_log.domain.errors.InvalidSetting` on bad input; the
  composition root decides how to recover.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final, Mapping

from ...domain.errors import InvalidSetting
from ...domain.levels import INFO, parse_level
from ..formatters.structured import FORMATS

STREAMS: Final[tuple[str, ...]] = ("stderr", "stdout")


def default_env_prefix(slug: str) -> str:
    """Return the canonical environment prefix for *slug*.

    Examples
    --------
    >>> default_env_prefix('lib-context-log')
    'LIB_CONTEXT_LOG'
    """

    return slug.replace("-", "_").upper()


ENV_PREFIX: Final[str] = default_env_prefix("lib-context-log")


@dataclass(frozen=True, slots=True)
class Settings:
    """Validated baseline logger settings.

    Attributes
    ----------
    level:
        Threshold of the baseline engine.
    fmt:
        Formatter name, one of ``text`` or ``json``.
    stream:
        ``stderr`` or ``stdout``.
    """

    level: int = INFO
    fmt: str = "text"
    stream: str = "stderr"


class DefaultEnvLoader:
    """Load environment variables that belong to the library namespace."""

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def load(self, prefix: str) -> dict[str, str]:
        """Return variables starting with *prefix*, keyed by their lowercase suffix.

        >>> DefaultEnvLoader(environ={'DEMO_LEVEL': 'debug', 'OTHER': 'x'}).load('DEMO')
        {'level': 'debug'}
        """

        prefix = f"{prefix}_" if prefix and not prefix.endswith("_") else prefix
        collected: dict[str, str] = {}
        for key, value in self._environ.items():
            if not key.upper().startswith(prefix):
                continue
            stripped = key[len(prefix) :]
            if stripped:
                collected[stripped.lower()] = value
        return collected


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Read :class:`Settings` from *environ* (default :data:`os.environ`).

    Raises
    ------
    InvalidLevel
        ``LIB_CONTEXT_LOG_LEVEL`` is not a level.
    InvalidSetting
        ``LIB_CONTEXT_LOG_FORMAT`` or ``LIB_CONTEXT_LOG_STREAM`` is unknown.

    Examples
    --------
    >>> load_settings({'LIB_CONTEXT_LOG_LEVEL': 'debug', 'LIB_CONTEXT_LOG_FORMAT': 'JSON'})
    Settings(level=10, fmt='json', stream='stderr')
    """

    values = DefaultEnvLoader(environ=environ).load(ENV_PREFIX)
    defaults = Settings()
    level = parse_level(values["level"]) if values.get("level", "").strip() else defaults.level
    fmt = _choice(values, "format", FORMATS, defaults.fmt)
    stream = _choice(values, "stream", STREAMS, defaults.stream)
    return Settings(level=level, fmt=fmt, stream=stream)


def _choice(values: Mapping[str, str], key: str, allowed: tuple[str, ...], default: str) -> str:
    raw = values.get(key, "").strip().lower()
    if not raw:
        return default
    if raw not in allowed:
        raise InvalidSetting(f"{ENV_PREFIX}_{key.upper()}={values[key]!r} (expected one of {', '.join(allowed)})")
    return raw
