"""Testing support that keeps log output and failure scenarios observable.

Purpose
    Give tests a sink they can read back and a deterministic failure for the
    CLI error path.

Contents
    - ``FAILURE_MESSAGE``: stable message used when forcing a failure.
    - ``i_should_fail``: raises ``RuntimeError`` so callers can assert on the
      propagated error details.
    - ``memory_logger``: a logger writing untimestamped lines into a buffer.

System Integration
    Used by the test suite and by ``lib_context_log fail``.
"""

from __future__ import annotations

import io
from typing import Final

from .adapters.stdlib.logger import Logger, new_logger
from .domain.levels import DEBUG

FAILURE_MESSAGE: Final[str] = "i should fail"
"""Stable message emitted when ``i_should_fail`` triggers a failure sequence."""


def i_should_fail() -> None:
    """Raise a deterministic :class:`RuntimeError` for failure-path testing.

    Examples
    --------
    >>> i_should_fail()
    Traceback (most recent call last):
    ...
    RuntimeError: i should fail
    """

    raise RuntimeError(FAILURE_MESSAGE)


def memory_logger(
    level: int = DEBUG,
    *,
    fmt: str = "text",
    name: str = "lib_context_log.memory",
) -> tuple[Logger, io.StringIO]:
    """Return a logger and the buffer it writes to.

    Lines carry no ``time=`` field so assertions can compare whole lines.

    Examples
    --------
    >>> logger, buffer = memory_logger()
    >>> logger.debug("probe", attempt=1)
    >>> buffer.getvalue()
    'level=DEBUG msg=probe attempt=1\\n'
    """

    buffer = io.StringIO()
    return new_logger(name, stream=buffer, level=level, fmt=fmt, include_time=False), buffer
