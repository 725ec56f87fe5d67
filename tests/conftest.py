"""Shared fixtures keeping the process-wide default logger isolated per test."""

from __future__ import annotations

import io
from typing import Iterator

import pytest

import lib_context_log as clog
from lib_context_log.testing import memory_logger


@pytest.fixture(autouse=True)
def restore_default_logger() -> Iterator[None]:
    """Every test may call ``set_default``; put the previous default back afterwards."""

    previous = clog.get_default()
    yield
    clog.set_default(previous)


@pytest.fixture()
def sink() -> tuple[clog.Logger, io.StringIO]:
    """Debug-level logger writing untimestamped text lines into a buffer."""

    return memory_logger()
