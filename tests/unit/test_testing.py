from __future__ import annotations

import pytest

from lib_context_log.testing import i_should_fail, memory_logger


def test_i_should_fail_raises_runtime_error() -> None:
    with pytest.raises(RuntimeError, match="^i should fail$"):
        i_should_fail()


def test_i_should_fail_reexported() -> None:
    from lib_context_log import i_should_fail as exported
    from lib_context_log.testing import i_should_fail as original

    assert exported is original


def test_memory_loggers_are_independent() -> None:
    first, first_buf = memory_logger()
    second, second_buf = memory_logger()

    first.info("one")

    assert first_buf.getvalue() == "level=INFO msg=one\n"
    assert second_buf.getvalue() == ""
    assert first.engine is not second.engine


def test_memory_logger_json_format() -> None:
    logger, buffer = memory_logger(fmt="json")

    logger.info("probe", ok=True)

    assert buffer.getvalue() == '{"level": "INFO", "msg": "probe", "ok": true}\n'
