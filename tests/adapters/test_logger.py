"""Stdlib logger adapter: immutability, grouping and engine integration."""

from __future__ import annotations

import dataclasses
import io
import logging

import pytest

from lib_context_log.adapters.stdlib.logger import Logger, get_logger, new_logger
from lib_context_log.domain.attrs import Attr
from lib_context_log.domain.levels import DEBUG, ERROR, INFO, WARN
from lib_context_log.testing import memory_logger


def test_derivations_return_new_instances() -> None:
    base, _ = memory_logger()
    bound = base.with_("k", "v")
    grouped = base.with_group("g")

    assert base.bound == () and base.groups == ()
    assert bound.bound == (Attr("k", "v"),)
    assert grouped.groups == ("g",)
    assert bound.engine is base.engine is grouped.engine


def test_noop_derivations_return_same_instance() -> None:
    base, _ = memory_logger()
    assert base.with_attrs() is base
    assert base.with_() is base
    assert base.with_group("") is base


def test_logger_is_frozen() -> None:
    base, _ = memory_logger()
    with pytest.raises(dataclasses.FrozenInstanceError):
        base.groups = ("x",)  # type: ignore[misc]


def test_attributes_bound_before_group_stay_outside() -> None:
    logger, buffer = memory_logger()
    logger.with_(a=1).with_group("g").with_(b=2).info("m", c=3)
    assert buffer.getvalue() == "level=INFO msg=m a=1 g.b=2 g.c=3\n"


def test_convenience_methods_use_fixed_levels() -> None:
    logger, buffer = memory_logger()
    logger.debug("d")
    logger.info("i")
    logger.warn("w")
    logger.error("e")
    logger.log(WARN + 1, "custom")
    assert [line.split(" ")[0] for line in buffer.getvalue().splitlines()] == [
        "level=DEBUG",
        "level=INFO",
        "level=WARN",
        "level=ERROR",
        "level=WARN+1",
    ]


def test_new_logger_threshold() -> None:
    buffer = io.StringIO()
    logger = new_logger("tests.threshold", stream=buffer, level=ERROR, include_time=False)
    logger.warn("dropped")
    logger.error("kept")
    assert buffer.getvalue() == "level=ERROR msg=kept\n"
    assert not logger.engine.propagate


def test_get_logger_wraps_registered_logger(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="tests.registered")
    logger = get_logger("tests.registered")

    logger.with_(tenant="acme").debug("too low")
    logger.with_(tenant="acme").info("recorded")

    assert logger.engine is logging.getLogger("tests.registered")
    assert [record.getMessage() for record in caplog.records] == ["recorded"]
    assert caplog.records[0].context == {"tenant": "acme"}
    assert caplog.records[0].attrs == (Attr("tenant", "acme"),)


def test_enabled_honours_logging_disable() -> None:
    logger, _ = memory_logger(DEBUG)
    logging.disable(logging.INFO)
    try:
        assert not logger.enabled(INFO)
        assert logger.enabled(WARN)
    finally:
        logging.disable(logging.NOTSET)


def test_wrapping_an_existing_engine() -> None:
    engine = logging.getLogger("tests.engine")
    engine.setLevel(WARN)
    logger = Logger(engine)
    assert not logger.enabled(INFO)
    assert logger.enabled(WARN)


def test_new_logger_engines_are_distinct_registered_children() -> None:
    first = new_logger("tests.sink", stream=io.StringIO())
    second = new_logger("tests.sink", stream=io.StringIO())

    assert first.engine is not second.engine
    assert first.engine.name.startswith("tests.sink.")
    assert logging.getLogger(first.engine.name) is first.engine
    assert len(first.engine.handlers) == 1


def test_level_change_after_emitting_takes_effect() -> None:
    logger, buffer = memory_logger(DEBUG)
    logger.info("first")

    logger.engine.setLevel(WARN)

    assert not logger.enabled(INFO)
    logger.info("second")
    assert buffer.getvalue() == "level=INFO msg=first\n"


def test_logging_disable_applies_after_emitting() -> None:
    logger, buffer = memory_logger(DEBUG)
    logger.error("first")
    logging.disable(logging.ERROR)
    try:
        assert not logger.enabled(ERROR)
        logger.error("second")
    finally:
        logging.disable(logging.NOTSET)

    assert buffer.getvalue() == "level=ERROR msg=first\n"
