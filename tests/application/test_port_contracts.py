"""Port contract tests.

The facade only depends on :class:`LoggerPort`; these tests check the stdlib
adapter satisfies it and that any other implementation can be bound or
installed as the default.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import lib_context_log as clog
from lib_context_log.application import ports
from lib_context_log.domain.attrs import Attr, flatten, nest_under


@dataclass(frozen=True)
class RecordingLogger:
    """Minimal LoggerPort keeping records in a shared list."""

    records: list = field(default_factory=list)
    threshold: int = clog.INFO
    bound: tuple = ()
    groups: tuple = ()

    def enabled(self, level: int) -> bool:
        return level >= self.threshold

    def log_attrs(self, level: int, msg: str, *attrs: Attr, stacklevel: int = 1) -> None:
        if self.enabled(level):
            self.records.append((level, msg, flatten(self.bound + nest_under(self.groups, attrs))))

    def with_attrs(self, *attrs: Attr) -> "RecordingLogger":
        return RecordingLogger(self.records, self.threshold, self.bound + nest_under(self.groups, attrs), self.groups)

    def with_group(self, name: str) -> "RecordingLogger":
        return RecordingLogger(self.records, self.threshold, self.bound, self.groups + (name,))


def test_stdlib_logger_satisfies_port() -> None:
    logger, _ = clog.memory_logger()
    assert isinstance(logger, ports.LoggerPort)
    assert isinstance(clog.get_default(), ports.LoggerPort)


def test_recording_logger_satisfies_port() -> None:
    assert isinstance(RecordingLogger(), ports.LoggerPort)


def test_facade_drives_any_port_implementation() -> None:
    recorder = RecordingLogger()
    ctx = clog.with_logger(clog.background(), recorder)
    ctx = clog.with_group(clog.with_(ctx, "svc", "api"), "req")

    clog.debug(ctx, "skipped")
    clog.info(ctx, "served", "status", 200)
    clog.log_attrs(ctx, clog.ERROR, "failed", clog.string("reason", "timeout"))

    assert recorder.records == [
        (clog.INFO, "served", {"svc": "api", "req.status": 200}),
        (clog.ERROR, "failed", {"svc": "api", "req.reason": "timeout"}),
    ]
    assert clog.enabled(ctx, clog.INFO)
    assert not clog.enabled(ctx, clog.DEBUG)


def test_port_implementation_as_default() -> None:
    recorder = RecordingLogger()
    clog.set_default(recorder)

    clog.warn(clog.background(), "fallback", code=1)

    assert recorder.records == [(clog.WARN, "fallback", {"code": 1})]
