"""Application-layer port describing the logger capability set.

Purpose
-------
Define the structural contract the facade in :mod:`lib_context_log.core`
relies on, so any logger implementation can be bound to a context or installed
as the default without inheriting from a concrete class.

Contents
--------
* :class:`LoggerPort` – check a level, emit pre-built attributes, derive with
  attributes, derive with a group.

System Role
-----------
The facade converts loose ``*args``/``**fields`` into attributes itself, so
the port only needs the typed operations. The stdlib-backed
:class:`lib_context_log.adapters.stdlib.logger.Logger` is the default adapter.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..domain.attrs import Attr


@runtime_checkable
class LoggerPort(Protocol):
    """Immutable logger handle; derivations return new handles.

    Why
    ----
    Loggers are shared across concurrent contexts, so derivation must never
    change the instance it is called on.
    """

    def enabled(self, level: int) -> bool:
        """Return whether a record at *level* would be emitted."""

    def log_attrs(self, level: int, msg: str, *attrs: Attr, stacklevel: int = 1) -> None:
        """Emit *msg* with *attrs*; *stacklevel* counts frames above the caller."""

    def with_attrs(self, *attrs: Attr) -> LoggerPort:
        """Return a logger that adds *attrs* to every record."""

    def with_group(self, name: str) -> LoggerPort:
        """Return a logger that qualifies later attribute keys with *name*."""
