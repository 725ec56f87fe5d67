"""Immutable, hierarchical execution context.

Purpose
-------
Carry request- or task-scoped values (the bound logger among them) down a call
tree without adding parameters to every function. Each derivation creates a
child node pointing at its parent; lookups walk towards the root.

Contents
--------
* :class:`Context` – the immutable carrier.
* :func:`background` – the shared empty root.
* :data:`CURRENT` / :func:`current` / :func:`use` – optional ambient context
  for code that prefers not to pass ``ctx`` explicitly.

System Integration
    :mod:`lib_context_log.core` stores the effective logger under a private key
    and treats every other slot as opaque.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Hashable, Iterator


class _Root:
    """Marker key of the root node; never equal to a caller key."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<root>"


_ROOT_KEY = _Root()


class Context:
    """Immutable key/value node linked to its parent.

    Examples
    --------
    >>> parent = background().with_value("tenant", "acme")
    >>> child = parent.with_value("request", 7)
    >>> child.value("tenant"), child.value("request")
    ('acme', 7)
    >>> parent.value("request") is None
    True
    """

    __slots__ = ("_parent", "_key", "_value", "_depth")

    def __init__(self, parent: Context | None = None, key: Hashable = _ROOT_KEY, value: Any = None) -> None:
        object.__setattr__(self, "_parent", parent)
        object.__setattr__(self, "_key", key)
        object.__setattr__(self, "_value", value)
        object.__setattr__(self, "_depth", 0 if parent is None else parent._depth + 1)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def parent(self) -> Context | None:
        return self._parent

    @property
    def depth(self) -> int:
        """Number of derivations between this node and the root."""

        return self._depth

    def with_value(self, key: Hashable, value: Any) -> Context:
        """Return a child context where *key* resolves to *value*.

        Raises
        ------
        TypeError
            If *key* is ``None``.
        """

        if key is None:
            raise TypeError("context key must not be None")
        return Context(self, key, value)

    def value(self, key: Hashable, default: Any = None) -> Any:
        """Return the value bound to *key* on this node or the nearest ancestor.

        Keys match when they are the same object, or of the same type and equal.
        An object with a permissive ``__eq__`` therefore cannot answer for a key
        of another type.
        """

        node: Context | None = self
        while node is not None:
            if node._key is key or (type(node._key) is type(key) and node._key == key):
                return node._value
            node = node._parent
        return default

    def __repr__(self) -> str:
        if self._parent is None:
            return "Context(background)"
        return f"Context(depth={self._depth}, key={self._key!r})"


_BACKGROUND = Context()

CURRENT: ContextVar[Context] = ContextVar("lib_context_log_current", default=_BACKGROUND)
"""Ambient context consulted when a facade call receives ``ctx=None``."""


def background() -> Context:
    """Return the shared, empty root context."""

    return _BACKGROUND


def current() -> Context:
    """Return the ambient context bound by :func:`use`, or :func:`background`."""

    return CURRENT.get()


@contextmanager
def use(ctx: Context) -> Iterator[Context]:
    """Make *ctx* the ambient context for the enclosed block.

    The previous ambient context is restored on exit, also when the block
    raises.

    Examples
    --------
    >>> with use(background().with_value("k", "v")):
    ...     current().value("k")
    'v'
    >>> current() is background()
    True
    """

    token = CURRENT.set(ctx)
    try:
        yield ctx
    finally:
        CURRENT.reset(token)
