"""Immutable context chain and the ambient ``use``/``current`` helpers."""

from __future__ import annotations

import asyncio
from unittest import mock

import pytest

from lib_context_log.domain.context import background, current, use


def test_background_is_a_shared_empty_root() -> None:
    assert background() is background()
    assert background().parent is None
    assert background().depth == 0
    assert background().value("anything") is None


def test_with_value_returns_child_and_keeps_parent() -> None:
    parent = background().with_value("tenant", "acme")
    child = parent.with_value("tenant", "globex")

    assert child.parent is parent
    assert child.depth == 2
    assert parent.value("tenant") == "acme"
    assert child.value("tenant") == "globex"


def test_lookup_walks_to_nearest_ancestor() -> None:
    ctx = background().with_value("a", 1).with_value("b", 2).with_value("c", 3)

    assert (ctx.value("a"), ctx.value("b"), ctx.value("c")) == (1, 2, 3)
    assert ctx.value("missing", "fallback") == "fallback"


def test_private_object_keys_do_not_collide_with_equal_strings() -> None:
    class Token:
        pass

    token = Token()
    ctx = background().with_value(token, "secret").with_value("Token", "public")

    assert ctx.value(token) == "secret"
    assert ctx.value(Token()) is None


def test_none_key_is_rejected() -> None:
    with pytest.raises(TypeError):
        background().with_value(None, 1)


def test_context_is_immutable() -> None:
    ctx = background().with_value("k", "v")
    with pytest.raises(AttributeError):
        ctx._value = "changed"  # type: ignore[misc]


def test_use_restores_previous_context_on_error() -> None:
    outer = background().with_value("layer", "outer")
    inner = background().with_value("layer", "inner")

    with use(outer):
        with pytest.raises(RuntimeError):
            with use(inner):
                assert current() is inner
                raise RuntimeError("boom")
        assert current() is outer
    assert current() is background()


def test_ambient_context_follows_asyncio_tasks() -> None:
    async def child() -> object:
        return current().value("request")

    async def main() -> object:
        with use(background().with_value("request", 42)):
            return await asyncio.create_task(child())

    assert asyncio.run(main()) == 42


def test_keys_match_only_within_the_same_type() -> None:
    ctx = background().with_value(mock.ANY, "wildcard").with_value(1, "int")

    assert ctx.value("tenant") is None
    assert ctx.value(mock.ANY) == "wildcard"
    assert ctx.value(1.0) is None
    assert ctx.value(1) == "int"
