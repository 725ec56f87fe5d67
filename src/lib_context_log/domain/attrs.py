"""Typed key/value attributes and the coercion rules for loose arguments.

Purpose
-------
Give every record and every derived logger one shape for its structured data:
an ordered tuple of :class:`Attr`. Call sites may pass pre-built attributes,
alternating ``key, value`` arguments, or keyword fields; :func:`to_attrs`
folds all three into attributes without ever rejecting input.

Contents
--------
* :data:`BAD_KEY` – key used for arguments that cannot be paired.
* :class:`Attr` / :class:`Group` – immutable attribute and group value.
* :func:`attr`, :func:`string`, :func:`integer`, :func:`floating`,
  :func:`boolean`, :func:`duration`, :func:`group` – typed constructors.
* :func:`to_attrs` – coercion of ``*args`` / ``**fields``.
* :func:`nest_under` – wrap attributes in a chain of groups.
* :func:`flatten_pairs` – ordered dotted ``(key, value)`` pairs.
* :func:`flatten` / :func:`nest` – render attributes as dotted or nested dicts.

Coercion policy
---------------
Positional arguments are scanned left to right. An :class:`Attr` is taken as
is; a ``str`` takes the next item as its value; a trailing ``str`` without a
value and any non-``str`` item are tagged with :data:`BAD_KEY`. Keyword fields
follow the positional ones. Nothing raises.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Final, Iterable, Mapping, Sequence

BAD_KEY: Final[str] = "!BADKEY"


@dataclass(frozen=True, slots=True)
class Group:
    """Ordered attributes that render under the key of the enclosing :class:`Attr`."""

    attrs: tuple["Attr", ...] = ()

    def __bool__(self) -> bool:
        return bool(self.attrs)


@dataclass(frozen=True, slots=True)
class Attr:
    """A single key/value pair attached to a record or to a derived logger.

    Examples
    --------
    >>> Attr("user", "ada")
    Attr(key='user', value='ada')
    >>> group("http", method="GET").is_group()
    True
    """

    key: str
    value: Any

    def is_group(self) -> bool:
        return isinstance(self.value, Group)


def attr(key: str, value: Any) -> Attr:
    """Return an attribute carrying *value* unchanged."""

    return Attr(key, value)


def string(key: str, value: Any) -> Attr:
    return Attr(key, str(value))


def integer(key: str, value: Any) -> Attr:
    return Attr(key, int(value))


def floating(key: str, value: Any) -> Attr:
    return Attr(key, float(value))


def boolean(key: str, value: Any) -> Attr:
    return Attr(key, bool(value))


def duration(key: str, value: timedelta | float) -> Attr:
    """Return a duration attribute; plain numbers are taken as seconds.

    >>> duration("took", 1.5).value
    datetime.timedelta(seconds=1, microseconds=500000)
    """

    if isinstance(value, timedelta):
        return Attr(key, value)
    return Attr(key, timedelta(seconds=value))


def group(key: str, *args: Any, **fields: Any) -> Attr:
    """Return a group attribute whose members are coerced like :func:`to_attrs`.

    >>> flatten([group("req", "id", 7, path="/")])
    {'req.id': 7, 'req.path': '/'}
    """

    return Attr(key, Group(to_attrs(args, fields)))


def to_attrs(args: Sequence[Any], fields: Mapping[str, Any] | None = None) -> tuple[Attr, ...]:
    """Fold alternating ``key, value`` arguments and keyword *fields* into attributes.

    Examples
    --------
    >>> to_attrs(["user", "ada", "retries", 3])
    (Attr(key='user', value='ada'), Attr(key='retries', value=3))
    >>> to_attrs(["dangling"])
    (Attr(key='!BADKEY', value='dangling'),)
    >>> to_attrs([42, "k", "v"], {"extra": True})
    (Attr(key='!BADKEY', value=42), Attr(key='k', value='v'), Attr(key='extra', value=True))
    """

    collected: list[Attr] = []
    index = 0
    while index < len(args):
        item = args[index]
        if isinstance(item, Attr):
            collected.append(item)
            index += 1
        elif isinstance(item, str):
            if index + 1 >= len(args):
                collected.append(Attr(BAD_KEY, item))
                break
            collected.append(Attr(item, args[index + 1]))
            index += 2
        else:
            collected.append(Attr(BAD_KEY, item))
            index += 1
    if fields:
        collected.extend(Attr(key, value) for key, value in fields.items())
    return tuple(collected)


def nest_under(groups: Sequence[str], attrs: tuple[Attr, ...]) -> tuple[Attr, ...]:
    """Wrap *attrs* in the chain of *groups*, outermost first.

    >>> nest_under(("a", "b"), (Attr("k", 1),))
    (Attr(key='a', value=Group(attrs=(Attr(key='b', value=Group(attrs=(Attr(key='k', value=1),))),))),)
    """

    if not attrs:
        return ()
    nested = attrs
    for name in reversed(groups):
        nested = (Attr(name, Group(nested)),)
    return nested


def flatten_pairs(attrs: Iterable[Attr], prefix: str = "") -> list[tuple[str, Any]]:
    """Return attributes as ordered ``(dotted_key, value)`` pairs.

    Empty groups are dropped and groups with an empty key are inlined. Repeated
    keys are all kept, in emission order.

    >>> flatten_pairs([Attr("k", 1), group("g", k="v"), Attr("k", 2)])
    [('k', 1), ('g.k', 'v'), ('k', 2)]
    """

    pairs: list[tuple[str, Any]] = []
    for item in attrs:
        if item.is_group():
            inner = f"{prefix}{item.key}." if item.key else prefix
            pairs.extend(flatten_pairs(item.value.attrs, inner))
        else:
            pairs.append((f"{prefix}{item.key}", item.value))
    return pairs


def flatten(attrs: Iterable[Attr], prefix: str = "") -> dict[str, Any]:
    """Return attributes as a flat mapping with dotted group keys.

    Same traversal as :func:`flatten_pairs`; for duplicate keys the later
    attribute wins.
    """

    return dict(flatten_pairs(attrs, prefix))


def nest(attrs: Iterable[Attr]) -> dict[str, Any]:
    """Return attributes as nested dictionaries, one level per group.

    >>> nest([Attr("a", 1), group("g", k="v"), group("g", j=2), group("empty")])
    {'a': 1, 'g': {'k': 'v', 'j': 2}}
    """

    tree: dict[str, Any] = {}
    for item in attrs:
        if not item.is_group():
            tree[item.key] = item.value
            continue
        if not item.value:
            continue
        members = nest(item.value.attrs)
        if not item.key:
            tree.update(members)
            continue
        existing = tree.get(item.key)
        if isinstance(existing, dict):
            tree[item.key] = {**existing, **members}
        else:
            tree[item.key] = members
    return tree
