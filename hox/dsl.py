"""Builder helpers for writing node trees by hand.

``h("ul.menu", h("li", "Home"), attribute("role", "list"))`` parses the
selector once (parsed elements are immutable, so they are cached) and then
composes every argument onto it in order.
"""

from __future__ import annotations

import inspect
import types
from collections.abc import AsyncIterable
from functools import lru_cache
from typing import Any, AsyncIterator, Callable

from .cancellation import CancellationToken
from .node_ops import compose, compose_attr
from .nodes import (
    ATTRIBUTE_TYPES,
    NODE_TYPES,
    AsyncAttribute,
    AsyncNode,
    AsyncSeqNode,
    Attribute,
    Comment,
    Element,
    Fragment,
    HAttribute,
    Raw,
    Text,
)
from .selector import parse_selector

SHADOW_TEMPLATE_SELECTOR = "template[shadowrootmode=open]"

SCOPABLE_TAGS = (
    "article",
    "aside",
    "div",
    "footer",
    "header",
    "main",
    "nav",
    "section",
    "span",
)


@lru_cache(maxsize=1024)
def _parsed(selector: str) -> Element:
    return parse_selector(selector)


def as_node(value: Any) -> Any:
    """Coerce a child value into a node."""

    if isinstance(value, NODE_TYPES):
        return value
    if hasattr(value, "__html__"):
        return Raw(str(value.__html__()))
    if isinstance(value, str):
        return Text(value)
    if isinstance(value, (list, tuple, types.GeneratorType)):
        return Fragment([as_node(item) for item in value if item is not None])
    raise TypeError(f"Cannot use {type(value).__name__} as a markup node")


def _add(node: Any, value: Any) -> Any:
    if value is None:
        return node
    if isinstance(value, ATTRIBUTE_TYPES):
        return compose_attr(node, value)
    if isinstance(value, (list, tuple, types.GeneratorType)):
        for item in value:
            node = _add(node, item)
        return node
    if isinstance(value, AsyncIterable):
        return compose(node, deferred_seq(value))
    if inspect.isawaitable(value):
        return compose(node, deferred(value))
    return compose(node, as_node(value))


def h(selector: str, *children: Any) -> Any:
    """Build an element from a selector and compose ``children`` onto it.

    Strings become text nodes, objects with ``__html__`` become raw nodes,
    attribute nodes are added as attributes, sequences are added item by
    item, awaitables and async iterables become deferred nodes.
    """

    node: Any = _parsed(selector)
    for child in children:
        node = _add(node, child)
    return node


def text(value: str) -> Text:
    return Text(value)


def raw(value: str) -> Raw:
    return Raw(value)


def comment(value: str) -> Comment:
    return Comment(value)


def fragment(*children: Any) -> Fragment:
    node: Any = Fragment([])
    for child in children:
        node = _add(node, child)
    return node


def attribute(name: str, value: str) -> Attribute:
    return Attribute(name=name, value=value)


def deferred(source: Any) -> AsyncNode:
    """Wrap an awaitable, or a ``source(token)`` coroutine function, as a node.

    An awaitable can be driven once; pass a function when the node may be
    rendered more than once.
    """

    async def resolve(token: CancellationToken) -> Any:
        pending = source(token) if callable(source) else source
        return as_node(await pending)

    return AsyncNode(resolve)


async def _coerced(source: AsyncIterable[Any]) -> AsyncIterator[Any]:
    async for item in source:
        yield as_node(item)


def deferred_seq(source: AsyncIterable[Any]) -> AsyncSeqNode:
    return AsyncSeqNode(_coerced(source))


def deferred_attribute(name: str, source: Any) -> AsyncAttribute:
    """Attribute whose value comes from an awaitable or ``source(token)``."""

    async def resolve(token: CancellationToken) -> HAttribute:
        pending = source(token) if callable(source) else source
        return HAttribute(name=name, value=str(await pending))

    return AsyncAttribute(resolve)


def _shadow_template(shadow: Any) -> Element:
    return h(SHADOW_TEMPLATE_SELECTOR, shadow)


def sh(selector: str, template: Any) -> Callable[..., Any]:
    """Return a constructor for ``selector`` elements carrying a fixed shadow root.

    The declarative shadow template comes first, caller children follow it.
    """

    wrapper = _shadow_template(template)

    def build(*children: Any) -> Any:
        return h(selector, wrapper, *children)

    return build


def scopable(selector: str) -> Callable[..., Any]:
    """Return a constructor taking the shadow subtree as its first argument."""

    def build(shadow: Any, *children: Any) -> Any:
        return h(selector, _shadow_template(shadow), *children)

    return build


scopable_elements = types.SimpleNamespace(**{tag: scopable(tag) for tag in SCOPABLE_TAGS})


__all__ = [
    "as_node",
    "attribute",
    "comment",
    "deferred",
    "deferred_attribute",
    "deferred_seq",
    "fragment",
    "h",
    "raw",
    "scopable",
    "scopable_elements",
    "sh",
    "text",
]
