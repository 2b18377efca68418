"""Rules for appending nodes and attributes onto existing nodes.

``compose(a, b)`` is defined for every pair of node kinds and never awaits
anything: when either side is deferred it returns a new deferred node whose
thunk performs the composition once the pending side has been resolved.
Left-associative chains of ``compose`` therefore keep the order in which the
calls were made, however many of the operands are deferred.
"""

from __future__ import annotations

import logging
from functools import reduce
from typing import Any, AsyncIterable, AsyncIterator, Iterable, List

from .cancellation import CancellationToken, ensure_token
from .nodes import (
    ATTRIBUTE_TYPES,
    NODE_TYPES,
    AsyncNode,
    AsyncSeqNode,
    Comment,
    Element,
    Fragment,
    Raw,
    Text,
    is_leaf,
)

logger = logging.getLogger(__name__)


def flatten(node: Any) -> List[Any]:
    """Items a node contributes when spliced into a parent."""

    if isinstance(node, Fragment):
        return list(node.children)
    return [node]


async def _iterate(items: Iterable[Any]) -> AsyncIterator[Any]:
    for item in items:
        yield item


async def _chain(*sources: AsyncIterable[Any]) -> AsyncIterator[Any]:
    for source in sources:
        async for item in source:
            yield item


def _merge_leaves(a: Any, b: Any) -> Any:
    if isinstance(a, Comment) or isinstance(b, Comment):
        return Comment(a.value + b.value)
    if isinstance(a, Raw):
        return Raw(a.value + b.value)
    if isinstance(b, Raw):
        # Text followed by Raw keeps the text and drops the raw payload.
        logger.warning("Raw content %r appended to a Text node was discarded", b.value)
        return a
    return Text(a.value + b.value)


def _check_node(value: Any) -> None:
    if not isinstance(value, NODE_TYPES):
        raise TypeError(f"Expected a markup node, got {type(value).__name__}")


def compose(a: Any, b: Any) -> Any:
    """Append node ``b`` onto node ``a`` and return the resulting node."""

    _check_node(a)
    _check_node(b)

    if isinstance(a, Element):
        return a.model_copy(update={"children": [*a.children, *flatten(b)]})

    if isinstance(a, Fragment):
        return Fragment([*a.children, *flatten(b)])

    if isinstance(a, AsyncNode):

        async def resolve_then_compose(token: CancellationToken) -> Any:
            token.raise_if_cancelled()
            resolved = await a.thunk(token)
            return compose(resolved, b)

        return AsyncNode(resolve_then_compose)

    if isinstance(a, AsyncSeqNode):
        if isinstance(b, AsyncSeqNode):
            return AsyncSeqNode(_chain(a.items, b.items))

        if isinstance(b, AsyncNode):

            async def resolve_then_append(token: CancellationToken) -> Any:
                token.raise_if_cancelled()
                resolved = await b.thunk(token)
                return AsyncSeqNode(_chain(a.items, _iterate([resolved])))

            return AsyncNode(resolve_then_append)

        return AsyncSeqNode(_chain(a.items, _iterate(flatten(b))))

    if is_leaf(b):
        return _merge_leaves(a, b)
    return Fragment([a, *flatten(b)])


def compose_all(node: Any, others: Iterable[Any]) -> Any:
    """Left fold of ``compose`` over ``others``."""

    return reduce(compose, others, node)


def compose_attr(node: Any, attribute: Any) -> Any:
    """Append an attribute onto an element, possibly one that is still deferred.

    Any other node kind is returned unchanged.
    """

    if not isinstance(attribute, ATTRIBUTE_TYPES):
        raise TypeError(f"Expected an attribute node, got {type(attribute).__name__}")

    if isinstance(node, Element):
        return node.model_copy(update={"attributes": [*node.attributes, attribute]})

    if isinstance(node, AsyncNode):

        async def resolve_then_add(token: CancellationToken) -> Any:
            token.raise_if_cancelled()
            resolved = await node.thunk(token)
            return compose_attr(resolved, attribute)

        return AsyncNode(resolve_then_add)

    _check_node(node)
    return node


async def resolve(node: AsyncNode, token: CancellationToken | None = None) -> Any:
    """Drive a deferred node to completion."""

    token = ensure_token(token)
    token.raise_if_cancelled()
    return await node.thunk(token)


async def drain(node: AsyncSeqNode, token: CancellationToken | None = None) -> List[Any]:
    """Consume a deferred sequence into a list, checking ``token`` between items."""

    token = ensure_token(token)
    items: List[Any] = []
    token.raise_if_cancelled()
    async for item in node.items:
        token.raise_if_cancelled()
        items.append(item)
    return items


__all__ = [
    "compose",
    "compose_all",
    "compose_attr",
    "drain",
    "flatten",
    "resolve",
]
