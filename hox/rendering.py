"""Render node trees to markup, resolving deferred branches where they stand."""

from __future__ import annotations

import asyncio
import html
import logging
from typing import Any, AsyncIterator, List, Sequence

from .cancellation import CancellationToken, ensure_token
from .config import RenderOptions
from .nodes import (
    AsyncAttribute,
    AsyncNode,
    AsyncSeqNode,
    Comment,
    Element,
    Fragment,
    HAttribute,
    Raw,
    Text,
)

logger = logging.getLogger(__name__)

_DEFAULT_OPTIONS = RenderOptions()


async def _resolve_attribute(attribute: Any, token: CancellationToken) -> HAttribute:
    if isinstance(attribute, AsyncAttribute):
        token.raise_if_cancelled()
        return await attribute.thunk(token)
    return attribute.resolved()


async def _render_attrs(attributes: Sequence[Any], token: CancellationToken) -> str:
    if not attributes:
        return ""
    parts: List[str] = []
    for attribute in attributes:
        resolved = await _resolve_attribute(attribute, token)
        parts.append(f'{resolved.name}="{html.escape(resolved.value, quote=True)}"')
    return " " + " ".join(parts)


async def _render_node(
    node: Any, token: CancellationToken, options: RenderOptions
) -> AsyncIterator[str]:
    if isinstance(node, Text):
        yield html.escape(node.value)
    elif isinstance(node, Raw):
        # Raw markup is trusted as-is.
        yield node.value
    elif isinstance(node, Comment):
        yield f"<!--{node.value}-->"
    elif isinstance(node, Element):
        attrs = await _render_attrs(node.attributes, token)
        if node.tag in options.void_elements and not node.children:
            yield f"<{node.tag}{attrs}/>" if options.self_close_void else f"<{node.tag}{attrs}>"
            return
        yield f"<{node.tag}{attrs}>"
        for child in node.children:
            async for chunk in _render_node(child, token, options):
                yield chunk
        yield f"</{node.tag}>"
    elif isinstance(node, Fragment):
        for child in node.children:
            async for chunk in _render_node(child, token, options):
                yield chunk
    elif isinstance(node, AsyncNode):
        token.raise_if_cancelled()
        resolved = await node.thunk(token)
        logger.debug("Resolved deferred node into %s", type(resolved).__name__)
        async for chunk in _render_node(resolved, token, options):
            yield chunk
    elif isinstance(node, AsyncSeqNode):
        token.raise_if_cancelled()
        async for item in node.items:
            token.raise_if_cancelled()
            async for chunk in _render_node(item, token, options):
                yield chunk
    else:
        raise TypeError(f"Cannot render {type(node).__name__}")


async def render_to_stream(
    node: Any,
    token: CancellationToken | None = None,
    options: RenderOptions | None = None,
) -> AsyncIterator[str]:
    """Yield markup chunks for ``node`` in document order.

    Deferred nodes and attributes are awaited when reached. Cancelling
    ``token`` stops the stream with ``asyncio.CancelledError``; chunks already
    yielded remain valid.
    """

    token = ensure_token(token)
    options = options or _DEFAULT_OPTIONS
    if options.doctype:
        yield f"<!DOCTYPE {options.doctype}>"
    try:
        async for chunk in _render_node(node, token, options):
            yield chunk
    except asyncio.CancelledError:
        logger.debug("Rendering cancelled")
        raise


async def render_to_string(
    node: Any,
    token: CancellationToken | None = None,
    options: RenderOptions | None = None,
) -> str:
    chunks = [chunk async for chunk in render_to_stream(node, token, options)]
    return "".join(chunks)


def render(node: Any, options: RenderOptions | None = None) -> str:
    """Synchronous wrapper around :func:`render_to_string`."""

    return asyncio.run(render_to_string(node, options=options))


__all__ = ["render", "render_to_stream", "render_to_string"]
