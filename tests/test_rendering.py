from __future__ import annotations

import asyncio

import pytest
from bs4 import BeautifulSoup

from hox.cancellation import CancellationToken
from hox.config import RenderOptions
from hox.dsl import attribute, comment, deferred, deferred_attribute, h, raw, sh, text
from hox.node_ops import compose_all
from hox.nodes import AsyncNode, AsyncSeqNode, Element, Fragment, Raw, Text
from hox.rendering import render, render_to_stream, render_to_string


def _later(node):
    async def thunk(token: CancellationToken):
        await asyncio.sleep(0)
        return node

    return AsyncNode(thunk)


def _seq(*nodes):
    async def items():
        for node in nodes:
            await asyncio.sleep(0)
            yield node

    return AsyncSeqNode(items())


def test_render_element_with_selector_attributes() -> None:
    html_text = render(h("div#main.card", "Hi & bye"))

    assert html_text == '<div id="main" class="card">Hi &amp; bye</div>'


def test_render_escapes_text_and_attribute_values() -> None:
    html_text = render(h("p", attribute("title", 'say "hi" <now>'), "<script>"))

    assert html_text == '<p title="say &quot;hi&quot; &lt;now&gt;">&lt;script&gt;</p>'


def test_render_raw_and_comment() -> None:
    node = Fragment([raw("<b>trusted</b>"), comment(" note "), text("x")])

    assert render(node) == "<b>trusted</b><!-- note -->x"


def test_render_void_elements() -> None:
    assert render(h("br")) == "<br>"
    assert render(h("img[src=a.png][alt=]")) == '<img src="a.png" alt="">'
    assert render(h("br"), RenderOptions(self_close_void=True)) == "<br/>"


def test_void_element_with_children_is_closed() -> None:
    assert render(h("link", "odd")) == "<link>odd</link>"


def test_render_doctype() -> None:
    html_text = render(h("html", h("body")), RenderOptions(doctype="html"))

    assert html_text == "<!DOCTYPE html><html><body></body></html>"


def test_render_nested_structure() -> None:
    node = h(
        "ul.menu",
        [h("li", h("a[href=/]", "Home")), h("li", h("a[href=/about]", "About"))],
    )

    soup = BeautifulSoup(render(node), "html.parser")

    links = soup.select("ul.menu > li > a")
    assert [(a["href"], a.get_text()) for a in links] == [("/", "Home"), ("/about", "About")]


def test_render_shadow_template() -> None:
    node = sh("x-card", h("slot"))(h("p", "body"))

    soup = BeautifulSoup(render(node), "html.parser")

    card = soup.find("x-card")
    template, paragraph = card.find_all(recursive=False)
    assert template.name == "template"
    assert template["shadowrootmode"] == "open"
    assert template.find("slot") is not None
    assert paragraph.get_text() == "body"


@pytest.mark.asyncio
async def test_deferred_branches_render_in_declaration_order() -> None:
    node = compose_all(
        Element(tag="div"),
        [
            Text("Text Node"),
            Raw("<div>Raw Node</div>"),
            comment("Comment Node"),
            Fragment([Text("Fragment Node"), Text("Fragment Node1")]),
            _later(Text("Async Node")),
            _seq(Text("Async Seq Node"), Text("Async Seq Node1")),
        ],
    )

    html_text = await render_to_string(node)

    assert html_text == (
        "<div>Text Node<div>Raw Node</div><!--Comment Node-->"
        "Fragment NodeFragment Node1Async NodeAsync Seq NodeAsync Seq Node1</div>"
    )


@pytest.mark.asyncio
async def test_deferred_element_with_late_attribute_and_children() -> None:
    node = _later(h("section")) << attribute("id", "late") << text("content")

    html_text = await render_to_string(node)

    assert html_text == '<section id="late">content</section>'


@pytest.mark.asyncio
async def test_async_attributes_render_in_call_order() -> None:
    async def slow(token) -> str:
        await asyncio.sleep(0.01)
        return "slow"

    async def fast(token) -> str:
        return "fast"

    node = h("div", deferred_attribute("data-a", slow), attribute("data-b", "sync"))
    node = node << deferred_attribute("data-c", fast)

    html_text = await render_to_string(node)

    assert html_text == '<div data-a="slow" data-b="sync" data-c="fast"></div>'


@pytest.mark.asyncio
async def test_stream_yields_chunks_before_deferred_content() -> None:
    gate = asyncio.Event()

    async def wait_for_gate(token) -> str:
        await gate.wait()
        return "late"

    stream = render_to_stream(h("main", h("h1", "Title"), deferred(wait_for_gate)))

    chunks = [await stream.__anext__() for _ in range(4)]
    assert "".join(chunks) == "<main><h1>Title</h1>"

    gate.set()
    rest = [chunk async for chunk in stream]
    assert "".join(rest) == "late</main>"


@pytest.mark.asyncio
async def test_cancellation_stops_rendering_and_keeps_emitted_chunks() -> None:
    token = CancellationToken()

    async def cancel_then_return(token: CancellationToken) -> str:
        token.cancel()
        return "first"

    async def never(token: CancellationToken) -> str:
        raise AssertionError("should not be driven after cancellation")

    node = h("div", deferred(cancel_then_return), deferred(never))
    emitted: list[str] = []

    with pytest.raises(asyncio.CancelledError):
        async for chunk in render_to_stream(node, token):
            emitted.append(chunk)

    assert "".join(emitted) == "<div>first"


@pytest.mark.asyncio
async def test_cancelled_token_aborts_sequence() -> None:
    token = CancellationToken()

    async def items():
        yield text("one")
        token.cancel()
        yield text("two")

    node = h("ul", AsyncSeqNode(items()))

    with pytest.raises(asyncio.CancelledError):
        await render_to_string(node, token)


@pytest.mark.asyncio
async def test_thunk_failure_propagates() -> None:
    async def broken(token) -> str:
        raise LookupError("missing record")

    with pytest.raises(LookupError, match="missing record"):
        await render_to_string(h("div", deferred(broken)))


def test_render_rejects_foreign_objects() -> None:
    with pytest.raises(TypeError):
        render(Fragment.model_construct(children=["not a node"]))
