"""hox: build markup trees from selectors, compose them, render them lazily."""

from .cancellation import CancellationToken
from .config import ConfigError, RenderOptions, load_render_options
from .dsl import (
    attribute,
    comment,
    deferred,
    deferred_attribute,
    deferred_seq,
    fragment,
    h,
    raw,
    scopable,
    scopable_elements,
    sh,
    text,
)
from .node_ops import compose, compose_all, compose_attr, drain, resolve
from .nodes import (
    AsyncAttribute,
    AsyncNode,
    AsyncSeqNode,
    Attribute,
    AttributeNode,
    Comment,
    Element,
    Fragment,
    HAttribute,
    Node,
    Raw,
    Text,
)
from .rendering import render, render_to_stream, render_to_string
from .selector import ParseError, parse_selector

__version__ = "0.1.0"

__all__ = [
    "AsyncAttribute",
    "AsyncNode",
    "AsyncSeqNode",
    "Attribute",
    "AttributeNode",
    "CancellationToken",
    "Comment",
    "ConfigError",
    "Element",
    "Fragment",
    "HAttribute",
    "Node",
    "ParseError",
    "Raw",
    "RenderOptions",
    "Text",
    "attribute",
    "comment",
    "compose",
    "compose_all",
    "compose_attr",
    "deferred",
    "deferred_attribute",
    "deferred_seq",
    "drain",
    "fragment",
    "h",
    "load_render_options",
    "parse_selector",
    "raw",
    "render",
    "render_to_stream",
    "render_to_string",
    "resolve",
    "scopable",
    "scopable_elements",
    "sh",
    "text",
]
