"""Pydantic models for markup nodes and their attributes."""

from collections.abc import AsyncIterable
from typing import Annotated, Any, Awaitable, Callable, ClassVar, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .cancellation import CancellationToken


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class _Payload(_Frozen):
    """Allows the single payload field to be passed positionally."""

    payload_field: ClassVar[str] = "value"

    def __init__(self, *args: Any, **data: Any) -> None:
        if len(args) > 1:
            raise TypeError(f"{type(self).__name__} takes a single positional argument")
        if args:
            data[type(self).payload_field] = args[0]
        super().__init__(**data)


class _NodeOperators:
    def __lshift__(self, other: Any) -> "Node":
        """`node << child` composes a node, `node << attr` adds an attribute."""

        from .node_ops import compose, compose_attr

        if isinstance(other, (Attribute, AsyncAttribute)):
            return compose_attr(self, other)
        return compose(self, other)


class HAttribute(_Frozen):
    """A resolved attribute as it will be written into the markup."""

    name: str = Field(..., description="Attribute name, emitted verbatim.")
    value: str = Field(..., description="Unescaped attribute value.")


class Attribute(HAttribute):
    """Attribute known at construction time."""

    kind: Literal["attribute"] = "attribute"

    def resolved(self) -> HAttribute:
        return HAttribute(name=self.name, value=self.value)


class AsyncAttribute(_Payload):
    """Attribute whose value is produced when the tree is rendered."""

    payload_field: ClassVar[str] = "thunk"

    kind: Literal["async_attribute"] = "async_attribute"
    thunk: Callable[[CancellationToken], Awaitable[HAttribute]] = Field(
        ..., description="Called with the drive-time cancellation token."
    )


AttributeNode = Annotated[
    Union[Attribute, AsyncAttribute],
    Field(discriminator="kind"),
]


class Element(_NodeOperators, _Frozen):
    """A tagged node with ordered attributes and ordered children."""

    kind: Literal["element"] = "element"
    tag: str = Field(..., description="Tag name, emitted verbatim.")
    attributes: List["AttributeNode"] = Field(
        default_factory=list, description="Attributes in insertion order."
    )
    children: List["Node"] = Field(
        default_factory=list, description="Children in render order."
    )


class Text(_NodeOperators, _Payload):
    """Escapable text content."""

    kind: Literal["text"] = "text"
    value: str


class Raw(_NodeOperators, _Payload):
    """Trusted markup written without escaping."""

    kind: Literal["raw"] = "raw"
    value: str


class Comment(_NodeOperators, _Payload):
    """Payload of a markup comment."""

    kind: Literal["comment"] = "comment"
    value: str


class Fragment(_NodeOperators, _Payload):
    """Transparent group of nodes that splices into its parent."""

    payload_field: ClassVar[str] = "children"

    kind: Literal["fragment"] = "fragment"
    children: List["Node"] = Field(default_factory=list)


class AsyncNode(_NodeOperators, _Payload):
    """A subtree that is not known yet.

    ``thunk(token)`` returns an awaitable producing exactly one node. It is
    only driven by the renderer (or by tests); composition never awaits it.
    """

    payload_field: ClassVar[str] = "thunk"

    kind: Literal["async_node"] = "async_node"
    thunk: Callable[[CancellationToken], Awaitable["Node"]]


class AsyncSeqNode(_NodeOperators, _Payload):
    """A lazily produced, single-pass sequence of nodes."""

    payload_field: ClassVar[str] = "items"

    kind: Literal["async_seq"] = "async_seq"
    items: AsyncIterable[Any] = Field(
        ..., description="Async iterable of nodes; it can be consumed only once."
    )


Node = Annotated[
    Union[Element, Text, Raw, Comment, Fragment, AsyncNode, AsyncSeqNode],
    Field(discriminator="kind"),
]

LEAF_TYPES = (Text, Raw, Comment)
NODE_TYPES = (Element, Text, Raw, Comment, Fragment, AsyncNode, AsyncSeqNode)
ATTRIBUTE_TYPES = (Attribute, AsyncAttribute)

for _model in (Element, Fragment, AsyncNode):
    _model.model_rebuild()


def is_leaf(node: object) -> bool:
    return isinstance(node, LEAF_TYPES)


__all__ = [
    "ATTRIBUTE_TYPES",
    "AsyncAttribute",
    "AsyncNode",
    "AsyncSeqNode",
    "Attribute",
    "AttributeNode",
    "Comment",
    "Element",
    "Fragment",
    "HAttribute",
    "LEAF_TYPES",
    "NODE_TYPES",
    "Node",
    "Raw",
    "Text",
    "is_leaf",
]
