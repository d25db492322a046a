"""Pydantic models for the refract-style API description element tree.

Every node kind is its own model with a literal ``element`` discriminator and
explicit optional fields, so the set of node kinds is closed and each node's
shape is fixed.  The tree produced by
:class:`~swagger_refract.refract.builder.ElementTreeBuilder` looks like::

    ParseResult
    +-- Category (classes=["api"])
    |   +-- Copy                      (info.description)
    |   +-- Category (classes=["resourceGroup"])
    |   |   +-- Resource
    |   |       +-- Transition
    |   |           +-- HttpTransaction
    |   |               +-- HttpRequest  (method, schema assets)
    |   |               +-- HttpResponse (status code, headers, body assets)
    |   +-- Resource ...
    +-- Annotation ...                (diagnostics, in emission order)

Text fields that can carry their own source position (titles and member
descriptions) have a companion ``*_source_map`` field.  :class:`Annotation`
is frozen once constructed; the other nodes are filled in while the builder
walks the document.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class SourceMap(BaseModel):
    """An ``(offset, length)`` range into the original source text.

    Both values count characters of the decoded text, not UTF-8 bytes.
    """

    model_config = ConfigDict(frozen=True)

    offset: int
    length: int


class Element(BaseModel):
    """Fields shared by every node in the tree."""

    source_map: Optional[SourceMap] = None


class Copy(Element):
    """A block of human-readable text (a description)."""

    element: Literal["copy"] = "copy"
    content: str


# --- Typed value placeholders for href variables ---


class StringValue(Element):
    element: Literal["string"] = "string"
    content: Optional[str] = ""
    default: Any = None


class NumberValue(Element):
    element: Literal["number"] = "number"
    content: Optional[float] = None
    default: Any = None


class BooleanValue(Element):
    element: Literal["boolean"] = "boolean"
    content: Optional[bool] = None
    default: Any = None


class ArrayValue(Element):
    element: Literal["array"] = "array"
    content: list[Any] = Field(default_factory=list)
    default: Any = None


ValuePlaceholder = Union[StringValue, NumberValue, BooleanValue, ArrayValue]


class Member(Element):
    """A key/value pair: an href variable, a header, or a metadata entry.

    ``value`` is plain text for headers and metadata, and a typed placeholder
    for href variables.  The placeholder, not the member, carries the
    parameter's default value.
    """

    element: Literal["member"] = "member"
    key: str
    value: Union[StringValue, NumberValue, BooleanValue, ArrayValue, str, None] = None
    required: bool = False
    description: Optional[str] = None
    description_source_map: Optional[SourceMap] = None
    classes: list[str] = Field(default_factory=list)


class HrefVariables(Element):
    element: Literal["hrefVariables"] = "hrefVariables"
    content: list[Member] = Field(default_factory=list)


class HttpHeaders(Element):
    element: Literal["httpHeaders"] = "httpHeaders"
    content: list[Member] = Field(default_factory=list)

    def get(self, key: str) -> Optional[Member]:
        """Return the first header named *key* (case-insensitive), if any."""
        lowered = key.lower()
        for member in self.content:
            if member.key.lower() == lowered:
                return member
        return None


class Asset(Element):
    """A message body or a message body schema."""

    element: Literal["asset"] = "asset"
    content: str
    classes: list[str] = Field(default_factory=list)
    content_type: Optional[str] = None


class HttpRequest(Element):
    element: Literal["httpRequest"] = "httpRequest"
    method: Optional[str] = None
    content: list[Asset] = Field(default_factory=list)


class HttpResponse(Element):
    element: Literal["httpResponse"] = "httpResponse"
    status_code: Optional[str] = None
    headers: Optional[HttpHeaders] = None
    content: list[Annotated[Union[Copy, Asset], Field(discriminator="element")]] = Field(
        default_factory=list
    )


class HttpTransaction(Element):
    """Exactly one request paired with exactly one response."""

    element: Literal["httpTransaction"] = "httpTransaction"
    request: HttpRequest = Field(default_factory=HttpRequest)
    response: HttpResponse = Field(default_factory=HttpResponse)


class Transition(Element):
    """One HTTP operation on a resource."""

    element: Literal["transition"] = "transition"
    title: Optional[str] = None
    title_source_map: Optional[SourceMap] = None
    relation: Optional[str] = None
    href_variables: Optional[HrefVariables] = None
    content: list[Annotated[Union[Copy, HttpTransaction], Field(discriminator="element")]] = (
        Field(default_factory=list)
    )

    @property
    def transactions(self) -> list[HttpTransaction]:
        return [node for node in self.content if isinstance(node, HttpTransaction)]


class Resource(Element):
    """One path template.

    ``href`` is rewritten by every operation on the path, so its final value
    comes from the last operation in document order.
    """

    element: Literal["resource"] = "resource"
    href: str = ""
    title: Optional[str] = None
    href_variables: Optional[HrefVariables] = None
    content: list[Annotated[Union[Copy, Transition], Field(discriminator="element")]] = Field(
        default_factory=list
    )

    @property
    def transitions(self) -> list[Transition]:
        return [node for node in self.content if isinstance(node, Transition)]


class Category(Element):
    """The API itself (``api``) or a group of resources (``resourceGroup``)."""

    element: Literal["category"] = "category"
    classes: list[str] = Field(default_factory=list)
    title: Optional[str] = None
    title_source_map: Optional[SourceMap] = None
    metadata: list[Member] = Field(default_factory=list)
    content: list[
        Annotated[Union[Copy, Category, Resource], Field(discriminator="element")]
    ] = Field(default_factory=list)

    @property
    def resource_groups(self) -> list[Category]:
        return [
            node
            for node in self.content
            if isinstance(node, Category) and "resourceGroup" in node.classes
        ]

    @property
    def resources(self) -> list[Resource]:
        return [node for node in self.content if isinstance(node, Resource)]

    def find_group(self, title: str) -> Optional[Category]:
        """Return the resource group titled *title*, if one exists."""
        for group in self.resource_groups:
            if group.title == title:
                return group
        return None


class Annotation(Element):
    """A diagnostic attached to the parse result.

    ``severity`` is ``"error"`` or ``"warning"``; ``code`` is stable for a
    given kind of problem, so downstream tools can filter on it.
    """

    model_config = ConfigDict(frozen=True)

    element: Literal["annotation"] = "annotation"
    severity: Literal["error", "warning"]
    code: int
    message: str
    link: Optional[str] = None


class ParseResult(BaseModel):
    """Outcome of one parse: the API category plus every annotation, in order."""

    element: Literal["parseResult"] = "parseResult"
    content: list[Annotated[Union[Category, Annotation], Field(discriminator="element")]] = (
        Field(default_factory=list)
    )

    @property
    def api(self) -> Optional[Category]:
        """The root ``api`` category, or ``None`` when nothing was built."""
        for node in self.content:
            if isinstance(node, Category):
                return node
        return None

    @property
    def annotations(self) -> list[Annotation]:
        return [node for node in self.content if isinstance(node, Annotation)]

    @property
    def errors(self) -> list[Annotation]:
        return [a for a in self.annotations if a.severity == "error"]

    @property
    def warnings(self) -> list[Annotation]:
        return [a for a in self.annotations if a.severity == "warning"]

    def to_dict(self) -> dict[str, Any]:
        """Serialise the result to a JSON-compatible dictionary."""
        return self.model_dump(mode="json", exclude_none=True)


Category.model_rebuild()
ParseResult.model_rebuild()
