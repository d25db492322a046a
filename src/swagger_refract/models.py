"""Canonical Pydantic models for configuration and Swagger 2.0 input.

The output element tree lives in :mod:`swagger_refract.elements`; this module
holds every other data shape in the project.  The models fall into three
groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig` and :class:`GlobalConfig`.

**Validation output** -- produced by :mod:`swagger_refract.parser.validator`:
    :class:`ValidationDetail`.

**Swagger 2.0 input models** -- the parts of the Swagger object model the
validator checks before the element tree is built:
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`SwaggerInfo`,
    :class:`SwaggerTag`, :class:`SwaggerParameter`, :class:`SwaggerHeader`,
    :class:`SwaggerResponse`, :class:`SwaggerOperation`, and
    :class:`SwaggerDocument`.

Input models use ``extra="allow"`` so vendor extensions (``x-*`` keys) and
fields the builder does not need survive validation untouched.  The builder
itself walks the plain dictionaries; these models only decide which problems
are reported as ``VALIDATION_ERROR`` annotations.
"""

from __future__ import annotations

import enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# --- Configuration ---


DEFAULT_DOCS_URL = "http://docs.apiary.io/validations/swagger"


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: Literal["auto", "json", "plain", "rich"] = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/swagger-refract/config.json``.

    Loaded and saved by :func:`~swagger_refract.config.load_global_config`
    and :func:`~swagger_refract.config.save_global_config`.  See
    :func:`~swagger_refract.config.resolve_config` for the precedence chain
    that layers project config, environment variables, and CLI flags on top.
    """

    generate_source_map: bool = Field(
        default=False, description="Attach source maps to generated elements"
    )
    docs_url: str = Field(
        default=DEFAULT_DOCS_URL,
        description="Base URL of the documentation linked from annotations",
    )
    strict: bool = Field(
        default=False,
        description="Exit non-zero when the result holds error annotations",
    )
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Validation output ---


class ValidationDetail(BaseModel):
    """One problem found by the validator.

    ``path`` is the location of the problem inside the document, as a list of
    keys and array indices (``["paths", "/pets", "get", "parameters", 0]``).
    ``inner`` holds nested problems that refine this one; consumers walk them
    breadth-first.
    """

    path: list[Union[str, int]] = Field(default_factory=list)
    message: str
    inner: list[ValidationDetail] = Field(default_factory=list)


# --- Swagger 2.0 input ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods allowed as keys of a Swagger 2.0 *Path Item Object*."""

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"


class ParameterLocation(str, enum.Enum):
    """Locations where a Swagger 2.0 parameter can appear (its ``in`` field)."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    FORM_DATA = "formData"
    BODY = "body"


PrimitiveType = Literal["string", "number", "integer", "boolean", "array", "file"]


class SwaggerInfo(BaseModel):
    """The document's *Info Object*."""

    model_config = ConfigDict(extra="allow")

    title: str
    version: str
    description: Optional[str] = None


class SwaggerTag(BaseModel):
    """An entry of the document-level ``tags`` array."""

    model_config = ConfigDict(extra="allow")

    name: str
    description: Optional[str] = None


class SwaggerParameter(BaseModel):
    """A Swagger 2.0 *Parameter Object* (after ``$ref`` resolution).

    Body parameters describe their payload with ``schema``; every other
    location uses ``type``.  Path parameters must be marked required.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str
    location: ParameterLocation = Field(alias="in")
    required: bool = False
    description: Optional[str] = None
    type: Optional[PrimitiveType] = None
    schema_: Optional[dict[str, Any]] = Field(default=None, alias="schema")
    default: Any = None

    @model_validator(mode="after")
    def _check_location_rules(self) -> SwaggerParameter:
        if self.location == ParameterLocation.BODY:
            if self.schema_ is None:
                raise ValueError("Body parameters require a 'schema'")
        elif self.type is None:
            raise ValueError(f"Parameters in '{self.location.value}' require a 'type'")
        if self.location == ParameterLocation.PATH and not self.required:
            raise ValueError("Path parameters must be marked 'required: true'")
        return self


class SwaggerHeader(BaseModel):
    """A response header declaration."""

    model_config = ConfigDict(extra="allow")

    type: PrimitiveType
    description: Optional[str] = None
    enum: Optional[list[Any]] = None
    default: Any = None


class SwaggerResponse(BaseModel):
    """A Swagger 2.0 *Response Object*."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    description: str
    schema_: Optional[dict[str, Any]] = Field(default=None, alias="schema")
    headers: dict[str, SwaggerHeader] = Field(default_factory=dict)
    examples: dict[str, Any] = Field(default_factory=dict)


class SwaggerOperation(BaseModel):
    """A Swagger 2.0 *Operation Object*.

    Extension keys inside ``responses`` are dropped before validation, since
    the response map only holds status codes and ``default``.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    tags: list[str] = Field(default_factory=list)
    summary: Optional[str] = None
    description: Optional[str] = None
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    parameters: list[SwaggerParameter] = Field(default_factory=list)
    responses: dict[str, SwaggerResponse]

    @field_validator("responses", mode="before")
    @classmethod
    def _drop_response_extensions(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {k: v for k, v in value.items() if not str(k).startswith("x-")}
        return value

    @field_validator("responses")
    @classmethod
    def _require_a_response(cls, value: dict[str, SwaggerResponse]) -> dict[str, SwaggerResponse]:
        if not value:
            raise ValueError("At least one response must be declared")
        return value


class SwaggerDocument(BaseModel):
    """Top-level fields of a Swagger 2.0 document.

    ``paths`` is only checked to be a mapping here; the validator checks each
    operation separately so that one bad operation does not hide the rest.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    swagger: str
    info: SwaggerInfo
    host: Optional[str] = None
    base_path: Optional[str] = Field(default=None, alias="basePath")
    schemes: list[Literal["http", "https", "ws", "wss"]] = Field(default_factory=list)
    consumes: list[str] = Field(default_factory=list)
    produces: list[str] = Field(default_factory=list)
    paths: dict[str, Any]
    tags: list[SwaggerTag] = Field(default_factory=list)

    @field_validator("swagger", mode="before")
    @classmethod
    def _version_as_text(cls, value: Any) -> Any:
        # Unquoted ``swagger: 2.0`` in YAML decodes as a float.
        if isinstance(value, float):
            return str(value)
        return value

    @field_validator("host")
    @classmethod
    def _check_host(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and ("://" in value or "/" in value):
            raise ValueError("Host must not include a scheme or a path")
        return value

    @field_validator("base_path")
    @classmethod
    def _check_base_path(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.startswith("/"):
            raise ValueError("basePath must start with '/'")
        return value
