"""Walk a validated Swagger 2.0 document and build the element tree.

:class:`ElementTreeBuilder` makes a single forward pass over the document in
source order:

1. The root ``api`` category gets the ``info`` title and description.
2. ``host`` (prefixed with the first of ``schemes``) becomes the ``HOST``
   metadata member.
3. ``securityDefinitions``, ``security`` and ``externalDocs`` are reported as
   lost data.
4. Tags decide whether resources are grouped.  Grouping is all-or-nothing:
   one operation with several tags, or one path whose operations disagree on
   their tag, turns it off for the whole document.
5. Every path becomes a :class:`~swagger_refract.elements.Resource`, every
   operation a :class:`~swagger_refract.elements.Transition`, and every
   (status code, example content type) pair an
   :class:`~swagger_refract.elements.HttpTransaction`.

Unsupported features never stop the walk: they are reported as
``DATA_LOST`` annotations and left out of the tree.
"""

from __future__ import annotations

import json
from typing import Any, Iterator, Optional, Union

from swagger_refract.elements import (
    Asset,
    Category,
    Copy,
    HrefVariables,
    HttpHeaders,
    HttpRequest,
    HttpTransaction,
    Member,
    ParseResult,
    Resource,
    SourceMap,
    Transition,
)
from swagger_refract.parser.resolver import REFERENCE_KEY
from swagger_refract.parser.validator import is_extension
from swagger_refract.refract.annotations import AnnotationEmitter, AnnotationKind
from swagger_refract.refract.parameters import member_from_parameter
from swagger_refract.refract.positions import SourceMapper
from swagger_refract.refract.uri_template import build_uri_template

SCHEMA_CONTENT_TYPE = "application/schema+json"
URI_LOCATIONS = ("query", "path")

DocPath = list[Union[str, int]]

# Marks an example-less response, as opposed to an example whose body is null.
_NO_BODY = object()


def schema_asset(schema: Any) -> Asset:
    """Wrap a JSON Schema in a ``messageBodySchema`` asset."""
    return Asset(
        content=json.dumps(schema, separators=(",", ":"), ensure_ascii=False, default=str),
        classes=["messageBodySchema"],
        content_type=SCHEMA_CONTENT_TYPE,
    )


def body_asset(body: Any) -> Asset:
    """Wrap an example body in a ``messageBody`` asset.

    Strings are kept verbatim; anything else is rendered as indented JSON.
    """
    if not isinstance(body, str):
        body = json.dumps(body, indent=2, ensure_ascii=False, default=str)
    return Asset(content=body, classes=["messageBody"])


def create_transaction(method: Optional[str] = None) -> HttpTransaction:
    """Return an empty request/response pair, tagging the request with *method*."""
    transaction = HttpTransaction()
    if method:
        transaction.request = HttpRequest(method=method.upper())
    return transaction


class ElementTreeBuilder:
    """Translate one dereferenced Swagger document into a category tree.

    Args:
        api: The dereferenced document returned by
            :func:`~swagger_refract.parser.validator.validate`.
        result: Parse result receiving the root category.
        emitter: Emitter for ``DATA_LOST`` annotations; it must append to
            the same *result*.
        mapper: Source mapper used for every element's ``source_map``.
    """

    def __init__(
        self,
        api: dict[str, Any],
        result: ParseResult,
        emitter: AnnotationEmitter,
        mapper: SourceMapper,
    ) -> None:
        self.api = api
        self.result = result
        self.emitter = emitter
        self.mapper = mapper
        self.base_path = str(api.get("basePath") or "").rstrip("/")
        self.category = Category(classes=["api"])
        self._target = self.category
        self._group_names: dict[str, str] = {}

    # ------------------------------------------------------------------ #
    # Entry point
    # ------------------------------------------------------------------ #

    def build(self) -> Category:
        """Build the tree, append the root category to the result, and return it."""
        self.result.content.append(self.category)

        self._build_info()
        self._build_host()
        self._report_unsupported_root_fields()

        self._group_names = self._resolve_group_names()
        for href, path_item in self._paths():
            self._build_resource(href, path_item)

        return self.category

    # ------------------------------------------------------------------ #
    # Document level
    # ------------------------------------------------------------------ #

    def _locate(self, path: Optional[DocPath]) -> Optional[SourceMap]:
        if path is None:
            return None
        return self.mapper.locate(path)

    def _build_info(self) -> None:
        info = self.api.get("info")
        if not isinstance(info, dict):
            return

        if info.get("title"):
            self.category.title = str(info["title"])
            self.category.title_source_map = self._locate(["info", "title"])

        if info.get("description"):
            self.category.content.append(
                Copy(
                    content=str(info["description"]),
                    source_map=self._locate(["info", "description"]),
                )
            )

    def _build_host(self) -> None:
        host = self.api.get("host")
        if not host:
            return

        hostname = str(host)
        schemes = self.api.get("schemes")
        if isinstance(schemes, list) and schemes:
            if len(schemes) > 1:
                dropped = ", ".join(str(s) for s in schemes[1:])
                self.emitter.emit(
                    AnnotationKind.DATA_LOST,
                    ["schemes"],
                    "Only the first of the declared schemes will be used to create "
                    f"a hostname; ignoring: {dropped}",
                )
            hostname = f"{schemes[0]}://{hostname}"

        self.category.metadata.append(
            Member(
                key="HOST",
                value=hostname,
                classes=["user"],
                source_map=self._locate(["host"]),
            )
        )

    def _report_unsupported_root_fields(self) -> None:
        messages = {
            "securityDefinitions": "Authentication information is not yet supported",
            "security": "Authentication information is not yet supported",
            "externalDocs": "External documentation is not yet supported",
        }
        for key, message in messages.items():
            if self.api.get(key) is not None:
                self.emitter.emit(AnnotationKind.DATA_LOST, [key], message)

    def _paths(self) -> Iterator[tuple[str, dict[str, Any]]]:
        paths = self.api.get("paths")
        if not isinstance(paths, dict):
            return
        for href, path_item in paths.items():
            if is_extension(href) or not isinstance(path_item, dict):
                continue
            yield href, path_item

    @staticmethod
    def _operations(path_item: dict[str, Any]) -> Iterator[tuple[str, dict[str, Any]]]:
        for method, operation in path_item.items():
            if method in ("parameters", REFERENCE_KEY) or is_extension(method):
                continue
            if isinstance(operation, dict):
                yield method, operation

    # ------------------------------------------------------------------ #
    # Resource groups
    # ------------------------------------------------------------------ #

    def _resolve_group_names(self) -> dict[str, str]:
        """Return the group name of every tagged path, or ``{}`` to disable grouping."""
        names: dict[str, str] = {}
        for href, path_item in self._paths():
            tag: Optional[str] = None
            for _, operation in self._operations(path_item):
                tags = operation.get("tags")
                if not tags:
                    continue
                if not isinstance(tags, list) or len(tags) > 1:
                    return {}
                if tag is None:
                    tag = str(tags[0])
                elif tag != str(tags[0]):
                    return {}
            if tag is not None:
                names[href] = tag
        return names

    def _group(self, name: str) -> Category:
        """Find or create the resource group titled *name*."""
        group = self.category.find_group(name)
        if group is not None:
            return group

        group = Category(classes=["resourceGroup"], title=name)
        tags = self.api.get("tags")
        if isinstance(tags, list):
            for tag in tags:
                if isinstance(tag, dict) and tag.get("name") == name and tag.get("description"):
                    group.content.append(Copy(content=str(tag["description"])))
                    break

        self.category.content.append(group)
        return group

    # ------------------------------------------------------------------ #
    # Resources and transitions
    # ------------------------------------------------------------------ #

    def _build_resource(self, href: str, path_item: dict[str, Any]) -> Resource:
        base: DocPath = ["paths", href]
        resource = Resource(source_map=self._locate(base))

        if path_item.get("x-summary"):
            resource.title = str(path_item["x-summary"])
        if path_item.get("x-description"):
            resource.content.append(Copy(content=str(path_item["x-description"])))

        # An untagged path joins whichever target was used last.
        group_name = self._group_names.get(href)
        if group_name:
            self._target = self._group(group_name)
        self._target.content.append(resource)

        raw_parameters = path_item.get("parameters")
        if not isinstance(raw_parameters, list):
            raw_parameters = []
        path_parameters = [p for p in raw_parameters if isinstance(p, dict)]

        resource.href = build_uri_template(self.base_path, href, path_parameters)

        variables = HrefVariables()
        for index, parameter in enumerate(raw_parameters):
            if not isinstance(parameter, dict):
                continue
            location = parameter.get("in")
            parameter_path: DocPath = [*base, "parameters", index]
            if location in URI_LOCATIONS:
                member = member_from_parameter(parameter)
                member.source_map = self._locate(parameter_path)
                variables.content.append(member)
            elif location == "body":
                self.emitter.emit(
                    AnnotationKind.DATA_LOST,
                    parameter_path,
                    "Path-level body parameters are not yet supported",
                )
            elif location == "formData":
                self.emitter.emit(
                    AnnotationKind.DATA_LOST,
                    parameter_path,
                    "Path-level form data parameters are not yet supported",
                )
        if variables.content:
            resource.href_variables = variables

        for method, operation in self._operations(path_item):
            resource.content.append(
                self._build_transition(resource, href, method, operation, path_parameters)
            )

        return resource

    def _build_transition(
        self,
        resource: Resource,
        href: str,
        method: str,
        operation: dict[str, Any],
        path_parameters: list[dict[str, Any]],
    ) -> Transition:
        base: DocPath = ["paths", href, method]
        transition = Transition(source_map=self._locate(base))

        if operation.get("externalDocs") is not None:
            self.emitter.emit(
                AnnotationKind.DATA_LOST,
                [*base, "externalDocs"],
                "External documentation is not yet supported",
            )

        raw_parameters = operation.get("parameters")
        if not isinstance(raw_parameters, list):
            raw_parameters = []
        indexed = [(i, p) for i, p in enumerate(raw_parameters) if isinstance(p, dict)]

        query_parameters = [p for _, p in indexed if p.get("in") == "query"]
        uri_parameters = [(i, p) for i, p in indexed if p.get("in") in URI_LOCATIONS]
        body_parameters = [p for _, p in indexed if p.get("in") == "body"]
        form_parameters = [p for _, p in indexed if p.get("in") == "formData"]

        if form_parameters:
            self.emitter.emit(
                AnnotationKind.DATA_LOST,
                [*base, "parameters"],
                "Form data parameters are not yet supported",
            )

        # Shared by every operation on the path: the last one wins.
        resource.href = build_uri_template(
            self.base_path, href, path_parameters, query_parameters
        )

        if operation.get("summary"):
            transition.title = str(operation["summary"])
            transition.title_source_map = self._locate([*base, "summary"])

        if operation.get("description"):
            transition.content.append(
                Copy(
                    content=str(operation["description"]),
                    source_map=self._locate([*base, "description"]),
                )
            )

        if operation.get("operationId"):
            transition.relation = str(operation["operationId"])

        if uri_parameters:
            variables = HrefVariables()
            for index, parameter in uri_parameters:
                member = member_from_parameter(parameter)
                member.source_map = self._locate([*base, "parameters", index])
                variables.content.append(member)
            transition.href_variables = variables

        self._build_transactions(transition, base, method, operation, body_parameters)
        return transition

    # ------------------------------------------------------------------ #
    # Transactions
    # ------------------------------------------------------------------ #

    def _build_transactions(
        self,
        transition: Transition,
        base: DocPath,
        method: str,
        operation: dict[str, Any],
        body_parameters: list[dict[str, Any]],
    ) -> None:
        responses = operation.get("responses")
        if not isinstance(responses, dict):
            responses = {}

        if "default" in responses:
            self.emitter.emit(
                AnnotationKind.DATA_LOST,
                [*base, "responses", "default"],
                "Default response is not yet supported",
            )

        relevant: dict[Optional[str], Any] = {
            str(code): response
            for code, response in responses.items()
            if code != "default" and not is_extension(code)
        }

        if not relevant:
            if not body_parameters:
                transition.content.append(create_transaction(method))
                return
            # A synthetic, status-less response keeps the request/response
            # pair for the body parameters.
            relevant = {None: {}}

        for status_code, response in relevant.items():
            if not isinstance(response, dict):
                response = {}

            examples = response.get("examples")
            if not isinstance(examples, dict):
                examples = {}
            bodies: dict[Optional[str], Any] = {
                str(content_type): body
                for content_type, body in examples.items()
                if content_type != "schema"
            }
            if not bodies:
                bodies = {None: _NO_BODY}

            for content_type, body in bodies.items():
                transition.content.append(
                    self._build_transaction(
                        base,
                        method,
                        status_code,
                        response,
                        examples,
                        content_type,
                        body,
                        body_parameters,
                    )
                )

    def _build_transaction(
        self,
        base: DocPath,
        method: str,
        status_code: Optional[str],
        response: dict[str, Any],
        examples: dict[str, Any],
        content_type: Optional[str],
        body: Any,
        body_parameters: list[dict[str, Any]],
    ) -> HttpTransaction:
        response_path: Optional[DocPath] = None
        if status_code is not None:
            response_path = [*base, "responses", status_code]

        transaction = create_transaction(method)
        request, http_response = transaction.request, transaction.response
        transaction.source_map = self._locate(response_path)
        request.source_map = self._locate(base)
        http_response.source_map = self._locate(response_path)

        if response.get("description"):
            http_response.content.append(
                Copy(
                    content=str(response["description"]),
                    source_map=self._locate(
                        response_path and [*response_path, "description"]
                    ),
                )
            )

        example_path = None
        if response_path is not None and content_type is not None:
            example_path = [*response_path, "examples", content_type]

        headers = HttpHeaders()
        if content_type:
            headers.content.append(
                Member(
                    key="Content-Type",
                    value=content_type,
                    source_map=self._locate(example_path),
                )
            )
            http_response.headers = headers

        declared_headers = response.get("headers")
        if isinstance(declared_headers, dict):
            for name, header in declared_headers.items():
                headers.content.append(self._header_member(response_path, str(name), header))
            http_response.headers = headers

        for parameter in body_parameters:
            if parameter.get("schema") is not None:
                request.content.append(schema_asset(parameter["schema"]))

        if body is not _NO_BODY:
            asset = body_asset(body)
            asset.source_map = self._locate(example_path)
            http_response.content.append(asset)

        schema = response.get("schema") or examples.get("schema")
        if schema:
            http_response.content.append(schema_asset(schema))

        if status_code is not None:
            http_response.status_code = status_code

        return transaction

    def _header_member(self, response_path: Optional[DocPath], name: str, header: Any) -> Member:
        if not isinstance(header, dict):
            header = {}

        value: Any = ""
        if isinstance(header.get("enum"), list) and header["enum"]:
            value = header["enum"][0]
        if header.get("default") is not None:
            value = header["default"]
        if not isinstance(value, str):
            value = json.dumps(value, ensure_ascii=False, default=str)

        header_path = response_path and [*response_path, "headers", name]
        member = Member(key=name, value=value, source_map=self._locate(header_path))
        if header.get("description"):
            member.description = str(header["description"])
            member.description_source_map = self._locate(
                header_path and [*header_path, "description"]
            )
        return member
