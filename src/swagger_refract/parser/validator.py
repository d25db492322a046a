"""Validate a decoded Swagger 2.0 document and dereference its pointers.

:func:`validate` follows the collaborator contract the element-tree builder
expects::

    error, api = validate(document)

* ``api is None`` -- there is no usable Swagger document (the input is not a
  mapping, or it does not declare ``swagger: "2.0"``).  ``error`` explains
  why and the caller must stop.
* ``error is not None`` and ``api`` is a dict -- the document has problems
  but can still be translated.  Each :class:`ValidationDetail` in
  ``error.details`` becomes one ``VALIDATION_ERROR`` annotation.
* ``error is None`` -- the document passed every check.

The returned ``api`` is a dereferenced copy (see
:mod:`~swagger_refract.parser.resolver`); the input is never mutated.

Checks are performed with the Pydantic input models from
:mod:`swagger_refract.models`.  Top-level fields are validated as one model;
every operation and every path-level parameter list is validated on its own
so a single broken operation does not mask problems elsewhere.  A broken
operation is reported as one detail whose ``inner`` list carries the
individual field errors.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import TypeAdapter, ValidationError

from swagger_refract.exceptions import SwaggerValidationError
from swagger_refract.models import (
    HTTPMethod,
    SwaggerDocument,
    SwaggerOperation,
    SwaggerParameter,
    ValidationDetail,
)
from swagger_refract.parser.resolver import REFERENCE_KEY, resolve_refs

SUPPORTED_VERSION = "2.0"
EXTENSION_PREFIX = "x-"
HTTP_METHODS = frozenset(m.value for m in HTTPMethod)

_PARAMETER_LIST = TypeAdapter(list[SwaggerParameter])


def is_extension(key: Any) -> bool:
    """Return True for vendor extension keys (``x-...``)."""
    return isinstance(key, str) and key.startswith(EXTENSION_PREFIX)


def validate(
    document: Any,
) -> tuple[Optional[SwaggerValidationError], Optional[dict[str, Any]]]:
    """Validate *document* and return ``(error, dereferenced_document)``.

    Args:
        document: The decoded input, normally a dict.

    Returns:
        A tuple whose first item is ``None`` or a
        :class:`~swagger_refract.exceptions.SwaggerValidationError` with
        the problems found, and whose second item is the dereferenced
        document, or ``None`` when no usable document exists.
    """
    if not isinstance(document, dict):
        detail = ValidationDetail(
            path=[], message=f"Expected an object, got {type(document).__name__}"
        )
        return SwaggerValidationError("Swagger document must be an object", [detail]), None

    version = document.get("swagger")
    if version is None or str(version) != SUPPORTED_VERSION:
        detail = ValidationDetail(
            path=["swagger"],
            message=f"Unsupported Swagger version: {version!r}. Only 2.0 is supported.",
        )
        return SwaggerValidationError("Not a Swagger 2.0 document", [detail]), None

    problems: list[ValidationDetail] = []
    api = resolve_refs(document, problems)
    problems.extend(_document_problems(api))
    problems.extend(_path_problems(api))

    if problems:
        noun = "problem" if len(problems) == 1 else "problems"
        return SwaggerValidationError(f"{len(problems)} validation {noun} found", problems), api
    return None, api


def _details(exc: ValidationError, prefix: list[Union[str, int]]) -> list[ValidationDetail]:
    """Convert Pydantic errors into details rooted at *prefix*."""
    return [
        ValidationDetail(path=[*prefix, *error["loc"]], message=error["msg"])
        for error in exc.errors()
    ]


def _document_problems(api: dict[str, Any]) -> list[ValidationDetail]:
    try:
        SwaggerDocument.model_validate(api)
    except ValidationError as exc:
        return _details(exc, [])
    return []


def _path_problems(api: dict[str, Any]) -> list[ValidationDetail]:
    paths = api.get("paths")
    if not isinstance(paths, dict):
        # Already reported by the document model.
        return []

    problems: list[ValidationDetail] = []
    for href, path_item in paths.items():
        if is_extension(href):
            continue
        if not href.startswith("/"):
            problems.append(
                ValidationDetail(path=["paths", href], message="Path templates must start with '/'")
            )
        if not isinstance(path_item, dict):
            problems.append(
                ValidationDetail(path=["paths", href], message="Path items must be objects")
            )
            continue

        if "parameters" in path_item:
            try:
                _PARAMETER_LIST.validate_python(path_item["parameters"])
            except ValidationError as exc:
                problems.extend(_details(exc, ["paths", href, "parameters"]))

        for key, operation in path_item.items():
            if key in ("parameters", REFERENCE_KEY) or is_extension(key):
                continue
            if key not in HTTP_METHODS:
                problems.append(
                    ValidationDetail(
                        path=["paths", href, key],
                        message=f"Unsupported key '{key}' in path item",
                    )
                )
                continue
            try:
                SwaggerOperation.model_validate(operation)
            except ValidationError as exc:
                prefix: list[Union[str, int]] = ["paths", href, key]
                problems.append(
                    ValidationDetail(
                        path=prefix,
                        message=f"Operation {key.upper()} {href} is invalid",
                        inner=_details(exc, prefix),
                    )
                )

    return problems
