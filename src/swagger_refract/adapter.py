"""Public entry points: detect Swagger 2.0 input and parse it into an element tree.

Typical usage::

    from swagger_refract import parse

    result = parse(Path("petstore.yaml").read_text(), generate_source_map=True)
    for annotation in result.annotations:
        print(annotation.code, annotation.message)
    api = result.api

:func:`parse` accepts either source text (JSON or YAML) or an already decoded
mapping.  Only text input can produce source maps, because the positions come
from the composed YAML AST of that text.

Failure handling:

* input that cannot be decoded, or that is not an object at the top level,
  yields a result holding a single ``CANNOT_PARSE`` error annotation;
* input that decodes but is not a usable Swagger 2.0 document raises
  :class:`~swagger_refract.exceptions.SwaggerValidationError`, whose
  ``result`` attribute holds the annotations gathered so far;
* every other problem becomes an annotation and the tree is still built.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any, Optional

from swagger_refract.elements import ParseResult
from swagger_refract.exceptions import ReferenceCycleError, SourceParseError
from swagger_refract.models import GlobalConfig
from swagger_refract.parser.composer import compose_ast
from swagger_refract.parser.loader import decode_document, stringify_keys
from swagger_refract.parser.validator import validate
from swagger_refract.refract.annotations import AnnotationEmitter, AnnotationKind
from swagger_refract.refract.builder import ElementTreeBuilder
from swagger_refract.refract.positions import SourceMapper

logger = logging.getLogger(__name__)

NAME = "swagger"

# There is no registered media type for Swagger 2.0.
MEDIA_TYPES = [
    "application/swagger+json",
    "application/swagger+yaml",
]

_DETECT_RE = re.compile(r"\"?swagger\"?:\s*[\"']2\.0[\"']")


def detect(source: Any) -> bool:
    """Return True when *source* looks like a Swagger 2.0 document.

    Text is matched against ``swagger: "2.0"`` (quoted version, optional
    quotes around the key); mappings are checked for ``swagger == "2.0"``.
    """
    if isinstance(source, str):
        return _DETECT_RE.search(source) is not None
    if isinstance(source, Mapping):
        return source.get("swagger") == "2.0"
    return False


def parse(
    source: Any,
    generate_source_map: Optional[bool] = None,
    config: Optional[GlobalConfig] = None,
) -> ParseResult:
    """Translate a Swagger 2.0 document into a :class:`ParseResult`.

    Args:
        source: Source text (JSON or YAML) or a decoded mapping.
        generate_source_map: Attach source maps to elements and annotations.
            ``None`` defers to ``config.generate_source_map``.
        config: Resolved configuration; defaults are used when omitted.

    Returns:
        The parse result: the ``api`` category (unless the input could not
        be decoded) and every annotation, in emission order.

    Raises:
        SwaggerValidationError: If validation leaves no usable document.
            The partial result is available as ``exc.result``.
    """
    config = config or GlobalConfig()
    if generate_source_map is None:
        generate_source_map = config.generate_source_map

    result = ParseResult()
    emitter = AnnotationEmitter(result, docs_url=config.docs_url)

    if isinstance(source, str):
        try:
            document = decode_document(source)
        except SourceParseError as exc:
            logger.debug("Cannot decode input: %s", exc)
            emitter.emit(AnnotationKind.CANNOT_PARSE, None, "Problem loading the input")
            return result
    elif isinstance(source, Mapping):
        document = stringify_keys(dict(source))
    else:
        document = source

    if not isinstance(document, dict):
        emitter.emit(
            AnnotationKind.CANNOT_PARSE,
            None,
            "Problem loading the input: a Swagger document must be an object",
        )
        return result

    ast = None
    if isinstance(source, str):
        try:
            ast = compose_ast(source)
        except SourceParseError as exc:
            logger.debug("Cannot compose AST: %s", exc)
            emitter.emit(
                AnnotationKind.AST_UNAVAILABLE,
                None,
                "Input AST could not be composed, so source maps will not be available",
            )
    else:
        emitter.emit(
            AnnotationKind.AST_UNAVAILABLE,
            None,
            "Source maps are only available with string input",
        )

    def _report_cycle(exc: ReferenceCycleError) -> None:
        emitter.emit(
            AnnotationKind.REFERENCE_CYCLE,
            None,
            f"{exc}; source maps that pass through it are omitted",
        )

    mapper = SourceMapper(ast, enabled=generate_source_map, on_cycle=_report_cycle)
    emitter.mapper = mapper

    # Sane defaults, since these are sometimes left out completely.
    document = {**document}
    document.setdefault("info", {})
    document.setdefault("paths", {})

    error, api = validate(document)
    if error is not None:
        if api is None:
            error.result = result
            raise error
        emitter.emit_validation_details(error.details)

    ElementTreeBuilder(api, result, emitter, mapper).build()
    return result


async def parse_async(
    source: Any,
    generate_source_map: Optional[bool] = None,
    config: Optional[GlobalConfig] = None,
) -> ParseResult:
    """Awaitable form of :func:`parse`.

    The translation runs synchronously inside the coroutine; awaiting it
    completes exactly once, with either the result or the fatal
    :class:`~swagger_refract.exceptions.SwaggerValidationError`.
    """
    return parse(source, generate_source_map=generate_source_map, config=config)
