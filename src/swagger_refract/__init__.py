"""swagger-refract -- Translate Swagger 2.0 documents into API element trees.

The package reads a Swagger 2.0 document (JSON or YAML), validates it, and
builds a tree of categories, resources, transitions, and HTTP transactions.
Everything the tree cannot represent is reported as an annotation, and
elements can carry source maps pointing back into the input text.

Typical usage::

    from swagger_refract import parse

    result = parse(text, generate_source_map=True)
    print(result.api.title)
    for annotation in result.annotations:
        print(annotation.code, annotation.message)

Modules:
    adapter: ``parse``, ``parse_async`` and ``detect`` entry points.
    elements: Pydantic models of the output element tree.
    models: Configuration and Swagger input models.
    parser: Loading, decoding, composing, and validation.
    refract: Source positions, annotations, and the tree builder.
    config: XDG-aware configuration resolution.
    app: Typer application and CLI entry point.
"""

__version__ = "0.1.0"

from swagger_refract.adapter import MEDIA_TYPES, NAME, detect, parse, parse_async  # noqa: E402
from swagger_refract.elements import ParseResult  # noqa: E402

__all__ = [
    "MEDIA_TYPES",
    "NAME",
    "ParseResult",
    "__version__",
    "detect",
    "parse",
    "parse_async",
]
