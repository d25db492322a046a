"""Swagger input handling -- load, decode, compose, dereference, and validate.

This sub-package turns raw input into the two things the element-tree builder
consumes: a validated, dereferenced Swagger 2.0 document and (for textual
input) the YAML node AST used for source maps.

Typical usage::

    from swagger_refract.parser import compose_ast, decode_document, read_source, validate

    text = read_source("petstore.yaml")
    document = decode_document(text)
    ast = compose_ast(text)
    error, api = validate(document)

Sub-modules:

* :mod:`~swagger_refract.parser.loader` -- I/O layer (URL, file, stdin) and
  JSON/YAML decoding.
* :mod:`~swagger_refract.parser.composer` -- ``yaml.compose`` wrapper.
* :mod:`~swagger_refract.parser.resolver` -- ``$ref`` dereferencing with
  circular-reference detection.
* :mod:`~swagger_refract.parser.validator` -- Swagger 2.0 checks built on
  the Pydantic input models.
"""

from swagger_refract.parser.composer import compose_ast
from swagger_refract.parser.loader import decode_document, read_source
from swagger_refract.parser.validator import validate

__all__ = ["read_source", "decode_document", "compose_ast", "validate"]
