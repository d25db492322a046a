"""Element-tree construction -- positions, annotations, parameters, and the builder.

Sub-modules:

* :mod:`~swagger_refract.refract.positions` -- resolve document paths to
  source ranges, following internal ``$ref`` pointers.
* :mod:`~swagger_refract.refract.annotations` -- the diagnostic catalog and
  the emitter that appends annotations to a parse result.
* :mod:`~swagger_refract.refract.parameters` -- Swagger parameter to
  href-variable member conversion.
* :mod:`~swagger_refract.refract.uri_template` -- resource href templates.
* :mod:`~swagger_refract.refract.builder` -- the document walk itself.
"""

from swagger_refract.refract.annotations import AnnotationEmitter, AnnotationKind
from swagger_refract.refract.builder import ElementTreeBuilder
from swagger_refract.refract.parameters import member_from_parameter
from swagger_refract.refract.positions import Position, SourceMapper, resolve_position
from swagger_refract.refract.uri_template import build_uri_template

__all__ = [
    "AnnotationEmitter",
    "AnnotationKind",
    "ElementTreeBuilder",
    "Position",
    "SourceMapper",
    "build_uri_template",
    "member_from_parameter",
    "resolve_position",
]
