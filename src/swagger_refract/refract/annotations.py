"""Diagnostic catalog and emitter.

Every problem the translator reports is an
:class:`~swagger_refract.elements.Annotation` with a stable numeric code, so
downstream tools can filter on it without parsing messages:

==================  ========  ====  =======================
Kind                Severity  Code  Documentation fragment
==================  ========  ====  =======================
CANNOT_PARSE        error     1     ``yaml-parser``
AST_UNAVAILABLE     warning   2     ``yaml-parser``
DATA_LOST           warning   3     ``refract-not-supported``
VALIDATION_ERROR    warning   4     ``swagger-validation``
REFERENCE_CYCLE     warning   5     ``yaml-parser``
==================  ========  ====  =======================
"""

from __future__ import annotations

import enum
from collections import deque
from typing import Iterable, Optional

from swagger_refract.elements import Annotation, ParseResult
from swagger_refract.models import DEFAULT_DOCS_URL, ValidationDetail
from swagger_refract.refract.positions import PathLike, SourceMapper


class AnnotationKind(enum.Enum):
    """The fixed set of diagnostic kinds."""

    CANNOT_PARSE = ("error", 1, "yaml-parser")
    AST_UNAVAILABLE = ("warning", 2, "yaml-parser")
    DATA_LOST = ("warning", 3, "refract-not-supported")
    VALIDATION_ERROR = ("warning", 4, "swagger-validation")
    REFERENCE_CYCLE = ("warning", 5, "yaml-parser")

    def __init__(self, severity: str, code: int, fragment: Optional[str]) -> None:
        self.severity = severity
        self.code = code
        self.fragment = fragment


class AnnotationEmitter:
    """Build annotations and append them to a parse result.

    Args:
        result: The parse result that collects every annotation.
        mapper: Source mapper used to position annotations that name a
            document path.  ``None`` disables positioning.
        docs_url: Base URL for documentation links; the kind's fragment is
            appended after ``#``.
    """

    def __init__(
        self,
        result: ParseResult,
        mapper: Optional[SourceMapper] = None,
        docs_url: str = DEFAULT_DOCS_URL,
    ) -> None:
        self.result = result
        self.mapper = mapper
        self.docs_url = docs_url

    def emit(
        self, kind: AnnotationKind, path: Optional[PathLike], message: str
    ) -> Annotation:
        """Create an annotation of *kind*, append it, and return it."""
        source_map = None
        if path and self.mapper is not None:
            source_map = self.mapper.locate(path)

        annotation = Annotation(
            severity=kind.severity,
            code=kind.code,
            message=message,
            link=f"{self.docs_url}#{kind.fragment}" if kind.fragment else None,
            source_map=source_map,
        )
        self.result.content.append(annotation)
        return annotation

    def emit_validation_details(self, details: Iterable[ValidationDetail]) -> list[Annotation]:
        """Emit one ``VALIDATION_ERROR`` per detail, nested details included.

        Details are visited breadth-first: all top-level details first, then
        their ``inner`` details level by level.
        """
        emitted: list[Annotation] = []
        queue: deque[list[ValidationDetail]] = deque([list(details)])
        while queue:
            for detail in queue.popleft():
                emitted.append(
                    self.emit(AnnotationKind.VALIDATION_ERROR, detail.path or None, detail.message)
                )
                if detail.inner:
                    queue.append(detail.inner)
        return emitted
