"""Dereference ``$ref`` JSON Reference pointers in Swagger 2.0 documents.

Swagger documents share definitions through ``$ref`` pointers such as
``{"$ref": "#/definitions/Pet"}`` or ``{"$ref": "#/parameters/limit"}``.  The
element-tree builder reads parameters, responses, and schemas directly, so
the validator hands it a copy of the document in which every resolvable
pointer has been replaced by its target.

Only **internal** references (``#/...``) are followed.  External references
and pointers to missing locations are either raised as
:class:`~swagger_refract.exceptions.SourceParseError` or, when the caller
passes a ``problems`` list, recorded there as
:class:`~swagger_refract.models.ValidationDetail` entries and left in place.

Circular references are detected via a ``seen`` set and left unresolved at
the cycle point, so self-referencing schemas keep their ``$ref`` dict.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Optional, Union

from swagger_refract.exceptions import SourceParseError
from swagger_refract.models import ValidationDetail

logger = logging.getLogger(__name__)

REFERENCE_KEY = "$ref"

PathSegment = Union[str, int]


def resolve_refs(
    spec: dict[str, Any],
    problems: Optional[list[ValidationDetail]] = None,
) -> dict[str, Any]:
    """Resolve all internal ``$ref`` pointers in *spec*.

    Args:
        spec: The decoded Swagger document.
        problems: When given, unresolvable references are appended here and
            left unresolved instead of raising.

    Returns:
        A **new** dictionary (deep copy) with every resolvable pointer
        replaced by its target.

    Raises:
        SourceParseError: If a reference cannot be resolved and no
            ``problems`` list was supplied.

    Example::

        resolved = resolve_refs(document)
        resolved["paths"]["/pets"]["get"]["parameters"][0]["name"]
        # 'limit' -- previously {"$ref": "#/parameters/limit"}
    """
    root = copy.deepcopy(spec)
    return _deep_resolve(root, root, [], None, problems)


def pointer_segments(ref: str) -> list[str]:
    """Split an internal reference into unescaped JSON Pointer segments.

    ``"#/definitions/Pet"`` becomes ``["definitions", "Pet"]``.  RFC 6901
    escaping (``~1`` for ``/`` and ``~0`` for ``~``) is undone.
    """
    body = ref[1:]
    if body.startswith("/"):
        body = body[1:]
    if not body:
        return []
    return [s.replace("~1", "/").replace("~0", "~") for s in body.split("/")]


def _resolve_ref(ref: str, root: dict[str, Any]) -> Any:
    """Return the value a single ``$ref`` string points to.

    Raises:
        SourceParseError: If the reference is external or any pointer segment
            does not exist.
    """
    if not ref.startswith("#"):
        raise SourceParseError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )

    current: Any = root
    for segment in pointer_segments(ref):
        if isinstance(current, dict):
            if segment not in current:
                raise SourceParseError(
                    f"Cannot resolve $ref '{ref}': key '{segment}' not found"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise SourceParseError(
                    f"Cannot resolve $ref '{ref}': invalid array index '{segment}'"
                ) from exc
        else:
            raise SourceParseError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}"
            )

    return current


def _deep_resolve(
    obj: Any,
    root: dict[str, Any],
    path: list[PathSegment],
    seen: Optional[frozenset[str]],
    problems: Optional[list[ValidationDetail]],
) -> Any:
    """Recursively resolve ``$ref`` pointers within *obj*.

    ``path`` is the location of *obj* in the document and is only used to
    report problems.  ``seen`` holds the references currently on the
    resolution stack; a fresh set is built for each branch so sibling
    references do not interfere with each other.
    """
    if seen is None:
        seen = frozenset()

    if isinstance(obj, dict):
        ref = obj.get(REFERENCE_KEY)
        if isinstance(ref, str):
            if ref in seen:
                return obj
            try:
                resolved = _resolve_ref(ref, root)
            except SourceParseError as exc:
                if problems is None:
                    raise
                logger.debug("Leaving %s unresolved at %s: %s", ref, path, exc)
                problems.append(ValidationDetail(path=[*path, REFERENCE_KEY], message=str(exc)))
                return obj
            return _deep_resolve(resolved, root, path, seen | {ref}, problems)

        return {
            key: _deep_resolve(value, root, [*path, key], seen, problems)
            for key, value in obj.items()
        }

    if isinstance(obj, list):
        return [
            _deep_resolve(item, root, [*path, index], seen, problems)
            for index, item in enumerate(obj)
        ]

    return obj
