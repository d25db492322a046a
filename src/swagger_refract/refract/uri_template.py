"""Build RFC 6570 URI templates for resources.

Swagger path templates already use ``{name}`` for path parameters, so only
the query part has to be added: every query parameter becomes part of a form
expansion, ``{?a,b}``, or ``{&a,b}`` when the path already contains a
literal query string.
"""

from __future__ import annotations

from typing import Any, Iterable


def build_uri_template(
    base_path: str,
    href: str,
    path_parameters: Iterable[dict[str, Any]] = (),
    query_parameters: Iterable[dict[str, Any]] = (),
) -> str:
    """Return the URI template for *href* under *base_path*.

    Args:
        base_path: The API base path, without a trailing slash.
        href: The Swagger path template (``/pets/{petId}``).
        path_parameters: Parameters declared on the path item; only those
            with ``in: query`` contribute to the template.
        query_parameters: Query parameters declared on the operation.

    Returns:
        The joined template, e.g. ``/v1/pets{?limit,offset}``.  Parameter
        names appear once each, path-item parameters first.

    Example::

        >>> build_uri_template("/v1", "/pets", [], [{"name": "limit", "in": "query"}])
        '/v1/pets{?limit}'
    """
    names: list[str] = []
    for parameter in [*path_parameters, *query_parameters]:
        if parameter.get("in") != "query":
            continue
        name = parameter.get("name")
        if name and name not in names:
            names.append(name)

    full = f"{base_path}{href}"
    if not names:
        return full

    operator = "&" if "?" in full else "?"
    return f"{full}{{{operator}{','.join(names)}}}"
