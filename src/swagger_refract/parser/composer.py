"""Compose Swagger source text into a PyYAML node tree.

Source maps need positions, which decoded dictionaries no longer have.
``yaml.compose`` stops one step earlier and returns the representation graph:
:class:`yaml.MappingNode`, :class:`yaml.SequenceNode` and
:class:`yaml.ScalarNode` objects whose ``start_mark``/``end_mark`` record
character offsets into the text.  JSON input composes the same way, since
JSON is a subset of YAML flow style.
"""

from __future__ import annotations

import yaml

from swagger_refract.exceptions import SourceParseError


def compose_ast(content: str) -> yaml.Node:
    """Compose *content* into its root YAML node.

    Raises:
        SourceParseError: If the text cannot be composed, or is empty.
    """
    try:
        node = yaml.compose(content, Loader=yaml.SafeLoader)
    except yaml.YAMLError as exc:
        raise SourceParseError(f"Cannot compose source AST: {exc}") from exc

    if node is None:
        raise SourceParseError("Cannot compose source AST: document is empty")
    return node
