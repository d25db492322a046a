"""Map logical document paths back to ranges of the original source text.

A path names a location the way the builder sees it, for example
``paths./pets.get.responses.200`` or, in sequence form,
``["paths", "/pets", "get", "parameters", 0]``.  :func:`resolve_position`
walks the composed YAML node tree (see
:mod:`~swagger_refract.parser.composer`) along that path and returns the
character range the location occupies:

* for a plain last segment, the range runs from the start of the key to the
  end of its value (``"title": "X"``);
* for an indexed last segment (``parameters[1]``), the range is exactly the
  span of that array item.

Internal ``$ref`` pointers are followed transparently.  When a mapping on the
way holds a ``$ref`` key instead of the wanted key, the walk restarts at the
document root with the pointer's segments followed by the segment that was
being looked up, so ``...schema.properties`` through
``{"$ref": "#/definitions/Pet"}`` lands on ``definitions.Pet.properties``.
External pointers are logged and not followed.

Each restart is remembered as ``(pointer, segment)`` together with the
number of segments queued behind it.  Restarting through the same pair again
before any of those queued segments were consumed means the walk makes no
progress, and raises :class:`~swagger_refract.exceptions.ReferenceCycleError`.
A pointer into its own prefix is caught this way even though the queue keeps
growing, while a finite path through a recursive schema still resolves.
"""

from __future__ import annotations

import logging
import re
from collections import deque
from typing import Callable, NamedTuple, Optional, Sequence, Union

import yaml

from swagger_refract.elements import SourceMap
from swagger_refract.exceptions import ReferenceCycleError
from swagger_refract.parser.resolver import REFERENCE_KEY, pointer_segments

logger = logging.getLogger(__name__)

_INDEXED_SEGMENT_RE = re.compile(r"^(.*)\[(\d+)\]$")

PathLike = Union[str, Sequence[Union[str, int]]]


class Position(NamedTuple):
    """A ``[start, end)`` range of character offsets."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


def split_path(path: PathLike) -> list[str]:
    """Normalise *path* into a list of string segments.

    Dotted strings are split on ``.``.  In sequence form, an integer segment
    becomes the index suffix of the segment before it, so
    ``["parameters", 0]`` yields ``["parameters[0]"]``.
    """
    if isinstance(path, str):
        return path.split(".") if path else []

    segments: list[str] = []
    for segment in path:
        if isinstance(segment, int) and not isinstance(segment, bool) and segments:
            segments[-1] = f"{segments[-1]}[{segment}]"
        else:
            segments.append(str(segment))
    return segments


def _split_segment(segment: str) -> tuple[str, Optional[int]]:
    match = _INDEXED_SEGMENT_RE.match(segment)
    if match:
        return match.group(1), int(match.group(2))
    return segment, None


def _item(node: yaml.Node, index: int) -> Optional[yaml.Node]:
    if isinstance(node, yaml.SequenceNode) and 0 <= index < len(node.value):
        return node.value[index]
    return None


def _scalar(node: yaml.Node) -> Optional[str]:
    if isinstance(node, yaml.ScalarNode):
        return node.value
    return None


def resolve_position(ast: Optional[yaml.Node], path: PathLike) -> Optional[Position]:
    """Return the source range of *path* in *ast*, or ``None`` if not found.

    Args:
        ast: Root node returned by
            :func:`~swagger_refract.parser.composer.compose_ast`.
        path: Dotted string or sequence of segments; segments may carry a
            zero-based ``[N]`` index suffix.

    Raises:
        ReferenceCycleError: If internal references form a cycle along the
            path.
    """
    pending = deque(split_path(path))
    if ast is None or not pending:
        return None

    node = ast
    position: Optional[Position] = None
    # (reference, segment) -> number of segments still pending behind the restart
    restarts: dict[tuple[str, str], int] = {}

    while pending:
        segment = pending.popleft()
        remaining = len(pending)
        restarts = {state: depth for state, depth in restarts.items() if depth <= remaining}
        key, index = _split_segment(segment)
        if not isinstance(node, yaml.MappingNode):
            return None

        next_node: Optional[yaml.Node] = None
        for key_node, value_node in node.value:
            name = _scalar(key_node)

            if name == key:
                if pending:
                    next_node = value_node if index is None else _item(value_node, index)
                elif index is not None:
                    next_node = _item(value_node, index)
                    if next_node is not None:
                        position = Position(
                            next_node.start_mark.index, next_node.end_mark.index
                        )
                else:
                    next_node = key_node
                    position = Position(key_node.start_mark.index, value_node.end_mark.index)
                break

            if name == REFERENCE_KEY:
                ref = _scalar(value_node)
                if ref is None:
                    continue
                if ref.startswith("#"):
                    state = (ref, segment)
                    if state in restarts:
                        raise ReferenceCycleError(ref, path)
                    restarts[state] = remaining
                    pending.extendleft(reversed([*pointer_segments(ref), segment]))
                    next_node = ast
                    break
                logger.info("External reference %s not supported for source maps", ref)

        if next_node is None:
            return None
        node = next_node

    return position


class SourceMapper:
    """Turn document paths into :class:`~swagger_refract.elements.SourceMap` values.

    Source maps are produced only while the mapper is :attr:`active`, i.e.
    source maps were requested and an AST is available.  Unresolvable paths
    and degenerate ranges simply yield ``None``.  A reference cycle also
    yields ``None`` and is reported once per pointer through *on_cycle*.

    Args:
        ast: The composed source AST, or ``None``.
        enabled: Whether source maps were requested.
        on_cycle: Callback receiving the first
            :class:`~swagger_refract.exceptions.ReferenceCycleError` seen
            for each pointer.
    """

    def __init__(
        self,
        ast: Optional[yaml.Node],
        enabled: bool = True,
        on_cycle: Optional[Callable[[ReferenceCycleError], None]] = None,
    ) -> None:
        self.ast = ast
        self.enabled = enabled
        self.on_cycle = on_cycle
        self._reported_cycles: set[str] = set()

    @property
    def active(self) -> bool:
        return self.enabled and self.ast is not None

    def locate(self, path: PathLike) -> Optional[SourceMap]:
        if not self.active:
            return None

        try:
            position = resolve_position(self.ast, path)
        except ReferenceCycleError as exc:
            logger.warning("%s (path: %s)", exc, path)
            if exc.reference not in self._reported_cycles:
                self._reported_cycles.add(exc.reference)
                if self.on_cycle is not None:
                    self.on_cycle(exc)
            return None

        if position is None or position.end <= position.start:
            return None
        return SourceMap(offset=position.start, length=position.length)
