"""Tests for swagger_refract.refract.positions."""

from __future__ import annotations

import json
import textwrap

import pytest

from swagger_refract.elements import SourceMap
from swagger_refract.exceptions import ReferenceCycleError
from swagger_refract.parser.composer import compose_ast
from swagger_refract.refract.positions import (
    Position,
    SourceMapper,
    resolve_position,
    split_path,
)


def _text(position: Position, source: str) -> str:
    return source[position.start:position.end]


REF_DOCUMENT = json.dumps(
    {
        "swagger": "2.0",
        "info": {"title": "Petstore", "version": "1.0"},
        "paths": {
            "/pets": {
                "get": {
                    "parameters": [
                        {"name": "limit", "in": "query", "type": "integer"},
                        {"name": "tag", "in": "query", "type": "string"},
                    ],
                    "responses": {
                        "200": {
                            "description": "ok",
                            "schema": {"$ref": "#/definitions/Pet"},
                        }
                    },
                }
            }
        },
        "definitions": {
            "Pet": {"type": "object", "properties": {"name": {"type": "string"}}},
        },
    },
    indent=2,
)


# ---------------------------------------------------------------------------
# split_path
# ---------------------------------------------------------------------------


class TestSplitPath:

    def test_dotted(self) -> None:
        assert split_path("info.title") == ["info", "title"]

    def test_empty(self) -> None:
        assert split_path("") == []
        assert split_path([]) == []

    def test_sequence_index_folds_into_previous_segment(self) -> None:
        path = ["paths", "/pets", "get", "parameters", 12]
        assert split_path(path) == ["paths", "/pets", "get", "parameters[12]"]

    def test_sequence_keeps_dots_in_keys(self) -> None:
        assert split_path(["paths", "/v1.0/pets"]) == ["paths", "/v1.0/pets"]


# ---------------------------------------------------------------------------
# resolve_position
# ---------------------------------------------------------------------------


class TestResolvePosition:

    def test_key_value_span_in_json(self) -> None:
        ast = compose_ast(REF_DOCUMENT)
        position = resolve_position(ast, "info.title")
        assert _text(position, REF_DOCUMENT) == '"title": "Petstore"'

    def test_key_value_span_in_yaml(self) -> None:
        source = textwrap.dedent("""\
            info:
              title: Petstore
              version: "1.0"
        """)
        position = resolve_position(compose_ast(source), ["info", "title"])
        assert _text(position, source) == "title: Petstore"

    def test_indexed_last_segment_is_the_item(self) -> None:
        ast = compose_ast(REF_DOCUMENT)
        position = resolve_position(ast, ["paths", "/pets", "get", "parameters", 1])
        item = _text(position, REF_DOCUMENT)
        assert item.startswith("{")
        assert item.endswith("}")
        assert json.loads(item) == {"name": "tag", "in": "query", "type": "string"}

    def test_indexed_middle_segment(self) -> None:
        ast = compose_ast(REF_DOCUMENT)
        position = resolve_position(ast, "paths./pets.get.parameters[0].name")
        assert _text(position, REF_DOCUMENT) == '"name": "limit"'

    def test_reference_is_transparent(self) -> None:
        ast = compose_ast(REF_DOCUMENT)
        through_ref = resolve_position(
            ast, ["paths", "/pets", "get", "responses", "200", "schema", "properties"]
        )
        direct = resolve_position(ast, ["definitions", "Pet", "properties"])
        assert through_ref is not None
        assert through_ref == direct

    def test_missing_key(self) -> None:
        assert resolve_position(compose_ast(REF_DOCUMENT), "info.contact") is None

    def test_index_out_of_range(self) -> None:
        ast = compose_ast(REF_DOCUMENT)
        assert resolve_position(ast, "paths./pets.get.parameters[5]") is None

    def test_descending_into_scalar(self) -> None:
        assert resolve_position(compose_ast(REF_DOCUMENT), "swagger.version") is None

    def test_no_ast(self) -> None:
        assert resolve_position(None, "info.title") is None

    def test_external_reference_is_not_followed(self) -> None:
        source = '{"a": {"$ref": "other.json#/b"}}'
        assert resolve_position(compose_ast(source), "a.b") is None

    def test_reference_cycle_raises(self) -> None:
        source = json.dumps(
            {
                "definitions": {
                    "A": {"$ref": "#/definitions/B"},
                    "B": {"$ref": "#/definitions/A"},
                }
            }
        )
        with pytest.raises(ReferenceCycleError) as exc_info:
            resolve_position(compose_ast(source), "definitions.A.type")
        assert exc_info.value.reference.startswith("#/definitions/")

    def test_reference_into_own_prefix_raises(self) -> None:
        source = json.dumps({"A": {"$ref": "#/A/foo"}})
        with pytest.raises(ReferenceCycleError) as exc_info:
            resolve_position(compose_ast(source), "A.x")
        assert exc_info.value.reference == "#/A/foo"

    def test_recursive_schema_path_resolves(self) -> None:
        source = json.dumps(
            {
                "P": {"$ref": "#/R"},
                "R": {"k": {"$ref": "#/R"}, "name": "leaf"},
            }
        )
        position = resolve_position(compose_ast(source), "P.k.k.name")
        assert source[position.start:position.end] == '"name": "leaf"'

    def test_position_length(self) -> None:
        assert Position(4, 10).length == 6


# ---------------------------------------------------------------------------
# SourceMapper
# ---------------------------------------------------------------------------


class TestSourceMapper:

    def test_locate(self) -> None:
        mapper = SourceMapper(compose_ast(REF_DOCUMENT))
        offset = REF_DOCUMENT.index('"title": "Petstore"')
        assert mapper.locate("info.title") == SourceMap(
            offset=offset, length=len('"title": "Petstore"')
        )

    def test_offsets_count_characters(self) -> None:
        source = '{"title": "Café ☕", "version": "1.0"}'
        span = SourceMapper(compose_ast(source)).locate("version")
        assert source[span.offset:span.offset + span.length] == '"version": "1.0"'

    def test_disabled(self) -> None:
        mapper = SourceMapper(compose_ast(REF_DOCUMENT), enabled=False)
        assert not mapper.active
        assert mapper.locate("info.title") is None

    def test_without_ast(self) -> None:
        mapper = SourceMapper(None)
        assert not mapper.active
        assert mapper.locate("info.title") is None

    def test_cycle_reported_once(self) -> None:
        source = json.dumps({"a": {"$ref": "#/a"}})
        seen: list[ReferenceCycleError] = []
        mapper = SourceMapper(compose_ast(source), on_cycle=seen.append)

        assert mapper.locate("a.b") is None
        assert mapper.locate("a.c") is None
        assert len(seen) == 1
        assert seen[0].reference == "#/a"
