"""Tests for swagger_refract.parser.composer."""

from __future__ import annotations

import pytest
import yaml

from swagger_refract.exceptions import SourceParseError
from swagger_refract.parser.composer import compose_ast


class TestComposeAst:

    def test_yaml_mapping(self) -> None:
        node = compose_ast("swagger: '2.0'\n")
        assert isinstance(node, yaml.MappingNode)
        key, value = node.value[0]
        assert key.value == "swagger"
        assert value.value == "2.0"

    def test_json_offsets(self) -> None:
        text = '{"a": [1, 2]}'
        node = compose_ast(text)
        key, value = node.value[0]
        assert isinstance(value, yaml.SequenceNode)
        assert text[key.start_mark.index:value.end_mark.index] == '"a": [1, 2]'

    def test_empty_document_raises(self) -> None:
        with pytest.raises(SourceParseError, match="empty"):
            compose_ast("")

    def test_invalid_yaml_raises(self) -> None:
        with pytest.raises(SourceParseError, match="Cannot compose"):
            compose_ast("a: [1, 2")
