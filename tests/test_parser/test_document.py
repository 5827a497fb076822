"""Tests for swagen.parser.document."""

from __future__ import annotations

import textwrap

import pytest

from swagen.exceptions import DocumentSyntaxError, ErrorKind
from swagen.parser.document import parse_document


class TestJson:
    def test_parses_object(self) -> None:
        assert parse_document('{"swagger": "2.0"}') == {"swagger": "2.0"}

    def test_structured_input_is_passed_through(self) -> None:
        document = {"swagger": "2.0"}
        assert parse_document(document) is document

    def test_bytes_are_decoded(self) -> None:
        assert parse_document(b'{"openapi": "3.0.0"}') == {"openapi": "3.0.0"}

    def test_trailing_comma_reports_line(self) -> None:
        text = '{\n    "swagger": "2.0",\n    "paths": {},\n}\n'
        with pytest.raises(DocumentSyntaxError) as exc_info:
            parse_document(text, key="petstore")
        err = exc_info.value
        assert err.kind is ErrorKind.DOCUMENT_SYNTAX
        assert err.profile_key == "petstore"
        assert err.line == 4
        assert err.column is not None
        assert err.detail
        assert str(err).startswith("[petstore] Invalid swagger source at line 4")

    def test_json_is_strict_without_yaml_fallback(self) -> None:
        with pytest.raises(DocumentSyntaxError):
            parse_document("swagger: '2.0'\n")

    @pytest.mark.parametrize("text", ["[]", '"text"', "42", "null"])
    def test_top_level_must_be_object(self, text: str) -> None:
        with pytest.raises(DocumentSyntaxError, match="must be an object"):
            parse_document(text)

    def test_unsupported_input_type(self) -> None:
        with pytest.raises(DocumentSyntaxError, match="expected text"):
            parse_document(42)

    @pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
    def test_non_standard_constants_are_rejected(self, constant: str) -> None:
        text = '{\n    "swagger": "2.0",\n    "x": ' + constant + "\n}"
        with pytest.raises(DocumentSyntaxError) as exc_info:
            parse_document(text, key="api")
        err = exc_info.value
        assert err.profile_key == "api"
        assert err.line == 3
        assert err.column == 10
        assert constant.lstrip("-") in err.detail

    def test_constant_names_inside_strings_are_skipped(self) -> None:
        text = '{"description": "NaN \\" Infinity", "x": NaN}'
        with pytest.raises(DocumentSyntaxError) as exc_info:
            parse_document(text)
        assert exc_info.value.line == 1
        assert exc_info.value.column == text.index("NaN}") + 1

    def test_constant_names_as_string_values_are_accepted(self) -> None:
        assert parse_document('{"x": "NaN"}') == {"x": "NaN"}


class TestYaml:
    def test_parses_with_yaml_hint(self) -> None:
        text = textwrap.dedent("""\
            swagger: "2.0"
            info:
              title: YAML
              version: "1.0"
        """)
        result = parse_document(text, hint="yaml")
        assert result["info"]["title"] == "YAML"

    def test_yaml_error_reports_line(self) -> None:
        text = "swagger: '2.0'\ninfo:\n  title: [unclosed\n"
        with pytest.raises(DocumentSyntaxError) as exc_info:
            parse_document(text, key="api", hint="yaml")
        assert exc_info.value.line is not None
        assert exc_info.value.line >= 3

    def test_empty_yaml_document(self) -> None:
        with pytest.raises(DocumentSyntaxError, match="empty document"):
            parse_document("", hint="yaml")
