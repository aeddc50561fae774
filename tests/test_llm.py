"""Tests for provider JSON parsing and repair."""

import pytest

from app.core.llm import (
    ParseError,
    parse_json_array,
    parse_json_object,
    repair_truncated_json,
)


class TestParseJsonObject:
    def test_plain_object(self):
        assert parse_json_object('{"a": 1}') == {"a": 1}

    def test_fenced_object(self):
        assert parse_json_object('```json\n{"a": 1}\n```') == {"a": 1}

    def test_surrounding_prose(self):
        raw = 'Aquí está el resultado: {"clientName": "Banco"} espero que sirva'
        assert parse_json_object(raw) == {"clientName": "Banco"}

    def test_truncated_payload_is_repaired(self):
        raw = '{"testSteps": [{"action": "Ingresar"}'
        assert parse_json_object(raw) == {"testSteps": [{"action": "Ingresar"}]}

    def test_unrepairable_payload(self):
        with pytest.raises(ParseError):
            parse_json_object('{"a": "sin cerrar')

    def test_not_an_object(self):
        with pytest.raises(ParseError):
            parse_json_object("sin json")

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_json_object("")


class TestRepairTruncatedJson:
    def test_brackets_then_braces(self):
        assert repair_truncated_json('{"a": [1, {"b": 2}') == '{"a": [1, {"b": 2}]}'

    def test_balanced_text_unchanged(self):
        assert repair_truncated_json('{"a": []}') == '{"a": []}'


class TestParseJsonArray:
    def test_array_inside_prose(self):
        assert parse_json_array('Campos:\n[{"name": "email"}]\nListo') == [{"name": "email"}]

    def test_missing_array(self):
        with pytest.raises(ParseError):
            parse_json_array('{"name": "email"}')

