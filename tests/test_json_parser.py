"""Tests for JSON extraction from model output."""

import pytest

from resume_builder.utils.json_parser import extract_json, try_parse_structured


class TestExtractJson:
    def test_direct_json(self):
        assert extract_json('{"name": "test"}') == {"name": "test"}

    def test_fenced_code_block(self):
        text = '```json\n{"name": "test"}\n```'
        assert extract_json(text) == {"name": "test"}

    def test_prose_around_object(self):
        text = 'Here is the result: {"score": 90, "pass": true} hope it helps.'
        assert extract_json(text) == {"score": 90, "pass": True}

    def test_truncated_object_repaired(self):
        text = '{"feedback": "good", "strengths": ["a", "b"'
        assert extract_json(text) == {"feedback": "good", "strengths": ["a", "b"]}

    def test_invalid_raises(self):
        with pytest.raises(ValueError, match="Could not extract JSON"):
            extract_json("no json here at all")

    def test_empty_string_raises(self):
        with pytest.raises(ValueError):
            extract_json("")


class TestTryParseStructured:
    def test_all_keys_present(self):
        assert try_parse_structured('{"a": 1, "b": 2}', ("a", "b")) == {"a": 1, "b": 2}

    def test_not_json_returns_none(self):
        assert try_parse_structured("not json", ("a",)) is None

    def test_array_root_returns_none(self):
        assert try_parse_structured("[1, 2, 3]", ()) is None

    def test_scalar_root_returns_none(self):
        assert try_parse_structured("42", ()) is None

    def test_missing_key_returns_none(self):
        assert try_parse_structured('{"a": 1}', ("a", "b")) is None

    def test_extra_keys_allowed(self):
        assert try_parse_structured('{"a": 1, "z": 0}', ("a",)) == {"a": 1, "z": 0}

    def test_fenced_object(self):
        text = 'Sure!\n```json\n{"score": 70}\n```'
        # Opening line is prose, so fence stripping alone fails; brace slice succeeds
        assert try_parse_structured(text, ("score",)) == {"score": 70}
