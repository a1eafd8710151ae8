"""Unit tests for parse_report_json."""

import pytest

from backend.app.services.report_parser import parse_report_json


class TestParseReportJson:
    """Test cases for JSON extraction from generator output."""

    def test_plain_json(self):
        """Test direct parse of a JSON object."""
        assert parse_report_json('{"tp_title": "Call"}') == {"tp_title": "Call"}

    def test_dict_passes_through(self):
        """Test an already parsed object is returned as is."""
        raw = {"tp_title": "Call"}
        assert parse_report_json(raw) is raw

    def test_fenced_json(self):
        """Test JSON wrapped in a Markdown code fence."""
        raw = 'Here is the report:\n```json\n{"p1_key_points": ["a", "b"]}\n```\nDone.'
        assert parse_report_json(raw) == {"p1_key_points": ["a", "b"]}

    def test_prose_around_nested_json(self):
        """Test the first-brace/last-brace slice keeps nested objects intact."""
        raw = 'Sure! {"a": {"b": 1}, "c": [1, 2]} Hope this helps.'
        assert parse_report_json(raw) == {"a": {"b": 1}, "c": [1, 2]}

    @pytest.mark.parametrize("raw", [
        "no json here",
        "{ not json }",
        "} reversed {",
        "",
        None,
        42,
        ["a"],
    ])
    def test_unparsable_returns_none(self, raw):
        """Test unparsable input yields None without raising."""
        assert parse_report_json(raw) is None

    def test_non_object_json(self):
        """Test valid JSON that is not an object yields None."""
        assert parse_report_json("[1, 2, 3]") is None
        assert parse_report_json('"text"') is None

    def test_deeply_nested_json(self):
        """Test nesting beyond the recursion limit yields None without raising."""
        depth = 100000
        raw = '{"a": ' + "[" * depth + "]" * depth + "}"

        assert parse_report_json(raw) is None
        assert parse_report_json("Report: " + raw) is None
