"""Unit tests for the report validator."""

import copy

import pytest

from backend.app.services.report_contract import REQUIRED_FIELDS, TABS_REPORT_CONTRACT, TABS_REQUIRED_FIELDS
from backend.app.services.report_normalizer import normalize_report
from backend.app.services.report_validator import Violation, find_violations, validate_report


@pytest.fixture(scope="module")
def complete_report():
    return normalize_report({}, generated_at="2024-01-01T00:00:00+00:00").to_wire()


class TestValidateReport:
    """Test cases for validate_report."""

    def test_complete_report(self, complete_report):
        """Test a normalized report has no missing fields."""
        assert validate_report(complete_report) == []

    def test_missing_top_level_fields(self, complete_report):
        """Test absent and null fields are both reported."""
        report = copy.deepcopy(complete_report)
        del report["tp_title"]
        report["p3_bant"] = None

        assert validate_report(report) == ["tp_title", "p3_bant"]

    def test_missing_nested_field(self, complete_report):
        """Test nested missing fields are reported with dotted paths."""
        report = copy.deepcopy(complete_report)
        del report["p1_deal_health"]["rationale"]

        assert validate_report(report) == ["p1_deal_health.rationale"]

    def test_optional_sections_not_required(self, complete_report):
        """Test narratives and layout hints may be absent."""
        report = copy.deepcopy(complete_report)
        del report["narratives"]
        del report["layout_hints"]

        assert validate_report(report) == []

    @pytest.mark.parametrize("obj", [None, "text", [1, 2]])
    def test_non_object(self, obj):
        """Test a non-object reports every required field."""
        assert validate_report(obj) == REQUIRED_FIELDS

    def test_tabs_contract(self):
        """Test validation against the tab report contract."""
        assert validate_report({}, TABS_REPORT_CONTRACT) == TABS_REQUIRED_FIELDS


class TestFindViolations:
    """Test cases for find_violations."""

    def test_wrong_types_and_ranges(self, complete_report):
        """Test type, range and enum violations are all collected."""
        report = copy.deepcopy(complete_report)
        report["p1_deal_health"]["score"] = 150
        report["p1_action_items"][0]["priority"] = "urgent"
        report["p1_key_points"] = "not a list"

        violations = {str(v) for v in find_violations(report)}

        assert "p1_deal_health.score: out of range [0, 100]" in violations
        assert "p1_action_items[0].priority: expected one of Low, Medium, High" in violations
        assert "p1_key_points: expected array" in violations

    def test_cardinality(self, complete_report):
        """Test minimum item counts are checked."""
        report = copy.deepcopy(complete_report)
        report["p1_action_items"] = report["p1_action_items"][:1]

        violations = find_violations(report)

        assert violations == [Violation("p1_action_items", "expected at least 3 items, got 1")]

    def test_stage_labels(self, complete_report):
        """Test stage evaluation labels and length are checked."""
        report = copy.deepcopy(complete_report)
        report["p4_stage_eval"][0]["stage"] = "Hello"

        assert find_violations(report) == [Violation("p4_stage_eval[0].stage", "expected label 'Greetings'")]

        report["p4_stage_eval"] = report["p4_stage_eval"][:5]
        assert find_violations(report)[0] == Violation("p4_stage_eval", "expected exactly 11 items, got 5")

    def test_bool_is_not_a_number(self, complete_report):
        """Test booleans are rejected in numeric fields."""
        report = copy.deepcopy(complete_report)
        report["p3_deal_health_summary"]["score"] = True

        assert find_violations(report) == [Violation("p3_deal_health_summary.score", "expected number")]

    def test_empty_required_string(self, complete_report):
        """Test whitespace-only required strings are violations."""
        report = copy.deepcopy(complete_report)
        report["tp_deal"] = "   "

        violations = find_violations(report)

        assert violations == [Violation("tp_deal", "empty string")]
        assert not violations[0].is_missing
