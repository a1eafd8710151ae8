"""Unit tests for the Markdown report export."""

from backend.app.services.report_contract import CANONICAL_STAGES
from backend.app.services.report_markdown import render_report_markdown
from backend.app.services.report_normalizer import normalize_report


class TestRenderReportMarkdown:
    """Test cases for render_report_markdown."""

    def test_sections(self):
        """Test the document carries the report sections in page order."""
        report = normalize_report({"tp_title": "Acme discovery", "tp_sessionId": "s1"})

        markdown = render_report_markdown(report)

        assert markdown.startswith("# Acme discovery\n")
        assert "**Session**: s1" in markdown
        headings = [
            "## Executive Summary",
            "## Discussion Highlights",
            "## Qualification",
            "## Call Stages",
            "## Stage Deep Dives",
            "## Appendix",
            "## Next Steps Action Plan",
        ]
        positions = [markdown.index(heading) for heading in headings]
        assert positions == sorted(positions)

    def test_tables(self):
        """Test action items, BANT and stages are rendered as table rows."""
        report = normalize_report({
            "p1_action_items": [
                {"id": "x1", "title": "Send proposal | pricing", "owner": "Rep", "due": "Friday", "priority": "High"}
            ],
        })

        markdown = render_report_markdown(report)

        assert "| x1 | Send proposal \\| pricing | Rep | Friday | High |" in markdown
        assert "| Budget | Unknown | Not discussed |" in markdown
        for stage in CANONICAL_STAGES:
            assert f"| {stage} | no | 0/10 | Not assessed |" in markdown

    def test_deep_dives(self):
        """Test every deep-dive item gets a heading."""
        report = normalize_report({
            "p5_stage_a": [{"stageName": "Opening", "score": 80, "weight": 15, "quickFix": "Smile more"}],
        })

        markdown = render_report_markdown(report)

        assert "### Opening (80/100, weight 15)" in markdown
        assert "> Quick fix: Smile more" in markdown
        assert "### Stage L (0/100, weight 10)" in markdown

    def test_without_narratives(self):
        """Test a report without narratives ends with the appendix."""
        report = normalize_report({})
        report.narratives = None

        markdown = render_report_markdown(report)

        assert "## Next Steps Action Plan" not in markdown
        assert markdown.rstrip().endswith("- Data quality flag")
