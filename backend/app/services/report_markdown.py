"""Markdown export of a full call report."""

from backend.app.schemas.report import ReportArtifact, StageDeepDive
from backend.app.services.report_contract import DEEP_DIVE_SLOTS

SEPARATOR = "---"


def _cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def _bullets(md_lines: list[str], items: list[str]) -> None:
    for item in items:
        md_lines.append(f"- {item}")
    md_lines.append("")


def _deep_dive(md_lines: list[str], dive: StageDeepDive) -> None:
    md_lines.append(f"### {dive.stage_name} ({dive.score}/100, weight {dive.weight})")
    md_lines.append("")
    if dive.objective:
        md_lines.append(f"**Objective**: {dive.objective}")
        md_lines.append("")
    md_lines.append("**Observed**:")
    _bullets(md_lines, dive.observed)
    md_lines.append("**Coaching**:")
    _bullets(md_lines, dive.coaching)
    if dive.quick_fix:
        md_lines.append(f"> Quick fix: {dive.quick_fix}")
        md_lines.append("")


def render_report_markdown(report: ReportArtifact) -> str:
    """
    Render a ready report as a Markdown document.

    Args:
        report: Normalized report artifact

    Returns:
        Markdown text
    """
    md_lines: list[str] = []
    meta = report.p1_meta_full

    # Title page
    md_lines.append(f"# {report.tp_title}")
    md_lines.append("")
    md_lines.append(f"_{report.tp_subtitle}_")
    md_lines.append("")
    md_lines.append(f"**Deal**: {report.tp_deal}")
    md_lines.append(f"**Session**: {report.tp_session_id}")
    md_lines.append(f"**Date**: {meta.date} {meta.time} ({meta.duration})")
    md_lines.append(f"**Rep**: {meta.rep.name}  ")
    md_lines.append(f"**Prospect**: {meta.prospect.name}")
    md_lines.append("")
    md_lines.append(SEPARATOR)
    md_lines.append("")

    # Executive summary
    md_lines.append("## Executive Summary")
    md_lines.append("")
    md_lines.append(f"**{report.p1_exec_headline}**")
    md_lines.append("")
    md_lines.append(report.p1_exec_synopsis)
    md_lines.append("")
    md_lines.append(f"**Deal health**: {report.p1_deal_health.score}/100 ({report.p3_deal_health_summary.status})")
    md_lines.append("")
    md_lines.append(report.p1_deal_health.rationale)
    md_lines.append("")

    md_lines.append("### Key Points")
    md_lines.append("")
    _bullets(md_lines, report.p1_key_points)

    md_lines.append("### Pains")
    md_lines.append("")
    _bullets(md_lines, report.p1_pains)

    md_lines.append("### Buying Signals")
    md_lines.append("")
    _bullets(md_lines, report.p1_buying_signals)

    md_lines.append("### Action Items")
    md_lines.append("")
    md_lines.append("| ID | Action | Owner | Due | Priority |")
    md_lines.append("|----|--------|-------|-----|----------|")
    for item in report.p1_action_items:
        md_lines.append(
            f"| {_cell(item.id)} | {_cell(item.title)} | {_cell(item.owner)} | {_cell(item.due)} | {item.priority} |"
        )
    md_lines.append("")
    md_lines.append(SEPARATOR)
    md_lines.append("")

    # Discussion highlights
    md_lines.append("## Discussion Highlights")
    md_lines.append("")
    md_lines.append(report.p2_context_snapshot)
    md_lines.append("")
    md_lines.append("### Risks and Concerns")
    md_lines.append("")
    md_lines.append("| Area | Impact | Likelihood | Rationale |")
    md_lines.append("|------|--------|------------|-----------|")
    for risk in report.p2_risks_concerns:
        md_lines.append(f"| {_cell(risk.area)} | {risk.impact} | {risk.likelihood} | {_cell(risk.rationale)} |")
    md_lines.append("")
    md_lines.append(report.p2_short_summary)
    md_lines.append("")
    md_lines.append(SEPARATOR)
    md_lines.append("")

    # Qualification
    md_lines.append("## Qualification")
    md_lines.append("")
    md_lines.append("| BANT | Status | Notes |")
    md_lines.append("|------|--------|-------|")
    for row in report.p3_bant.rows:
        md_lines.append(f"| {_cell(row.key)} | {_cell(row.status)} | {_cell(row.notes)} |")
    md_lines.append("")
    md_lines.append("### Recommendations")
    md_lines.append("")
    md_lines.append(report.p3_short_reco)
    md_lines.append("")
    md_lines.append(SEPARATOR)
    md_lines.append("")

    # Stage overview
    md_lines.append("## Call Stages")
    md_lines.append("")
    md_lines.append("| Stage | Handled | Score | Note |")
    md_lines.append("|-------|---------|-------|------|")
    for stage in report.p4_stage_eval:
        md_lines.append(f"| {_cell(stage.stage)} | {stage.handled} | {stage.score}/10 | {_cell(stage.note)} |")
    md_lines.append("")
    md_lines.append(report.p4_takeaway)
    md_lines.append("")
    md_lines.append(SEPARATOR)
    md_lines.append("")

    # Deep dives
    md_lines.append("## Stage Deep Dives")
    md_lines.append("")
    for slot in DEEP_DIVE_SLOTS:
        for dive in getattr(report, slot):
            _deep_dive(md_lines, dive)
    md_lines.append(SEPARATOR)
    md_lines.append("")

    # Appendix
    md_lines.append("## Appendix")
    md_lines.append("")
    md_lines.append("### Scoring Rubric")
    md_lines.append("")
    _bullets(md_lines, report.apx_scoring_rubric)
    md_lines.append("### Data Flags")
    md_lines.append("")
    _bullets(md_lines, report.apx_data_flags)

    if report.narratives is not None:
        md_lines.append(SEPARATOR)
        md_lines.append("")
        md_lines.append(report.narratives.next_steps_narrative.content)
        md_lines.append("")

    return "\n".join(md_lines)
