"""
Prompt assembly for report generation.

Builds the fixed, contract-aware system instructions and the user content
(serialized session context and transcript). All functions are pure and
tolerate malformed input: missing attributes become empty values.
"""

import json
from datetime import datetime
from typing import Any, Iterable

from backend.app.services.report_contract import CANONICAL_STAGES, REQUIRED_FIELDS
from backend.app.services.report_density import LIST_TARGETS, TEXT_TARGETS


def _read(obj: Any, *names: str) -> Any:
    """First non-empty attribute or key among ``names``."""
    for name in names:
        value = obj.get(name) if isinstance(obj, dict) else getattr(obj, name, None)
        if value not in (None, ""):
            return value
    return ""


def _text(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return "" if value is None else str(value)


def _json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=str)


def build_system_prompt() -> str:
    """System instructions for the full (v3) report."""
    text_targets = [
        f"- {name}: at least {target.min_chars} characters" for name, target in TEXT_TARGETS.items()
    ]
    list_targets = [
        f"- {name}: at least {target.min_items} items, {target.min_chars}+ characters each"
        for name, target in LIST_TARGETS.items()
    ]
    stages = ", ".join(f'"{stage}"' for stage in CANONICAL_STAGES)

    lines = [
        "You are an enterprise sales analyst. Return ONLY compact JSON matching the provided json_schema. "
        "No extra text.",
        f"CRITICAL: All {len(REQUIRED_FIELDS)} top-level fields are mandatory. Follow exact minimums and "
        "these density targets:",
        "",
        "NARRATIVE TEXT DENSITY:",
        *text_targets,
        "",
        "LIST DENSITY:",
        *list_targets,
        "- p1_objections_handled>=2, p1_action_items>=4, p2_risks_concerns>=3 with impact/likelihood",
        "",
        "STAGE EVALUATION (mandatory structure):",
        f"- p4_stage_eval: EXACTLY 11 stages [{stages}] in this order, "
        "with handled in {yes,no,partial} and score in [0,10]",
        "- Each p5..p10 stage array has at least one item with ALL fields populated "
        "(indicators/observed/mistakes/whatToSay/positives/coaching)",
        "- p3_bant.rows>=4 (Budget, Authority, Need, Timeline), apx_scoring_rubric>=4, apx_data_flags>=1",
        "",
        "NARRATIVES (strongly recommended):",
        'Include a "narratives" object with Markdown content:',
        "- executive_summary.content: 120-180 words, **bold** metrics, ## headings, bullet points",
        "- meeting_summary.content: 180-250 words with > blockquotes",
        "- technical_evaluation.content: 150-220 words with ### subheadings",
        "- competitive_landscape.content: 140-200 words",
        "- stage_narratives.discovery and stage_narratives.qualification (bant_analysis, meddicc_analysis)",
        "- next_steps_narrative.content: 150-220 words action plan with timelines",
        "",
        'LAYOUT: include "layout_hints" with mode="full" and density="dense".',
        "",
        "CONTENT QUALITY:",
        "- Use specific numbers, percentages and quantified metrics",
        "- Include participant names, company details and technical specifics",
        "- Prefer logical, context-based content over placeholders when data is missing",
    ]
    return "\n".join(lines)


def build_tabs_system_prompt() -> str:
    """System instructions for the three-tab report."""
    return "\n".join([
        "You are a senior sales performance analyst. Analyze the call transcript and return ONLY JSON "
        "matching the provided json_schema, with Markdown inside the content fields.",
        "",
        "Tabs:",
        "1. executive_summary: call overview paragraph, pain points, objections and buying signals with "
        "timestamps as > blockquotes, key details to remember, at least 3 key_highlights and a deal_snapshot.",
        "2. chance_of_sale: overall_score 0-100 computed from MEDDICC and BANT evidence, confidence_level, "
        "at least 2 boosters (impact 1-10) and 1 blocker (severity 1-10, with mitigation), and "
        "recommendations with at least 2 next_steps (owner, timeline, priority).",
        "3. sales_rep_performance: overall_score 0-100, at least 5 stage_performance entries "
        "(Opening, Discovery, Presentation, Objection Handling, Closing) scored 0-10 with strengths and "
        "improvements, and at least 3 coaching priorities with resources.",
        "",
        "Score mathematically from observed evidence; never invent facts absent from the transcript.",
        'Set schema_version to "1.0".',
    ])


def serialize_segments(segments: Iterable[Any]) -> list[dict[str, str]]:
    return [
        {
            "ts": _text(_read(segment, "timestamp", "ts")),
            "speaker": _text(_read(segment, "speaker")),
            "text": _text(_read(segment, "content", "text")),
        }
        for segment in segments or []
    ]


def assemble_user_prompt(
    session: Any,
    segments: Iterable[Any],
    extras: dict[str, Any] | None = None,
) -> str:
    """
    Serialize the call context for the generator.

    Args:
        session: Session record (model instance or mapping)
        segments: Ordered transcript segments
        extras: Optional prior analysis: ``summary``, ``ai_messages``,
            ``coaching`` and ``main_analysis``

    Returns:
        User prompt made of ``#``-headed sections
    """
    extras = extras or {}
    parts = [
        "# SESSION\n"
        f"ID: {_text(_read(session, 'id'))}\n"
        f"Title: {_text(_read(session, 'title'))}\n"
        f"Type: {_text(_read(session, 'session_type', 'type'))}\n"
        f"StartedAt: {_text(_read(session, 'started_at'))}"
    ]
    if extras.get("summary"):
        parts.append(f"# SUMMARY\n{_json(extras['summary'])}")
    if extras.get("ai_messages"):
        parts.append(f"# AI_MESSAGES\n{_json(extras['ai_messages'])}")
    if extras.get("coaching"):
        parts.append(f"# COACHING_EVENTS\n{_json(extras['coaching'])}")
    if extras.get("main_analysis"):
        parts.append(f"# MAIN_ANALYSIS\n{_json(extras['main_analysis'])}")
    parts.append(f"# TRANSCRIPTS\n{_json(serialize_segments(segments))}")
    return "\n\n".join(parts)
