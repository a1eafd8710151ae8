"""
Markdown narrative templates synthesised from structured report fields.

Every function here is pure: it reads an already repaired report and returns
text. They back the contextual defaults of the optional ``narratives``
section and the tab report placeholders.
"""

from typing import Any


TABS_EXECUTIVE_SUMMARY_PLACEHOLDER = (
    "## Executive Summary\n\n"
    "Call analysis in progress. Comprehensive summary will be generated based on transcript data.\n\n"
    "**Key Outcome**: Analysis pending\n\n"
    "> Detailed insights will be provided upon completion of transcript processing."
)

TABS_CHANCE_OF_SALE_PLACEHOLDER = (
    "## Deal Probability Analysis\n\n"
    "Based on available transcript data, this deal shows **moderate potential** "
    "with several factors influencing the outcome.\n\n"
    "### Key Considerations\n"
    "- Prospect engagement level\n"
    "- Technical fit assessment\n"
    "- Decision-making timeline\n\n"
    "> Detailed scoring analysis in progress."
)

TABS_RECOMMENDATIONS_PLACEHOLDER = (
    "## Strategic Recommendations\n\n"
    "Based on the call analysis, the following actions will optimize deal progression:\n\n"
    "- **Immediate**: Address key concerns raised\n"
    "- **Short-term**: Provide requested information\n"
    "- **Long-term**: Maintain engagement momentum"
)

TABS_REP_PERFORMANCE_PLACEHOLDER = (
    "## Sales Representative Performance Analysis\n\n"
    "Overall performance demonstrates **solid execution** with opportunities for enhancement in key areas.\n\n"
    "### Strengths Observed\n"
    "- Professional communication style\n"
    "- Good rapport building\n"
    "- Technical knowledge demonstration\n\n"
    "### Development Areas\n"
    "- Objection handling techniques\n"
    "- Closing question timing\n"
    "- Discovery depth\n\n"
    "> Detailed coaching recommendations provided below."
)

TABS_COACHING_PLACEHOLDER = (
    "## Coaching Priorities\n\n"
    "Focused development in these areas will significantly enhance sales effectiveness:\n\n"
    "### Primary Focus Areas\n"
    "1. **Discovery Enhancement** - Deeper questioning techniques\n"
    "2. **Objection Management** - Proactive concern addressing\n"
    "3. **Closing Confidence** - Stronger commitment requests\n\n"
    "### Development Plan\n"
    "Structured coaching sessions with role-playing exercises and real-call feedback loops."
)


def count_words(text: Any) -> int:
    """Count whitespace separated words."""
    if not isinstance(text, str):
        return 0
    return len(text.split())


def _list(report: dict[str, Any], key: str) -> list[Any]:
    value = report.get(key)
    return value if isinstance(value, list) else []


def _meta(report: dict[str, Any], *path: str, default: str = "") -> str:
    node: Any = report.get("p1_meta_full")
    for key in path:
        node = node.get(key) if isinstance(node, dict) else None
    return node if isinstance(node, str) and node.strip() else default


def _deal_score(report: dict[str, Any]) -> int:
    health = report.get("p1_deal_health")
    score = health.get("score") if isinstance(health, dict) else None
    return score if isinstance(score, int) and not isinstance(score, bool) else 50


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def _bullets(items: list[Any], suffix: str) -> str:
    lines = [f"- **{_capitalize(item)}** - {suffix}" for item in items if isinstance(item, str)]
    return "\n".join(lines) if lines else "- None recorded"


def extract_key_terms(report: dict[str, Any]) -> list[str]:
    terms: list[str] = []
    deal = report.get("tp_deal")
    if isinstance(deal, str) and deal.strip():
        terms.append(deal)
    terms.append(f"deal score {_deal_score(report)}")
    return terms[:5]


def extract_topics(report: dict[str, Any]) -> list[str]:
    topics = []
    if _list(report, "p1_key_points"):
        topics.append("key discussion points")
    if _list(report, "p1_pains"):
        topics.append("pain points")
    if _list(report, "p1_buying_signals"):
        topics.append("buying signals")
    return topics


def extract_participants(report: dict[str, Any]) -> list[str]:
    participants = []
    for role in ("rep", "prospect"):
        name = _meta(report, role, "name")
        if name:
            participants.append(name)
    return participants


def executive_summary(report: dict[str, Any]) -> str:
    """Executive summary narrative: headline, context and KPI bullets."""
    score = _deal_score(report)
    headline = report.get("p1_exec_headline") or "Sales call analysis completed"
    synopsis = report.get("p1_exec_synopsis") or "Review of sales conversation"
    deal = report.get("tp_deal") or "Strategic business opportunity"
    prospect = _meta(report, "prospect", "name", default="prospect")
    rep = _meta(report, "rep", "name", default="sales representative")
    duration = _meta(report, "duration", default="30 minutes")

    if score >= 70:
        rating = "Excellent"
    elif score >= 50:
        rating = "Good"
    else:
        rating = "Needs Attention"
    alignment = (
        "strong alignment between solution capabilities and business needs"
        if score >= 60
        else "moderate potential with opportunity for enhanced positioning"
    )
    outlook = "high probability for progression" if score >= 70 else "good foundation for continued development"

    return (
        "## Executive Summary\n\n"
        f"**{headline}**\n\n"
        f"{synopsis}\n\n"
        "### Strategic Context\n"
        f"The {duration} session between {rep} and {prospect} focused on {deal}.\n\n"
        "### Key Performance Indicators\n"
        f"- **Deal Health Score**: {score}/100 ({rating})\n"
        f"- **Discussion Depth**: {len(_list(report, 'p1_key_points'))} strategic points covered\n"
        f"- **Pain Identification**: {len(_list(report, 'p1_pains'))} pain points validated\n"
        f"- **Buying Signals**: {len(_list(report, 'p1_buying_signals'))} positive indicators observed\n"
        f"- **Action Items**: {len(_list(report, 'p1_action_items'))} immediate next steps defined\n\n"
        "### Strategic Assessment\n"
        f"This conversation demonstrates {alignment}. Discussion quality indicates {outlook} "
        "with focused execution of the identified action items."
    )


def meeting_summary(report: dict[str, Any]) -> str:
    prospect = _meta(report, "prospect", "name", default="the prospect")
    role = _meta(report, "prospect", "role", default="decision maker")
    company = _meta(report, "prospect", "company", default="the organization")
    channel = _meta(report, "channel", default="call")
    duration = _meta(report, "duration", default="30 minutes")
    quality = _meta(report, "transcriptQuality", default="good engagement")

    return (
        "## Meeting Overview\n\n"
        f"The {duration} {channel.lower()} with {prospect} ({role} at {company}) "
        f"was recorded with transcript quality: {quality}.\n\n"
        "### Key Discussion Areas Covered\n"
        f"{_bullets(_list(report, 'p1_key_points'), 'analysis and business impact assessment')}\n\n"
        "### Primary Pain Points Identified\n"
        f"{_bullets(_list(report, 'p1_pains'), 'impact and strategic implications discussed')}\n\n"
        "### Positive Buying Indicators Observed\n"
        f"{_bullets(_list(report, 'p1_buying_signals'), 'demonstrates interest and evaluation progression')}\n\n"
        "### Strategic Context for Follow-up\n"
        "This session established a foundation for continued engagement with clear next steps."
    )


def technical_evaluation(report: dict[str, Any]) -> str:
    return (
        "## Technical Assessment\n\n"
        "### Solution Fit Analysis\n"
        "- **Requirements Alignment**: Analysis based on discussion points\n"
        "- **Technical Feasibility**: Evaluated against stated needs\n"
        "- **Implementation Scope**: Determined from conversation context\n\n"
        "### Key Considerations\n"
        "- Technical requirements captured during discussion\n"
        "- Implementation approach needs further validation\n"
        "- Integration considerations identified\n\n"
        "Technical alignment shows positive indicators for solution fit."
    )


def competitive_landscape(report: dict[str, Any]) -> str:
    meddicc = report.get("p3_meddicc")
    competition = meddicc.get("competition", {}).get("value") if isinstance(meddicc, dict) else None
    named = [c for c in competition or [] if isinstance(c, str) and c != "Not discussed"]
    market = (
        f"Competitors mentioned in the conversation: {', '.join(named)}."
        if named
        else "Based on the conversation, competitive factors include standard market considerations."
    )
    return (
        "## Competitive Position\n\n"
        "### Market Analysis\n"
        f"{market}\n\n"
        "### Our Positioning\n"
        "- **Solution Differentiation**: Key capabilities align with needs\n"
        "- **Value Proposition**: Addresses identified pain points\n"
        "- **Implementation Advantage**: Structured approach to delivery\n\n"
        "### Strategic Approach\n"
        "Focus on value demonstration and relationship building to strengthen competitive position."
    )


def discovery_summary(report: dict[str, Any]) -> str:
    return (
        f"Discovery phase captured {len(_list(report, 'p1_key_points'))} key discussion points and identified "
        f"{len(_list(report, 'p1_pains'))} primary pain areas. Foundation established for solution alignment "
        "and next steps planning."
    )


def discovery_findings(report: dict[str, Any]) -> str:
    points = [p for p in _list(report, "p1_key_points")[:3] if isinstance(p, str)]
    return "\n- ".join(points)


def qualification_summary(report: dict[str, Any]) -> str:
    score = _deal_score(report)
    if score >= 70:
        potential = "strong"
    elif score >= 40:
        potential = "moderate"
    else:
        potential = "limited"
    return (
        f"Qualification assessment indicates {potential} opportunity potential. "
        "Key qualification criteria evaluated against discussion content."
    )


def bant_analysis(report: dict[str, Any]) -> str:
    bant = report.get("p3_bant")
    rows = bant.get("rows") if isinstance(bant, dict) else None
    lines = [
        f"**{row.get('key')}**: {row.get('status') or 'To be determined'}"
        for row in rows or []
        if isinstance(row, dict) and row.get("key")
    ]
    if lines:
        return "\n".join(lines)
    return (
        "**Budget**: Assessment required\n**Authority**: To be confirmed\n"
        "**Need**: Identified during discussion\n**Timeline**: Planning phase"
    )


def meddicc_analysis(report: dict[str, Any]) -> str:
    meddicc = report.get("p3_meddicc")
    if not isinstance(meddicc, dict):
        return (
            "**Metrics**: To be defined\n**Economic Buyer**: To be identified\n"
            "**Decision Criteria**: Assessment in progress"
        )
    metrics = meddicc.get("metrics", {}).get("value")
    buyer = meddicc.get("economicBuyer", {}).get("value")
    criteria = meddicc.get("decisionCriteria", {}).get("value")
    return (
        f"**Metrics**: {', '.join(metrics) if metrics else 'To be defined'}\n"
        f"**Economic Buyer**: {buyer or 'To be identified'}\n"
        f"**Decision Criteria**: {', '.join(criteria) if criteria else 'Assessment in progress'}"
    )


def next_steps(report: dict[str, Any]) -> str:
    steps = []
    for index, item in enumerate(_list(report, "p1_action_items")[:3], start=1):
        if not isinstance(item, dict):
            continue
        steps.append(
            f"{index}. **{item.get('title', 'Action item')}** - "
            f"{item.get('owner') or 'Owner TBD'} by {item.get('due') or 'TBD'}"
        )
    return (
        "## Next Steps Action Plan\n\n"
        "### Immediate Actions\n"
        f"{chr(10).join(steps) if steps else '1. Schedule follow-up meeting'}\n\n"
        "### Key Priorities\n"
        "- Follow up on discussion points\n"
        "- Address identified concerns\n"
        "- Advance opportunity momentum\n\n"
        "Strategic execution of these steps will maintain engagement and progress the sales cycle."
    )
