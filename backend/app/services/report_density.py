"""
Content density enforcement.

Print layouts expect certain narrative fields and bullet lists to carry a
minimum amount of text. Each target below is a per-field expansion strategy:
text fields grow by appending clauses derived from sibling fields, then
deterministic filler sentences; list fields grow in item count and in
per-item length. Values are only ever extended, never truncated, and a value
already meeting its target is returned unchanged.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)

ClauseBuilder = Callable[[dict[str, Any]], list[str]]

FILLER_SENTENCES = (
    " Details will be confirmed during the follow-up conversation.",
    " Further context is available in the call transcript.",
    " This assessment reflects the information shared during the call.",
)

ITEM_PADDING = " with detailed context and specific business impact for comprehensive analysis"


@dataclass(frozen=True)
class TextTarget:
    """Minimum length for a narrative string and the clauses used to reach it."""

    min_chars: int
    clauses: ClauseBuilder


@dataclass(frozen=True)
class ListTarget:
    """Minimum item count and per-item length for a list of strings."""

    min_items: int
    min_chars: int
    noun: str

    @property
    def filler_item(self) -> str:
        return f"Additional {self.noun} based on conversation analysis"


def _list(report: dict[str, Any], key: str) -> list[Any]:
    value = report.get(key)
    return value if isinstance(value, list) else []


def _first(report: dict[str, Any], key: str) -> str | None:
    items = [item for item in _list(report, key) if isinstance(item, str) and item.strip()]
    return items[0] if items else None


def _nested(report: dict[str, Any], *path: str) -> Any:
    node: Any = report
    for key in path:
        node = node.get(key) if isinstance(node, dict) else None
    return node


def _headline_clauses(report: dict[str, Any]) -> list[str]:
    clauses = []
    score = _nested(report, "p1_deal_health", "score")
    if isinstance(score, int):
        clauses.append(f" with {score}/100 deal health score")
    key_point = _first(report, "p1_key_points")
    if key_point:
        clauses.append(f" focusing on {key_point.lower()}")
    return clauses


def _synopsis_clauses(report: dict[str, Any]) -> list[str]:
    clauses = []
    deal = report.get("tp_deal")
    if isinstance(deal, str) and deal.strip():
        clauses.append(f" for {deal}")
    pain = _first(report, "p1_pains")
    if pain:
        clauses.append(f" addressing {pain.lower()}")
    signal = _first(report, "p1_buying_signals")
    if signal:
        clauses.append(f" with {signal.lower()}")
    return clauses


def _context_clauses(report: dict[str, Any]) -> list[str]:
    clauses = []
    meta = report.get("p1_meta_full")
    if isinstance(meta, dict):
        duration = meta.get("duration") or "30-minute"
        prospect = _nested(meta, "prospect", "name") or "the prospect"
        clauses.append(f" The {duration} session with {prospect} covered strategic business requirements.")
    high = _list(report, "p2_high_priority")
    if high:
        clauses.append(f" Key priorities include {len(high)} actionable items for immediate attention.")
    return clauses


def _summary_clauses(report: dict[str, Any]) -> list[str]:
    clauses = []
    missed = _list(report, "p3_missed_opportunities")
    if missed:
        clauses.append(f" Analysis identified {len(missed)} optimization opportunities.")
    improvements = _list(report, "p3_improvements")
    if improvements:
        clauses.append(f" {len(improvements)} specific improvements recommended for execution.")
    return clauses


def _recommendation_clauses(report: dict[str, Any]) -> list[str]:
    clauses = []
    rows = _nested(report, "p3_bant", "rows")
    if isinstance(rows, list) and rows:
        clauses.append(f" BANT qualification shows {len(rows)} criteria evaluated.")
    risks = _list(report, "p2_risks_concerns")
    if risks:
        clauses.append(f" {len(risks)} risk factors require mitigation strategies.")
    return clauses


def _takeaway_clauses(report: dict[str, Any]) -> list[str]:
    clauses = []
    actions = _list(report, "p1_action_items")
    if actions:
        clauses.append(f" {len(actions)} action items identified for progression.")
    handled = [s for s in _list(report, "p4_stage_eval") if isinstance(s, dict) and s.get("handled") == "yes"]
    if handled:
        clauses.append(f" Strong performance in {len(handled)} sales stages.")
    clauses.append(
        " Strategic execution of recommendations will accelerate deal progression"
        " and optimize conversion probability."
    )
    return clauses


TEXT_TARGETS: dict[str, TextTarget] = {
    "p1_exec_headline": TextTarget(80, _headline_clauses),
    "p1_exec_synopsis": TextTarget(180, _synopsis_clauses),
    "p2_context_snapshot": TextTarget(200, _context_clauses),
    "p2_short_summary": TextTarget(180, _summary_clauses),
    "p3_short_reco": TextTarget(200, _recommendation_clauses),
    "p4_takeaway": TextTarget(220, _takeaway_clauses),
}

LIST_TARGETS: dict[str, ListTarget] = {
    "p1_key_points": ListTarget(4, 45, "key discussion point"),
    "p1_pains": ListTarget(3, 40, "pain point identified"),
    "p1_buying_signals": ListTarget(3, 35, "buying signal observed"),
    "p2_high_priority": ListTarget(4, 50, "high priority action"),
    "p2_medium_priority": ListTarget(3, 40, "medium priority consideration"),
    "p2_info_items": ListTarget(4, 35, "information requirement"),
    "p3_missed_opportunities": ListTarget(3, 60, "missed opportunity for improvement"),
    "p3_improvements": ListTarget(3, 55, "improvement recommendation"),
}

DENSITY_TEXT_TARGETS: dict[str, int] = {name: target.min_chars for name, target in TEXT_TARGETS.items()}
DENSITY_LIST_TARGETS: dict[str, tuple[int, int]] = {
    name: (target.min_items, target.min_chars) for name, target in LIST_TARGETS.items()
}


def expand_text(value: str, target: TextTarget, report: dict[str, Any]) -> str:
    """
    Extend ``value`` until it reaches ``target.min_chars``.

    Args:
        value: Current field value
        target: Expansion strategy for the field
        report: Report providing sibling context

    Returns:
        The value, extended by whole clauses and filler sentences when short
    """
    if len(value) >= target.min_chars:
        return value

    for clause in target.clauses(report):
        value += clause
        if len(value) >= target.min_chars:
            return value

    index = 0
    while len(value) < target.min_chars:
        value += FILLER_SENTENCES[index % len(FILLER_SENTENCES)]
        index += 1
    return value


def pad_item(item: str, min_chars: int) -> str:
    """Append whole words of the standard item padding until ``min_chars`` is reached."""
    if len(item) >= min_chars:
        return item
    for word in ITEM_PADDING.split(" ")[1:]:
        item = f"{item} {word}"
        if len(item) >= min_chars:
            return item
    while len(item) < min_chars:
        item += ITEM_PADDING
    return item


def expand_list(items: list[Any], target: ListTarget) -> list[Any]:
    expanded = list(items)
    while len(expanded) < target.min_items:
        expanded.append(target.filler_item)
    return [pad_item(item, target.min_chars) if isinstance(item, str) else item for item in expanded]


def enforce_density(
    report: dict[str, Any],
    text_targets: dict[str, TextTarget] = TEXT_TARGETS,
    list_targets: dict[str, ListTarget] = LIST_TARGETS,
) -> dict[str, Any]:
    """
    Apply every density target to ``report`` in place.

    Args:
        report: Structurally repaired report
        text_targets: Text field strategies
        list_targets: List field strategies

    Returns:
        The same report object
    """
    expanded = []
    for name, target in text_targets.items():
        value = report.get(name)
        if isinstance(value, str):
            new_value = expand_text(value, target, report)
            if new_value != value:
                report[name] = new_value
                expanded.append(name)

    for name, list_target in list_targets.items():
        value = report.get(name)
        if isinstance(value, list):
            new_items = expand_list(value, list_target)
            if new_items != value:
                report[name] = new_items
                expanded.append(name)

    if expanded:
        logger.debug(f"[NORMALIZE] Density expansion applied to: {', '.join(expanded)}")
    return report
