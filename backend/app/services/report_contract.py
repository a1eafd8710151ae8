"""
Report contract: the declarative shape a complete report must have.

The contract is a tree of field rules. It is pure data: the normalizer walks
it to repair generator output, the validator walks it to detect violations,
and ``to_json_schema()`` renders it as the strict JSON schema sent to the
generator as ``response_format``.

Placeholders may contain ``{n}``, replaced by the 1-based index of the array
item being repaired. A rule's ``derive`` callable supplies a contextual
default computed from the rest of the (already repaired) report; derived
values are resolved after the structural pass.
"""

from dataclasses import dataclass, field
from typing import Any, Callable

from backend.app.services import report_narratives as narratives


@dataclass(frozen=True)
class DeriveContext:
    """What a derive callable can see: the whole report and the enclosing objects."""

    report: dict[str, Any]
    ancestors: tuple[dict[str, Any], ...]
    generated_at: str

    @property
    def parent(self) -> dict[str, Any]:
        return self.ancestors[-1] if self.ancestors else self.report

    @property
    def grandparent(self) -> dict[str, Any]:
        return self.ancestors[-2] if len(self.ancestors) > 1 else self.report


Derive = Callable[[DeriveContext], Any]


@dataclass(frozen=True, kw_only=True)
class FieldRule:
    """
    Common rule options.

    Attributes:
        optional: Field may be absent from a valid report (JSON schema only)
        fill: Normalizer creates the field when absent
        derive: Contextual default, used instead of the static default
        description: Human-readable description for the JSON schema
    """

    optional: bool = False
    fill: bool = True
    derive: Derive | None = None
    description: str | None = None


@dataclass(frozen=True, kw_only=True)
class StringField(FieldRule):
    placeholder: str = ""
    min_length: int = 1
    schema_min_length: int | None = None


@dataclass(frozen=True, kw_only=True)
class IntField(FieldRule):
    minimum: int
    maximum: int | None = None
    default: int


@dataclass(frozen=True, kw_only=True)
class NumberField(FieldRule):
    minimum: float
    maximum: float | None = None
    default: float


@dataclass(frozen=True, kw_only=True)
class EnumField(FieldRule):
    values: tuple[str, ...]
    default: str


@dataclass(frozen=True, kw_only=True)
class BoolField(FieldRule):
    default: bool


@dataclass(frozen=True, kw_only=True)
class ArrayField(FieldRule):
    """
    Array rule.

    Attributes:
        items: Rule applied to every item
        min_items: Minimum cardinality, reached by padding
        max_items: Maximum cardinality (JSON schema only, repair never truncates)
        default: Items used when the value is not an array at all
        padding: Item templates used, in order, when padding
        identity_key: Key used to skip padding templates already present
        labels: Exact, order-significant labels; the array length is fixed
        label_key: Item key that receives the label at each position
    """

    items: "Rule"
    min_items: int = 0
    max_items: int | None = None
    default: tuple[Any, ...] = ()
    padding: tuple[Any, ...] = ()
    identity_key: str | None = None
    labels: tuple[str, ...] = ()
    label_key: str | None = None


@dataclass(frozen=True, kw_only=True)
class ObjectField(FieldRule):
    properties: dict[str, "Rule"] = field(default_factory=dict)

    @property
    def required(self) -> list[str]:
        return [name for name, rule in self.properties.items() if not rule.optional]


@dataclass(frozen=True, kw_only=True)
class MapField(FieldRule):
    """Object with free-form keys whose values share one rule."""

    values: "Rule"


Rule = StringField | IntField | NumberField | EnumField | BoolField | ArrayField | ObjectField | MapField


def to_json_schema(rule: Rule) -> dict[str, Any]:
    """
    Render a contract rule as a strict JSON schema fragment.

    Args:
        rule: Contract rule

    Returns:
        JSON schema dictionary
    """
    schema: dict[str, Any]
    if isinstance(rule, StringField):
        schema = {"type": "string"}
        min_length = rule.schema_min_length if rule.schema_min_length is not None else rule.min_length
        if min_length:
            schema["minLength"] = min_length
    elif isinstance(rule, IntField):
        schema = {"type": "integer", "minimum": rule.minimum}
        if rule.maximum is not None:
            schema["maximum"] = rule.maximum
    elif isinstance(rule, NumberField):
        schema = {"type": "number", "minimum": rule.minimum}
        if rule.maximum is not None:
            schema["maximum"] = rule.maximum
    elif isinstance(rule, EnumField):
        schema = {"type": "string", "enum": list(rule.values)}
    elif isinstance(rule, BoolField):
        schema = {"type": "boolean"}
    elif isinstance(rule, ArrayField):
        schema = {"type": "array", "items": to_json_schema(rule.items)}
        min_items = len(rule.labels) if rule.labels else rule.min_items
        max_items = len(rule.labels) if rule.labels else rule.max_items
        if min_items:
            schema["minItems"] = min_items
        if max_items is not None:
            schema["maxItems"] = max_items
    elif isinstance(rule, ObjectField):
        schema = {
            "type": "object",
            "additionalProperties": False,
            "required": rule.required,
            "properties": {name: to_json_schema(child) for name, child in rule.properties.items()},
        }
    elif isinstance(rule, MapField):
        schema = {"type": "object", "additionalProperties": to_json_schema(rule.values)}
    else:
        raise TypeError(f"Unknown contract rule: {rule!r}")

    if rule.description:
        schema["description"] = rule.description
    return schema


# ---------------------------------------------------------------------------
# Shared vocabulary
# ---------------------------------------------------------------------------

CANONICAL_STAGES: tuple[str, ...] = (
    "Greetings",
    "Introduction",
    "Customer Success Stories",
    "Discovery",
    "Product Details",
    "Trust Building",
    "Objection Handling",
    "Buying‑Signal Capitalization",
    "Negotiation",
    "Timeline",
    "Closing / Registration",
)

# Deep-dive slot -> default stage name
DEEP_DIVE_SLOTS: dict[str, str] = {
    "p5_stage_a": "Stage A",
    "p5_stage_b": "Stage B",
    "p6_stage_c": "Stage C",
    "p6_stage_d": "Stage D",
    "p7_stage_e": "Stage E",
    "p7_stage_f": "Stage F",
    "p8_stage_g": "Stage G",
    "p8_stage_h": "Stage H",
    "p9_stage_i": "Stage I",
    "p9_stage_j": "Stage J",
    "p10_stage_k": "Stage K",
    "p10_stage_l": "Stage L",
}

HANDLED_VALUES = ("yes", "no", "partial")
PRIORITY_VALUES = ("Low", "Medium", "High")
LEVEL_VALUES = ("High", "Medium", "Low")
UNSPECIFIED = "Not specified"

BANT_DEFAULT_ROWS = (
    {"key": "Budget", "status": "Unknown", "notes": "Not discussed"},
    {"key": "Authority", "status": "Unknown", "notes": "Not confirmed"},
    {"key": "Need", "status": "Unknown", "notes": "Not assessed"},
    {"key": "Timeline", "status": "Unknown", "notes": "Not established"},
)


def _strings(placeholder: str, min_items: int = 0, **kwargs: Any) -> ArrayField:
    return ArrayField(items=StringField(placeholder=placeholder), min_items=min_items, **kwargs)


def _optional_text(placeholder: str = "") -> StringField:
    return StringField(placeholder=placeholder, min_length=0)


def _deal_health_rationale(ctx: DeriveContext) -> str:
    actions = ctx.report.get("p1_action_items") or []
    risks = ctx.report.get("p2_risks_concerns") or []
    high_risks = sum(1 for risk in risks if isinstance(risk, dict) and risk.get("impact") == "High")
    return (
        f"Deal health reflects {len(actions)} open action items and {len(risks)} identified risks"
        f" ({high_risks} rated high impact)."
    )


def _deal_status(ctx: DeriveContext) -> str:
    score = ctx.parent.get("score", 50)
    if score >= 70:
        return "On track"
    if score >= 40:
        return "Needs attention"
    return "At risk"


def _generated_at(ctx: DeriveContext) -> str:
    return ctx.generated_at


def _word_count(ctx: DeriveContext) -> int:
    return narratives.count_words(ctx.grandparent.get("content", ""))


def _report_key_terms(ctx: DeriveContext) -> list[str]:
    return narratives.extract_key_terms(ctx.report)


def _report_topics(ctx: DeriveContext) -> list[str]:
    return narratives.extract_topics(ctx.report)


def _report_participants(ctx: DeriveContext) -> list[str]:
    return narratives.extract_participants(ctx.report)


def _from_report(builder: Callable[[dict[str, Any]], Any]) -> Derive:
    return lambda ctx: builder(ctx.report)


def _narrative_metadata(
    sentiment: float,
    key_terms: Derive | None = None,
    extra_lists: dict[str, Derive | None] | None = None,
) -> ObjectField:
    properties: dict[str, Rule] = {
        "generated_at": StringField(derive=_generated_at),
        "word_count": IntField(minimum=0, default=0, derive=_word_count),
        "key_terms": ArrayField(items=StringField(placeholder=UNSPECIFIED), derive=key_terms),
        "sentiment": NumberField(minimum=-1, maximum=1, default=sentiment),
    }
    for name, derive in (extra_lists or {}).items():
        properties[name] = ArrayField(items=StringField(placeholder=UNSPECIFIED), derive=derive)
    return ObjectField(properties=properties, optional=True)


def _narrative_section(
    template: Callable[[dict[str, Any]], str],
    sentiment: float,
    key_terms: Derive | None = None,
    extra_lists: dict[str, Derive | None] | None = None,
) -> ObjectField:
    return ObjectField(
        optional=True,
        properties={
            "content": StringField(derive=_from_report(template)),
            "metadata": _narrative_metadata(sentiment, key_terms, extra_lists),
        },
    )


def _stage_narrative(optional: bool = True, fill: bool = False) -> ObjectField:
    return ObjectField(
        optional=optional,
        fill=fill,
        properties={
            "summary": StringField(placeholder="Not assessed"),
            "key_findings": _optional_text(),
            "concerns": _optional_text(),
        },
    )


def _deep_dive_array(default_name: str) -> ArrayField:
    deep_dive = ObjectField(
        properties={
            "stageName": StringField(placeholder=default_name),
            "objective": _optional_text(),
            "indicators": _strings("Indicator not defined", min_items=1),
            "observed": _strings("Behavior not observed", min_items=1),
            "score": IntField(minimum=0, maximum=100, default=0),
            "weight": IntField(minimum=0, maximum=100, default=10),
            "mistakes": _strings("Not assessed", default=("Not assessed",)),
            "whatToSay": _strings("Not defined", default=("Not defined",)),
            "positives": _strings("Not identified", default=("Not identified",)),
            "coaching": _strings("Not provided", default=("Not provided",)),
            "quickFix": _optional_text(),
            "actions": ArrayField(
                items=ObjectField(
                    properties={
                        "id": StringField(placeholder="a{n}"),
                        "title": StringField(placeholder="Stage action {n}"),
                        "owner": _optional_text("Unassigned"),
                        "due": _optional_text("TBD"),
                    }
                ),
            ),
        }
    )
    return ArrayField(items=deep_dive, min_items=1)


def _layout_section(
    allow_page_break_inside: bool = True,
    print_columns: int = 1,
    min_chars: int = 0,
) -> ObjectField:
    return ObjectField(
        properties={
            "allow_page_break_inside": BoolField(default=allow_page_break_inside),
            "print_columns": IntField(minimum=1, maximum=3, default=print_columns),
            "min_chars": IntField(minimum=0, default=min_chars),
        }
    )


def _optimized_layout_sections(ctx: DeriveContext) -> dict[str, Any]:
    return {name: dict(hint) for name, hint in OPTIMIZED_LAYOUT_SECTIONS.items()}


OPTIMIZED_LAYOUT_SECTIONS: dict[str, dict[str, Any]] = {
    "p1_exec_synopsis": {"allow_page_break_inside": False, "print_columns": 1, "min_chars": 180},
    "p1_key_points": {"allow_page_break_inside": True, "print_columns": 2, "min_chars": 45},
    "p2_high_priority": {"allow_page_break_inside": True, "print_columns": 2, "min_chars": 50},
    "p2_context_snapshot": {"allow_page_break_inside": False, "print_columns": 1, "min_chars": 200},
    "p3_improvements": {"allow_page_break_inside": True, "print_columns": 1, "min_chars": 55},
    "p4_stage_eval": {"allow_page_break_inside": True, "print_columns": 3, "min_chars": 30},
    "narratives.executive_summary": {"allow_page_break_inside": False, "print_columns": 1, "min_chars": 120},
    "narratives.meeting_summary": {"allow_page_break_inside": True, "print_columns": 1, "min_chars": 180},
    "narratives.technical_evaluation": {"allow_page_break_inside": True, "print_columns": 1, "min_chars": 150},
}


# ---------------------------------------------------------------------------
# Full report (v3)
# ---------------------------------------------------------------------------

def _meddicc_text(placeholder: str) -> ObjectField:
    return ObjectField(properties={"value": StringField(placeholder=placeholder)})


def _meddicc_list(placeholder: str, **kwargs: Any) -> ObjectField:
    return ObjectField(properties={"value": _strings(placeholder, **kwargs)})


REPORT_CONTRACT = ObjectField(
    properties={
        # Title page
        "tp_title": StringField(placeholder="Sales Call Report"),
        "tp_subtitle": StringField(placeholder="Executive Analysis"),
        "tp_deal": StringField(placeholder="Deal Analysis"),
        "tp_sessionId": StringField(placeholder="Unknown Session"),

        # Page 1 - Executive Summary
        "p1_exec_headline": StringField(placeholder="Sales call analysis completed"),
        "p1_exec_synopsis": StringField(placeholder="Review of the sales conversation"),
        "p1_meta_full": ObjectField(
            properties={
                "date": StringField(placeholder="Not specified"),
                "time": StringField(placeholder="Not specified"),
                "duration": StringField(placeholder="Not specified"),
                "rep": ObjectField(
                    properties={
                        "name": StringField(placeholder="Unknown Rep"),
                        "role": _optional_text(),
                        "team": _optional_text(),
                    }
                ),
                "prospect": ObjectField(
                    properties={
                        "name": StringField(placeholder="Unknown Prospect"),
                        "role": _optional_text(),
                        "company": _optional_text(),
                    }
                ),
                "channel": StringField(placeholder="Unknown"),
                "transcriptQuality": StringField(placeholder="Unknown quality"),
            }
        ),
        "p1_key_points": _strings("Key point not discussed", min_items=3),
        "p1_pains": _strings("Pain point not identified", min_items=2),
        "p1_buying_signals": _strings("Buying signal not detected", min_items=2),
        "p1_objections_handled": ArrayField(
            min_items=2,
            items=ObjectField(
                properties={
                    "label": StringField(placeholder="Objection {n} not handled"),
                    "handled": EnumField(values=HANDLED_VALUES, default="no"),
                }
            ),
        ),
        "p1_action_items": ArrayField(
            min_items=3,
            items=ObjectField(
                properties={
                    "id": StringField(placeholder="a{n}"),
                    "title": StringField(placeholder="Action item {n}"),
                    "owner": _optional_text("Unassigned"),
                    "due": _optional_text("TBD"),
                    "priority": EnumField(values=PRIORITY_VALUES, default="Medium"),
                }
            ),
        ),
        "p1_deal_health": ObjectField(
            properties={
                "score": IntField(minimum=0, maximum=100, default=50),
                "rationale": StringField(derive=_deal_health_rationale),
            }
        ),

        # Page 2 - Discussion Highlights
        "p2_context_snapshot": StringField(placeholder="Context not captured"),
        "p2_high_priority": _strings("High priority item not identified", min_items=3),
        "p2_medium_priority": _strings("Medium priority item not identified", min_items=2),
        "p2_info_items": _strings("Information item not captured", min_items=3),
        "p2_risks_concerns": ArrayField(
            min_items=3,
            items=ObjectField(
                properties={
                    "area": StringField(placeholder="Risk area {n}"),
                    "impact": EnumField(values=LEVEL_VALUES, default="Medium"),
                    "likelihood": EnumField(values=LEVEL_VALUES, default="Medium"),
                    "rationale": _optional_text("Not assessed"),
                }
            ),
        ),
        "p2_short_summary": StringField(placeholder="Summary not available"),

        # Page 3 - Deal Health & Outcomes
        "p3_deal_health_summary": ObjectField(
            properties={
                "score": IntField(minimum=0, maximum=100, default=50),
                "status": StringField(derive=_deal_status),
            }
        ),
        "p3_meddicc": ObjectField(
            properties={
                "metrics": _meddicc_list("Metric not discussed", min_items=1),
                "economicBuyer": _meddicc_text("Not identified"),
                "decisionCriteria": _meddicc_list("Criteria not discussed", min_items=1),
                "decisionProcess": _meddicc_text("Not discussed"),
                "identifyPain": _meddicc_text("Not identified"),
                "competition": _meddicc_list("Not discussed", default=("Not discussed",)),
                "champion": _meddicc_text("Not identified"),
            }
        ),
        "p3_bant": ObjectField(
            properties={
                "rows": ArrayField(
                    min_items=4,
                    padding=BANT_DEFAULT_ROWS,
                    identity_key="key",
                    items=ObjectField(
                        properties={
                            "key": StringField(placeholder="Criterion {n}"),
                            "status": _optional_text("Unknown"),
                            "notes": _optional_text("Not discussed"),
                        }
                    ),
                ),
            }
        ),
        "p3_missed_opportunities": _strings("Missed opportunity not identified", min_items=2),
        "p3_improvements": _strings("Improvement area not identified", min_items=2),
        "p3_short_reco": StringField(placeholder="Recommendation not available"),

        # Page 4 - Call Stages Overview
        "p4_stage_eval": ArrayField(
            labels=CANONICAL_STAGES,
            label_key="stage",
            items=ObjectField(
                properties={
                    "stage": StringField(placeholder="Stage {n}"),
                    "handled": EnumField(values=HANDLED_VALUES, default="no"),
                    "note": _optional_text("Not assessed"),
                    "score": IntField(minimum=0, maximum=10, default=0),
                }
            ),
        ),
        "p4_pivotal_points": ArrayField(
            min_items=1,
            items=ObjectField(
                properties={
                    "ts": StringField(placeholder="0:00"),
                    "reason": StringField(placeholder="Pivotal point {n}"),
                    "quote": _optional_text(),
                }
            ),
        ),
        "p4_takeaway": StringField(placeholder="Key takeaway not available"),

        # Pages 5-10 - Stage Deep Dives
        **{slot: _deep_dive_array(name) for slot, name in DEEP_DIVE_SLOTS.items()},

        # Appendix
        "apx_scoring_rubric": _strings("Scoring criteria not defined", min_items=4),
        "apx_data_flags": _strings("Data quality flag", min_items=1),

        # Optional narratives (Markdown-in-JSON)
        "narratives": ObjectField(
            optional=True,
            properties={
                "executive_summary": _narrative_section(
                    narratives.executive_summary, 0.5, key_terms=_report_key_terms
                ),
                "meeting_summary": _narrative_section(
                    narratives.meeting_summary,
                    0.5,
                    extra_lists={
                        "topics_covered": _report_topics,
                        "participants_mentioned": _report_participants,
                    },
                ),
                "technical_evaluation": _narrative_section(narratives.technical_evaluation, 0.6),
                "competitive_landscape": _narrative_section(
                    narratives.competitive_landscape,
                    0.5,
                    extra_lists={"competitors_mentioned": None},
                ),
                "stage_narratives": ObjectField(
                    optional=True,
                    properties={
                        "discovery": ObjectField(
                            optional=True,
                            properties={
                                "summary": StringField(derive=_from_report(narratives.discovery_summary)),
                                "key_findings": StringField(
                                    min_length=0, derive=_from_report(narratives.discovery_findings)
                                ),
                                "concerns": _optional_text("Assessment based on available data"),
                            },
                        ),
                        "qualification": ObjectField(
                            optional=True,
                            properties={
                                "summary": StringField(derive=_from_report(narratives.qualification_summary)),
                                "bant_analysis": StringField(
                                    min_length=0, derive=_from_report(narratives.bant_analysis)
                                ),
                                "meddicc_analysis": StringField(
                                    min_length=0, derive=_from_report(narratives.meddicc_analysis)
                                ),
                            },
                        ),
                        "proposal": _stage_narrative(),
                        "negotiation": _stage_narrative(),
                        "closing": _stage_narrative(),
                    },
                ),
                "next_steps_narrative": _narrative_section(narratives.next_steps, 0.7),
            },
        ),

        # Optional layout hints for print optimization
        "layout_hints": ObjectField(
            optional=True,
            properties={
                "mode": EnumField(values=("mini", "full"), default="full"),
                "density": EnumField(values=("compact", "normal", "dense"), default="dense"),
                "sections": MapField(values=_layout_section(), derive=_optimized_layout_sections),
            },
        ),
    }
)

REQUIRED_FIELDS: list[str] = REPORT_CONTRACT.required


# ---------------------------------------------------------------------------
# Three-tab report
# ---------------------------------------------------------------------------

TABS_DEFAULT_STAGES = (
    {"stage": "Opening"},
    {"stage": "Discovery"},
    {"stage": "Presentation"},
    {"stage": "Objection Handling"},
    {"stage": "Closing"},
)

_TABS_LEVELS = ("low", "medium", "high")

TABS_REPORT_CONTRACT = ObjectField(
    properties={
        "schema_version": EnumField(values=("1.0",), default="1.0"),
        "executive_summary": ObjectField(
            properties={
                "content": StringField(
                    placeholder=narratives.TABS_EXECUTIVE_SUMMARY_PLACEHOLDER,
                    schema_min_length=200,
                ),
                "metadata": ObjectField(
                    properties={
                        "generated_at": StringField(derive=_generated_at),
                        "word_count": IntField(minimum=0, default=0, derive=_word_count),
                        "key_terms": ArrayField(items=StringField(placeholder=UNSPECIFIED)),
                        "sentiment": NumberField(minimum=-1, maximum=1, default=0),
                    }
                ),
                "key_highlights": _strings(
                    "Key insight to be determined from transcript analysis", min_items=3
                ),
                "deal_snapshot": ObjectField(
                    optional=True,
                    properties={
                        "value": _optional_text("To be determined"),
                        "stage": _optional_text("Under analysis"),
                        "next_meeting": _optional_text("Scheduling in progress"),
                        "priority": EnumField(values=("low", "medium", "high", "critical"), default="medium"),
                    },
                ),
            }
        ),
        "chance_of_sale": ObjectField(
            properties={
                "overall_score": NumberField(minimum=0, maximum=100, default=50),
                "confidence_level": EnumField(values=_TABS_LEVELS, default="medium", optional=True),
                "content": StringField(
                    placeholder=narratives.TABS_CHANCE_OF_SALE_PLACEHOLDER,
                    schema_min_length=150,
                ),
                "factors": ObjectField(
                    properties={
                        "boosters": ArrayField(
                            min_items=2,
                            items=ObjectField(
                                properties={
                                    "factor": StringField(placeholder="Positive factor {n} identified during analysis"),
                                    "impact": NumberField(minimum=1, maximum=10, default=5),
                                    "description": StringField(
                                        placeholder="Impact assessment based on transcript analysis and engagement patterns"
                                    ),
                                }
                            ),
                        ),
                        "blockers": ArrayField(
                            min_items=1,
                            items=ObjectField(
                                properties={
                                    "factor": StringField(placeholder="Challenge {n} requiring attention"),
                                    "severity": NumberField(minimum=1, maximum=10, default=4),
                                    "description": StringField(
                                        placeholder="Risk factor identified through conversation analysis"
                                    ),
                                    "mitigation": _optional_text("Mitigation strategy to be developed"),
                                }
                            ),
                        ),
                    }
                ),
                "recommendations": ObjectField(
                    properties={
                        "content": StringField(
                            placeholder=narratives.TABS_RECOMMENDATIONS_PLACEHOLDER,
                            schema_min_length=100,
                        ),
                        "next_steps": ArrayField(
                            min_items=2,
                            items=ObjectField(
                                properties={
                                    "action": StringField(placeholder="Action item {n} based on call outcome"),
                                    "timeline": _optional_text("Within 1 week"),
                                    "owner": _optional_text("Sales Rep"),
                                    "priority": EnumField(values=_TABS_LEVELS, default="medium"),
                                }
                            ),
                        ),
                    }
                ),
            }
        ),
        "sales_rep_performance": ObjectField(
            properties={
                "overall_score": NumberField(minimum=0, maximum=100, default=70),
                "content": StringField(
                    placeholder=narratives.TABS_REP_PERFORMANCE_PLACEHOLDER,
                    schema_min_length=200,
                ),
                "stage_performance": ArrayField(
                    min_items=5,
                    padding=TABS_DEFAULT_STAGES,
                    identity_key="stage",
                    items=ObjectField(
                        properties={
                            "stage": StringField(placeholder="Stage {n}"),
                            "score": NumberField(minimum=0, maximum=10, default=7),
                            "feedback": StringField(
                                placeholder=(
                                    "Performance in this stage shows competency with room for improvement. "
                                    "Specific coaching recommendations will enhance effectiveness."
                                )
                            ),
                            "strengths": _strings("Demonstrated competency in stage execution", min_items=1),
                            "improvements": _strings("Opportunity for enhanced technique application", min_items=1),
                        }
                    ),
                ),
                "coaching_areas": ObjectField(
                    properties={
                        "content": StringField(
                            placeholder=narratives.TABS_COACHING_PLACEHOLDER,
                            schema_min_length=150,
                        ),
                        "priorities": ArrayField(
                            min_items=3,
                            items=ObjectField(
                                properties={
                                    "area": StringField(placeholder="Development area {n}"),
                                    "urgency": EnumField(values=_TABS_LEVELS, default="medium"),
                                    "specific_actions": StringField(
                                        placeholder=(
                                            "Specific coaching actions for improvement in this area, "
                                            "including practice exercises and feedback mechanisms."
                                        )
                                    ),
                                    "resources": _strings("Training resource to be assigned", min_items=1),
                                }
                            ),
                        ),
                    }
                ),
            }
        ),
        "layout_hints": ObjectField(
            optional=True,
            properties={
                "mode": EnumField(values=("compact", "full"), default="full"),
                "density": EnumField(values=("loose", "normal", "dense"), default="dense"),
                "sections": ObjectField(
                    properties={
                        "executive_summary": _layout_section(True, 1, 200),
                        "chance_of_sale": _layout_section(True, 2, 150),
                        "sales_rep_performance": _layout_section(True, 1, 200),
                    }
                ),
            },
        ),
    }
)

TABS_REQUIRED_FIELDS: list[str] = TABS_REPORT_CONTRACT.required
