"""Report artifact and report API schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ArtifactModel(BaseModel):
    """Base for artifact parts: wire names may be camelCase, attributes are snake_case."""

    model_config = ConfigDict(populate_by_name=True)


Handled = Literal["yes", "no", "partial"]
Level = Literal["High", "Medium", "Low"]


# ---------------------------------------------------------------------------
# Full report (v3)
# ---------------------------------------------------------------------------

class Person(ArtifactModel):
    name: str
    role: str
    team: str | None = None
    company: str | None = None


class MetaFull(ArtifactModel):
    date: str
    time: str
    duration: str
    rep: Person
    prospect: Person
    channel: str
    transcript_quality: str = Field(..., alias="transcriptQuality")


class ObjectionHandled(ArtifactModel):
    label: str
    handled: Handled


class ActionItem(ArtifactModel):
    id: str
    title: str
    owner: str
    due: str
    priority: Literal["Low", "Medium", "High"]


class DealHealth(ArtifactModel):
    score: int = Field(..., ge=0, le=100)
    rationale: str


class RiskConcern(ArtifactModel):
    area: str
    impact: Level
    likelihood: Level
    rationale: str


class DealHealthSummary(ArtifactModel):
    score: int = Field(..., ge=0, le=100)
    status: str


class TextValue(ArtifactModel):
    value: str


class ListValue(ArtifactModel):
    value: list[str]


class Meddicc(ArtifactModel):
    metrics: ListValue
    economic_buyer: TextValue = Field(..., alias="economicBuyer")
    decision_criteria: ListValue = Field(..., alias="decisionCriteria")
    decision_process: TextValue = Field(..., alias="decisionProcess")
    identify_pain: TextValue = Field(..., alias="identifyPain")
    competition: ListValue
    champion: TextValue


class BantRow(ArtifactModel):
    key: str
    status: str
    notes: str


class Bant(ArtifactModel):
    rows: list[BantRow] = Field(..., min_length=4)


class StageEvaluation(ArtifactModel):
    stage: str
    handled: Handled
    note: str
    score: int = Field(..., ge=0, le=10)


class PivotalPoint(ArtifactModel):
    ts: str
    reason: str
    quote: str


class StageAction(ArtifactModel):
    id: str
    title: str
    owner: str
    due: str


class StageDeepDive(ArtifactModel):
    stage_name: str = Field(..., alias="stageName")
    objective: str
    indicators: list[str] = Field(..., min_length=1)
    observed: list[str] = Field(..., min_length=1)
    score: int = Field(..., ge=0, le=100)
    weight: int = Field(..., ge=0, le=100)
    mistakes: list[str]
    what_to_say: list[str] = Field(..., alias="whatToSay")
    positives: list[str]
    coaching: list[str]
    quick_fix: str = Field(..., alias="quickFix")
    actions: list[StageAction]


class NarrativeMetadata(ArtifactModel):
    generated_at: str
    word_count: int = Field(..., ge=0)
    key_terms: list[str]
    sentiment: float = Field(..., ge=-1, le=1)
    topics_covered: list[str] | None = None
    participants_mentioned: list[str] | None = None
    competitors_mentioned: list[str] | None = None


class NarrativeSection(ArtifactModel):
    content: str
    metadata: NarrativeMetadata


class StageNarrative(ArtifactModel):
    summary: str
    key_findings: str
    concerns: str


class QualificationNarrative(ArtifactModel):
    summary: str
    bant_analysis: str
    meddicc_analysis: str


class StageNarratives(ArtifactModel):
    discovery: StageNarrative
    qualification: QualificationNarrative
    proposal: StageNarrative | None = None
    negotiation: StageNarrative | None = None
    closing: StageNarrative | None = None


class Narratives(ArtifactModel):
    executive_summary: NarrativeSection
    meeting_summary: NarrativeSection
    technical_evaluation: NarrativeSection
    competitive_landscape: NarrativeSection
    stage_narratives: StageNarratives
    next_steps_narrative: NarrativeSection


class LayoutSectionHint(ArtifactModel):
    allow_page_break_inside: bool
    print_columns: int = Field(..., ge=1, le=3)
    min_chars: int = Field(..., ge=0)


class LayoutHints(ArtifactModel):
    mode: Literal["mini", "full"]
    density: Literal["compact", "normal", "dense"]
    sections: dict[str, LayoutSectionHint]


class ReportArtifact(ArtifactModel):
    """
    The complete, normalized sales call report.

    Field names follow the printed page layout: ``tp_`` is the title page,
    ``p1_`` to ``p10_`` are report pages and ``apx_`` is the appendix.
    """

    tp_title: str
    tp_subtitle: str
    tp_deal: str
    tp_session_id: str = Field(..., alias="tp_sessionId")

    p1_exec_headline: str
    p1_exec_synopsis: str
    p1_meta_full: MetaFull
    p1_key_points: list[str] = Field(..., min_length=3)
    p1_pains: list[str] = Field(..., min_length=2)
    p1_buying_signals: list[str] = Field(..., min_length=2)
    p1_objections_handled: list[ObjectionHandled] = Field(..., min_length=2)
    p1_action_items: list[ActionItem] = Field(..., min_length=3)
    p1_deal_health: DealHealth

    p2_context_snapshot: str
    p2_high_priority: list[str] = Field(..., min_length=3)
    p2_medium_priority: list[str] = Field(..., min_length=2)
    p2_info_items: list[str] = Field(..., min_length=3)
    p2_risks_concerns: list[RiskConcern] = Field(..., min_length=3)
    p2_short_summary: str

    p3_deal_health_summary: DealHealthSummary
    p3_meddicc: Meddicc
    p3_bant: Bant
    p3_missed_opportunities: list[str] = Field(..., min_length=2)
    p3_improvements: list[str] = Field(..., min_length=2)
    p3_short_reco: str

    p4_stage_eval: list[StageEvaluation] = Field(..., min_length=11, max_length=11)
    p4_pivotal_points: list[PivotalPoint] = Field(..., min_length=1)
    p4_takeaway: str

    p5_stage_a: list[StageDeepDive] = Field(..., min_length=1)
    p5_stage_b: list[StageDeepDive] = Field(..., min_length=1)
    p6_stage_c: list[StageDeepDive] = Field(..., min_length=1)
    p6_stage_d: list[StageDeepDive] = Field(..., min_length=1)
    p7_stage_e: list[StageDeepDive] = Field(..., min_length=1)
    p7_stage_f: list[StageDeepDive] = Field(..., min_length=1)
    p8_stage_g: list[StageDeepDive] = Field(..., min_length=1)
    p8_stage_h: list[StageDeepDive] = Field(..., min_length=1)
    p9_stage_i: list[StageDeepDive] = Field(..., min_length=1)
    p9_stage_j: list[StageDeepDive] = Field(..., min_length=1)
    p10_stage_k: list[StageDeepDive] = Field(..., min_length=1)
    p10_stage_l: list[StageDeepDive] = Field(..., min_length=1)

    apx_scoring_rubric: list[str] = Field(..., min_length=4)
    apx_data_flags: list[str] = Field(..., min_length=1)

    narratives: Narratives | None = None
    layout_hints: LayoutHints | None = None

    def to_wire(self) -> dict[str, Any]:
        """Serialize with the wire (camelCase) field names, omitting absent optionals."""
        return self.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Three-tab report
# ---------------------------------------------------------------------------

TabsLevel = Literal["low", "medium", "high"]


class TabsMetadata(ArtifactModel):
    generated_at: str
    word_count: int = Field(..., ge=0)
    key_terms: list[str]
    sentiment: float = Field(..., ge=-1, le=1)


class DealSnapshot(ArtifactModel):
    value: str
    stage: str
    next_meeting: str
    priority: Literal["low", "medium", "high", "critical"]


class TabsExecutiveSummary(ArtifactModel):
    content: str
    metadata: TabsMetadata
    key_highlights: list[str] = Field(..., min_length=3)
    deal_snapshot: DealSnapshot


class Booster(ArtifactModel):
    factor: str
    impact: float = Field(..., ge=1, le=10)
    description: str


class Blocker(ArtifactModel):
    factor: str
    severity: float = Field(..., ge=1, le=10)
    description: str
    mitigation: str


class SaleFactors(ArtifactModel):
    boosters: list[Booster] = Field(..., min_length=2)
    blockers: list[Blocker] = Field(..., min_length=1)


class NextStep(ArtifactModel):
    action: str
    timeline: str
    owner: str
    priority: TabsLevel


class Recommendations(ArtifactModel):
    content: str
    next_steps: list[NextStep] = Field(..., min_length=2)


class ChanceOfSale(ArtifactModel):
    overall_score: float = Field(..., ge=0, le=100)
    confidence_level: TabsLevel
    content: str
    factors: SaleFactors
    recommendations: Recommendations


class StagePerformance(ArtifactModel):
    stage: str
    score: float = Field(..., ge=0, le=10)
    feedback: str
    strengths: list[str] = Field(..., min_length=1)
    improvements: list[str] = Field(..., min_length=1)


class CoachingPriority(ArtifactModel):
    area: str
    urgency: TabsLevel
    specific_actions: str
    resources: list[str] = Field(..., min_length=1)


class CoachingAreas(ArtifactModel):
    content: str
    priorities: list[CoachingPriority] = Field(..., min_length=3)


class SalesRepPerformance(ArtifactModel):
    overall_score: float = Field(..., ge=0, le=100)
    content: str
    stage_performance: list[StagePerformance] = Field(..., min_length=5)
    coaching_areas: CoachingAreas


class TabsLayoutSections(ArtifactModel):
    executive_summary: LayoutSectionHint
    chance_of_sale: LayoutSectionHint
    sales_rep_performance: LayoutSectionHint


class TabsLayoutHints(ArtifactModel):
    mode: Literal["compact", "full"]
    density: Literal["loose", "normal", "dense"]
    sections: TabsLayoutSections


class TabsReportArtifact(ArtifactModel):
    """Three-tab report: executive summary, chance of sale and rep performance."""

    schema_version: Literal["1.0"]
    executive_summary: TabsExecutiveSummary
    chance_of_sale: ChanceOfSale
    sales_rep_performance: SalesRepPerformance
    layout_hints: TabsLayoutHints | None = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# API schemas
# ---------------------------------------------------------------------------

class GenerationStatusResponse(BaseModel):
    """Schema for the generation record of one report kind."""

    session_id: str = Field(..., description="Session ID")
    report_kind: str = Field(..., description="Report kind (v3 or tabs)")
    status: str = Field(..., description="Generation status (queued/running/ready/failed)")
    attempts: int = Field(..., description="Number of generate invocations")
    report: dict[str, Any] | None = Field(None, description="Report artifact when ready")
    last_error: str | None = Field(None, description="Failure message when failed")
    updated_at: datetime = Field(..., description="Last transition timestamp")

    model_config = {"from_attributes": True}


class TriggerResponse(BaseModel):
    """Schema for the outcome of a generation trigger."""

    accepted: bool = Field(..., description="Whether the trigger produced or found a report")
    status: str | None = Field(None, description="Generation status after the trigger")
    error: str | None = Field(None, description="Failure message when not accepted")
