# src/flipforge/api/schemas.py
from __future__ import annotations

from pydantic import BaseModel, Field

from flipforge.domain.draft import Draft
from flipforge.domain.result import RiskFlag, StressTestScenario


# --------------------------------------------
# Result view
# --------------------------------------------

class ShieldOut(BaseModel):
    label: str
    subtitle: str
    tone: str


class MetricOut(BaseModel):
    key: str
    label: str
    text: str


class GateOut(BaseModel):
    lender_report: bool
    negotiation_script: bool
    suppressed: list[str] = Field(default_factory=list)
    status_line: str


class ResultView(BaseModel):
    """
    Everything the result screen renders, derived from one AnalyzeResult.
    """
    verdict: str
    shield: ShieldOut
    best_strategy: str
    strategy_verdict: str
    confidence: int
    risk_count: int

    conflict: bool
    explanation: str = ""

    metrics: list[MetricOut]
    summary: str
    why_bullets: list[str]

    gate: GateOut
    dominant_flag: RiskFlag | None = None
    first_break: StressTestScenario | None = None
    breakpoint_state: str
    notes: list[str] = Field(default_factory=list)


# --------------------------------------------
# Draft view
# --------------------------------------------

class DraftCheckRequest(BaseModel):
    draft: Draft
    # from a previous finalize 422, if any
    missing_fields: list[str] = Field(default_factory=list)


class DraftView(BaseModel):
    can_finalize: bool
    invalid_fields: list[str]
    low_confidence_fields: list[str]
    source_blocked: bool
    highlights: dict[str, str]
