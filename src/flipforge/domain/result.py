# src/flipforge/domain/result.py
from __future__ import annotations

from types import MappingProxyType
from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, model_validator

Verdict = Literal["BUY", "CONDITIONAL", "PASS"]
Strategy = Literal["flip", "brrrr", "wholesale"]
Severity = Literal["critical", "moderate", "mild"]
BreakReason = Literal["NEGATIVE_PROFIT", "BELOW_MARGIN", "VERDICT_FAIL"]

# Lower rank = higher priority. The only severity ordering in the codebase.
SEVERITY_RANK: Mapping[str, int] = MappingProxyType({"critical": 0, "moderate": 1, "mild": 2})


def severity_rank(severity: str) -> int:
    return SEVERITY_RANK.get(severity, len(SEVERITY_RANK))


class RiskFlag(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    code: str
    label: str
    severity: Severity


class StressTestScenario(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    name: str
    arv: float = 0.0
    rehab_budget: float = 0.0
    holding_months: float = 0.0
    net_profit: float = 0.0
    profit_pct: float = 0.0
    annualized_roi: float = 0.0
    verdict: Verdict


class Breakpoints(BaseModel):
    """
    Service-computed stress breakpoint.

    `first_break_scenario is None` means the deal held under every supplied
    scenario; it does not mean no scenarios were run.
    """
    model_config = ConfigDict(frozen=True, extra="allow")

    first_break_scenario: str | None = None
    break_reason: BreakReason | None = None
    is_fragile: bool = False


class RehabReality(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    severity: str  # LIGHT | MEDIUM | HEAVY | EXTREME
    rehab_ratio: float = 0.0


class AllowedOutputs(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    lender_report: bool | None = None
    negotiation_script: bool | None = None


# legacy / camelCase spellings seen from older service builds -> canonical field
_LEGACY_KEYS: Mapping[str, str] = MappingProxyType(
    {
        "verdictReason": "verdict_reason",
        "allowedOutputs": "allowed_outputs",
        "typedFlags": "typed_flags",
        "stressTests": "stress_tests",
        "bestStrategy": "best_strategy",
        "overallVerdict": "overall_verdict",
        "rehabReality": "rehab_reality",
    }
)

_LIST_FIELDS = ("risk_flags", "typed_flags", "stress_tests", "notes")


class AnalyzeResult(BaseModel):
    """
    Analysis service response.

    Opaque to this client: nothing here recomputes profit or scores, it only
    carries what the service said. Immutable once parsed; views are derived
    from it, never written back.
    """
    model_config = ConfigDict(frozen=True, extra="allow")

    # financial outputs
    total_project_cost: float = 0.0
    gross_profit: float = 0.0
    net_profit: float = 0.0
    profit_pct: float = 0.0
    annualized_roi: float = 0.0
    max_safe_offer: float = 0.0

    # strategies
    flip_score: float = 0.0
    brrrr_score: float = 0.0
    wholesale_score: float = 0.0
    best_strategy: Strategy
    overall_verdict: Verdict
    flip_verdict: Verdict
    brrrr_verdict: Verdict
    wholesale_verdict: Verdict

    confidence_score: float = 0.0
    risk_flags: list[str] = Field(default_factory=list)
    typed_flags: list[RiskFlag] = Field(default_factory=list)
    stress_tests: list[StressTestScenario] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)

    rent_to_cost_ratio: float | None = None
    assignment_spread: float | None = None

    rehab_reality: RehabReality | None = None
    breakpoints: Breakpoints | None = None
    verdict_reason: str | None = None
    allowed_outputs: AllowedOutputs | None = None

    @model_validator(mode="before")
    @classmethod
    def _normalize_wire(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        cleaned = dict(data)

        for legacy, canonical in _LEGACY_KEYS.items():
            if legacy in cleaned:
                value = cleaned.pop(legacy)
                if cleaned.get(canonical) in (None, ""):
                    cleaned[canonical] = value

        for key in _LIST_FIELDS:
            if cleaned.get(key) is None:
                cleaned.pop(key, None)

        reason = cleaned.get("verdict_reason")
        if isinstance(reason, str):
            reason = reason.strip()
        cleaned["verdict_reason"] = reason or None

        return cleaned

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class AnalyzeRequest(BaseModel):
    """
    Manual (legacy) analyze payload for POST /api/analyze.

    Assumptions left as None are omitted so the service applies its defaults.
    """
    model_config = ConfigDict(extra="allow")

    purchase_price: float
    arv: float
    rehab_budget: float

    closing_cost_pct: float | None = None
    selling_cost_pct: float | None = None
    holding_months: float | None = None

    annual_interest_rate: float | None = None
    loan_to_cost_pct: float | None = None
    required_profit_margin_pct: float | None = None

    est_monthly_rent: float | None = None
    region: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload = self.model_dump(mode="json", exclude_none=True)
        # rent is sent explicitly even when blank
        payload["est_monthly_rent"] = self.est_monthly_rent
        return payload
