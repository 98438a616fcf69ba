# src/flipforge/domain/draft.py
from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from flipforge.adapters.config import config
from flipforge.domain.confidence import ConfidenceField


REQUIRED_DRAFT_FIELDS: tuple[str, ...] = ("purchase_price", "arv", "rehab_budget")
EDITABLE_DRAFT_FIELDS: tuple[str, ...] = (*REQUIRED_DRAFT_FIELDS, "est_monthly_rent")


def coerce_input_number(val: Any) -> float | None:
    """
    Turn a raw form value into a number or None.

    Blank strings, None and non-finite values all mean "no value"; "$150,000"
    and "150000" both parse.
    """
    if val is None:
        return None
    if isinstance(val, bool):
        return None
    if isinstance(val, (int, float)):
        f = float(val)
        return f if math.isfinite(f) else None
    if isinstance(val, str):
        s = val.strip().replace(",", "").replace("$", "")
        if not s:
            return None
        try:
            f = float(s)
        except ValueError:
            return None
        return f if math.isfinite(f) else None
    return None


class Draft(BaseModel):
    """
    A deal under construction, awaiting confirmation before analysis.

    Built by the service's draft-from-url endpoint or by `Draft.manual()`.
    Edits produce new drafts; the draft is discarded once finalize succeeds.
    """
    model_config = ConfigDict(frozen=True, extra="allow")

    # identity
    source: str = "MANUAL"
    url: str | None = None
    address: str | None = None
    zip: str | None = None
    region: str | None = None

    # required inputs
    purchase_price: ConfidenceField = Field(default_factory=ConfidenceField)
    arv: ConfidenceField = Field(default_factory=ConfidenceField)
    rehab_budget: ConfidenceField = Field(default_factory=ConfidenceField)

    # optional input
    est_monthly_rent: ConfidenceField = Field(default_factory=ConfidenceField)

    # assumptions
    closing_cost_pct: float = Field(default_factory=lambda: config.DEFAULT_CLOSING_COST_PCT)
    selling_cost_pct: float = Field(default_factory=lambda: config.DEFAULT_SELLING_COST_PCT)
    holding_months: float = Field(default_factory=lambda: float(config.DEFAULT_HOLDING_MONTHS))
    annual_interest_rate: float = Field(default_factory=lambda: config.DEFAULT_ANNUAL_INTEREST_RATE)
    loan_to_cost_pct: float = Field(default_factory=lambda: config.DEFAULT_LOAN_TO_COST_PCT)
    required_profit_margin_pct: float = Field(
        default_factory=lambda: config.DEFAULT_REQUIRED_PROFIT_MARGIN_PCT
    )

    # transparency
    notes: list[str] = Field(default_factory=list)
    signals: list[str] = Field(default_factory=list)

    @field_validator("purchase_price", "arv", "rehab_budget", "est_monthly_rent", mode="before")
    @classmethod
    def _null_field_is_missing(cls, v: Any) -> Any:
        # older extraction responses send `null` instead of a MISSING field
        if v is None:
            return ConfidenceField()
        return v

    @field_validator("source", mode="before")
    @classmethod
    def _null_source(cls, v: Any) -> Any:
        return "UNKNOWN" if v is None else v

    @field_validator("notes", "signals", mode="before")
    @classmethod
    def _null_list_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @classmethod
    def manual(cls, **identity: Any) -> Draft:
        identity.setdefault("source", "MANUAL")
        return cls(**identity)

    def get_field(self, name: str) -> ConfidenceField:
        if name not in EDITABLE_DRAFT_FIELDS:
            raise KeyError(f"Unknown draft field: {name}")
        return getattr(self, name)

    def with_field_value(self, name: str, value: Any) -> Draft:
        current = self.get_field(name)
        return self.model_copy(update={name: current.with_value(coerce_input_number(value))})

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
