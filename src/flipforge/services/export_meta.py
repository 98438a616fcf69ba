# src/flipforge/services/export_meta.py
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from flipforge.adapters.config import config
from flipforge.domain.draft import Draft
from flipforge.domain.result import AnalyzeRequest


class ExportMeta(BaseModel):
    """
    Read-only context printed on an exported document.

    Presentation only; none of these values feed back into underwriting.
    """
    model_config = ConfigDict(frozen=True)

    # identity
    listing_url: str | None = None
    property_address: str | None = None

    # deal snapshot
    purchase_price: float | None = None
    arv: float | None = None
    rehab_budget: float | None = None
    est_monthly_rent: float | None = None

    # financing assumptions
    holding_months: float | None = None
    interest_rate_pct: float | None = None
    ltc_pct: float | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


def _blank_to_none(s: str | None) -> str | None:
    if s is None:
        return None
    s = s.strip()
    return s or None


def _fraction_as_pct(v: float | None) -> float | None:
    # assumptions are stored as fractions; the report prints percents
    return None if v is None else round(v * 100, 4)


def _financing(basis: Draft | AnalyzeRequest | None) -> tuple[float, float, float]:
    """Holding months, interest %, LTC % from the basis, config defaults for gaps."""
    months = getattr(basis, "holding_months", None)
    rate = getattr(basis, "annual_interest_rate", None)
    ltc = getattr(basis, "loan_to_cost_pct", None)
    return (
        float(config.DEFAULT_HOLDING_MONTHS) if months is None else months,
        _fraction_as_pct(config.DEFAULT_ANNUAL_INTEREST_RATE if rate is None else rate),
        _fraction_as_pct(config.DEFAULT_LOAN_TO_COST_PCT if ltc is None else ltc),
    )


def build_export_meta(
    *,
    draft: Draft | None = None,
    manual: AnalyzeRequest | None = None,
    listing_url: str | None = None,
    manual_address: str | None = None,
    holding_months: float | None = None,
    interest_rate_pct: float | None = None,
    ltc_pct: float | None = None,
) -> ExportMeta:
    """
    Snapshot the deal for an export request.

    Draft values win when a draft exists (URL flow); otherwise the manual
    inputs are used. The draft's address wins over a typed one. Financing
    values passed in explicitly win; otherwise they come from the basis, then
    from the configured defaults (6 months, 10%, 80%).
    """
    if draft is not None:
        purchase = draft.purchase_price.value
        arv = draft.arv.value
        rehab = draft.rehab_budget.value
        rent = draft.est_monthly_rent.value
        address = _blank_to_none(draft.address) or _blank_to_none(manual_address)
    elif manual is not None:
        purchase = manual.purchase_price
        arv = manual.arv
        rehab = manual.rehab_budget
        rent = manual.est_monthly_rent
        address = _blank_to_none(manual_address)
    else:
        purchase = arv = rehab = rent = None
        address = _blank_to_none(manual_address)

    months, rate, ltc = _financing(draft if draft is not None else manual)

    return ExportMeta(
        listing_url=_blank_to_none(listing_url),
        property_address=address,
        purchase_price=purchase,
        arv=arv,
        rehab_budget=rehab,
        est_monthly_rent=rent,
        holding_months=months if holding_months is None else holding_months,
        interest_rate_pct=rate if interest_rate_pct is None else interest_rate_pct,
        ltc_pct=ltc if ltc_pct is None else ltc_pct,
    )
