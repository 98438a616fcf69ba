# src/flipforge/services/header.py
from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from flipforge.domain.result import AnalyzeResult, Verdict
from flipforge.domain.shield import VerdictShield, shield_for
from flipforge.services.reconcile import reconcile

STRATEGY_NAMES: Mapping[str, str] = MappingProxyType(
    {"flip": "Flip", "brrrr": "BRRRR", "wholesale": "Wholesale"}
)

NOT_A_NUMBER = "—"


def fmt_money(n: float | None) -> str:
    if n is None or not math.isfinite(n):
        return NOT_A_NUMBER
    sign = "-" if n < 0 else ""
    return f"{sign}${abs(n):,.0f}"


def fmt_pct(n: float | None) -> str:
    """Decimal ratio -> percent text (0.125 -> '12.5%')."""
    if n is None or not math.isfinite(n):
        return NOT_A_NUMBER
    return f"{n * 100:.1f}%"


def clamp(n: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, n))


@dataclass(frozen=True)
class Metric:
    key: str
    label: str
    text: str


@dataclass(frozen=True)
class HeaderView:
    verdict: Verdict
    shield: VerdictShield
    best_strategy: str
    strategy_verdict: Verdict
    confidence: int
    risk_count: int
    profit: float
    offer_text: str
    conflict: bool
    subline: str
    metrics: tuple[Metric, ...]
    summary: str


def build_header(result: AnalyzeResult) -> HeaderView:
    """
    Headline block for a result.

    Only reads and formats what the service returned; the headline is always
    `overall_verdict`.
    """
    rec = reconcile(result)

    profit = result.net_profit
    confidence = int(round(clamp(result.confidence_score, 0, 100)))
    risk_count = len(result.typed_flags)
    offer_text = fmt_money(result.max_safe_offer)

    metrics = (
        Metric("net", "Net profit", fmt_money(profit)),
        Metric("pp", "Profit %", fmt_pct(result.profit_pct)),
        Metric("rf", "Risk flags", str(risk_count)),
        Metric("offer", "Max offer", offer_text),
        Metric("roi", "Ann. ROI", fmt_pct(result.annualized_roi)),
    )

    summary = " | ".join(
        [
            result.overall_verdict,
            f"Offer {offer_text}",
            f"Net {fmt_money(profit)}",
            f"Profit {fmt_pct(result.profit_pct)}",
            f"ROI {fmt_pct(result.annualized_roi)}",
            f"Flags {risk_count}",
            f"Strategy {result.best_strategy}",
            f"Conf {confidence}/100",
        ]
    )

    return HeaderView(
        verdict=result.overall_verdict,
        shield=shield_for(result.overall_verdict),
        best_strategy=STRATEGY_NAMES[result.best_strategy],
        strategy_verdict=rec.strategy_verdict,
        confidence=confidence,
        risk_count=risk_count,
        profit=profit,
        offer_text=offer_text,
        conflict=rec.conflict,
        subline=rec.explanation,
        metrics=metrics,
        summary=summary,
    )


def offer_clipboard_text(result: AnalyzeResult) -> str:
    # bare integer so it pastes straight into an offer form
    return str(int(round(result.max_safe_offer)))
