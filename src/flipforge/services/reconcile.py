# src/flipforge/services/reconcile.py
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from flipforge.domain.result import AnalyzeResult, Verdict
from flipforge.services.risk import dominant_flag
from flipforge.services.stress import first_break, first_break_name

_STRATEGY_VERDICT_FIELD: Mapping[str, str] = MappingProxyType(
    {
        "flip": "flip_verdict",
        "brrrr": "brrrr_verdict",
        "wholesale": "wholesale_verdict",
    }
)

FALLBACK_EXPLANATION = "Overall verdict overrides strategy due to risk + stress-test fragility."


@dataclass(frozen=True)
class Reconciliation:
    strategy_verdict: Verdict
    conflict: bool
    explanation: str


def strategy_verdict(result: AnalyzeResult) -> Verdict:
    return getattr(result, _STRATEGY_VERDICT_FIELD[result.best_strategy])


def _conflict_clauses(result: AnalyzeResult) -> list[str]:
    # fixed order: fragility, service breakpoint, dominant flag
    clauses: list[str] = []

    scenario = first_break(result.stress_tests)
    if scenario is not None:
        clauses.append(f'Breaks under "{scenario.name}" stress ({scenario.verdict}).')

    if result.breakpoints is not None and result.breakpoints.first_break_scenario:
        clauses.append(f"First breakpoint: {result.breakpoints.first_break_scenario}.")

    flag = dominant_flag(result.typed_flags)
    if flag is not None:
        clauses.append(f"Top risk: {flag.label} ({flag.severity}).")

    return clauses


def reconcile(result: AnalyzeResult) -> Reconciliation:
    """
    Compare the headline verdict with the best strategy's own verdict.

    `overall_verdict` is authoritative (risk- and stress-adjusted); the
    strategy verdict only reflects its score threshold. When they disagree
    the user gets one line saying why:

      1. the service's `verdict_reason`, verbatim, if it sent one;
      2. otherwise the locally derived clauses that apply, space-joined;
      3. otherwise a generic override sentence.

    No disagreement means an empty explanation.
    """
    sv = strategy_verdict(result)
    conflict = result.overall_verdict != sv
    if not conflict:
        return Reconciliation(strategy_verdict=sv, conflict=False, explanation="")

    if result.verdict_reason:
        return Reconciliation(strategy_verdict=sv, conflict=True, explanation=result.verdict_reason)

    clauses = _conflict_clauses(result) or [FALLBACK_EXPLANATION]
    return Reconciliation(strategy_verdict=sv, conflict=True, explanation=" ".join(clauses))


def why_bullets(result: AnalyzeResult) -> list[str]:
    """
    "Why this verdict" list. Built for every result, conflict or not.
    """
    bullets: list[str] = []

    if result.net_profit <= 0:
        bullets.append("Deal loses money in the base case.")
    else:
        bullets.append("Deal is profitable assuming inputs are accurate.")

    rehab = result.rehab_reality
    if rehab is not None:
        bullets.append(
            f"Rehab Reality: {rehab.severity} ({rehab.rehab_ratio * 100:.0f}% of purchase price)."
        )

    name = first_break_name(result)
    if name:
        bullets.append(f"Breakpoint: {name} is the first scenario that kills this deal.")
    else:
        bullets.append("Breakpoint: Deal holds up under mild stress.")

    # authoritative line goes first
    if result.verdict_reason:
        bullets.insert(0, result.verdict_reason)

    return bullets
