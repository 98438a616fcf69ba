# src/flipforge/services/stress.py
from __future__ import annotations

from typing import Literal, Sequence

from flipforge.domain.result import AnalyzeResult, StressTestScenario

BreakpointState = Literal["breaks", "holds", "untested"]


def first_break(scenarios: Sequence[StressTestScenario] | None) -> StressTestScenario | None:
    """
    First scenario, in service order, whose verdict is not BUY.

    Not the worst one: a CONDITIONAL listed before a PASS is the break.
    Recomputed locally so explanations still work when the service omits
    `breakpoints`.
    """
    for scenario in scenarios or ():
        if scenario.verdict != "BUY":
            return scenario
    return None


def first_break_name(result: AnalyzeResult) -> str | None:
    """Service breakpoint if supplied, else the locally detected one."""
    if result.breakpoints is not None:
        return result.breakpoints.first_break_scenario
    scenario = first_break(result.stress_tests)
    return scenario.name if scenario else None


def breakpoint_state(result: AnalyzeResult) -> BreakpointState:
    """
    "holds" (survived every supplied scenario) is not the same as
    "untested" (no scenarios and no service breakpoints at all).
    """
    if result.breakpoints is None and not result.stress_tests:
        return "untested"
    return "breaks" if first_break_name(result) else "holds"


def is_fragile(result: AnalyzeResult) -> bool:
    if result.breakpoints is not None:
        return result.breakpoints.is_fragile
    return first_break(result.stress_tests) is not None
