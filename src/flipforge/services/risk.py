# src/flipforge/services/risk.py
from __future__ import annotations

from typing import Sequence

from flipforge.domain.result import RiskFlag, severity_rank


def rank_flags(flags: Sequence[RiskFlag]) -> list[RiskFlag]:
    # sorted() is stable: equal severities keep the service's relevance order
    return sorted(flags, key=lambda f: severity_rank(f.severity))


def dominant_flag(flags: Sequence[RiskFlag] | None) -> RiskFlag | None:
    """Most severe flag, first-listed among ties. None for no flags."""
    if not flags:
        return None
    return rank_flags(flags)[0]
