# src/flipforge/domain/shield.py
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal, Mapping

Tone = Literal["emerald", "amber", "red"]


@dataclass(frozen=True)
class VerdictShield:
    label: str
    subtitle: str
    tone: Tone


SHIELD: Mapping[str, VerdictShield] = MappingProxyType(
    {
        "BUY": VerdictShield(
            label="BUY",
            subtitle="Numbers look solid. Move to comps + scope validation.",
            tone="emerald",
        ),
        "CONDITIONAL": VerdictShield(
            label="CONDITIONAL",
            subtitle="Close, but something's tight. Validate assumptions before offering.",
            tone="amber",
        ),
        "PASS": VerdictShield(
            label="PASS",
            subtitle="Doesn't meet your safety margin. Don't force it.",
            tone="red",
        ),
    }
)

FALLBACK_SHIELD: VerdictShield = SHIELD["CONDITIONAL"]


def shield_for(verdict: str | None) -> VerdictShield:
    """Display metadata for a verdict; unknown or missing keys get the CONDITIONAL entry."""
    if verdict is None:
        return FALLBACK_SHIELD
    return SHIELD.get(verdict, FALLBACK_SHIELD)
