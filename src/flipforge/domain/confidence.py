# src/flipforge/domain/confidence.py
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

Confidence = Literal["HIGH", "MEDIUM", "LOW", "MISSING"]

# UI highlighting only; never used to gate submission
LOW_CONFIDENCE: frozenset[str] = frozenset({"LOW", "MISSING"})


class ConfidenceField(BaseModel):
    """
    One scalar deal input plus where it came from.

    Manual defaults and URL extraction both produce this shape, so consumers
    never branch on origin. `value is None` means missing no matter what
    `confidence` says: upstream extraction does not always keep the two in sync.
    """
    model_config = ConfigDict(frozen=True)

    value: float | None = None
    confidence: Confidence = "MISSING"
    source: str | None = None
    evidence: str | None = None

    @property
    def is_missing(self) -> bool:
        return self.value is None

    @property
    def is_low_confidence(self) -> bool:
        return self.confidence in LOW_CONFIDENCE

    def with_value(self, value: float | None) -> ConfidenceField:
        # user edit: only the value moves, provenance is kept (now stale)
        return self.model_copy(update={"value": value})
