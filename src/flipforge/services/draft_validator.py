# src/flipforge/services/draft_validator.py
from __future__ import annotations

import math
from typing import Iterable, Literal

from flipforge.domain.confidence import ConfidenceField
from flipforge.domain.draft import EDITABLE_DRAFT_FIELDS, REQUIRED_DRAFT_FIELDS, Draft
from flipforge.domain.result import AnalyzeRequest

Highlight = Literal["missing", "low_confidence", "ok"]

SOURCE_BLOCKED_MARKER = "SOURCE_BLOCKED"


def _positive(f: ConfidenceField) -> bool:
    return f.value is not None and math.isfinite(f.value) and f.value > 0


def _non_negative(f: ConfidenceField) -> bool:
    return f.value is not None and math.isfinite(f.value) and f.value >= 0


# field -> domain bound; order is the highlight/report order
_REQUIRED_RULES = (
    ("purchase_price", _positive),
    ("arv", _positive),
    ("rehab_budget", _non_negative),
)


def invalid_fields(draft: Draft | None) -> list[str]:
    """
    Required fields that are missing or out of bounds, in fixed order.

    A null value counts as missing whatever its stated confidence.
    """
    if draft is None:
        return list(REQUIRED_DRAFT_FIELDS)
    return [name for name, ok in _REQUIRED_RULES if not ok(draft.get_field(name))]


def can_finalize(draft: Draft | None) -> bool:
    """
    True iff purchase_price > 0, arv > 0 and rehab_budget >= 0.

    Confidence is deliberately ignored here: low or missing confidence only
    drives highlighting, the user decides whether to trust the number.
    """
    return draft is not None and not invalid_fields(draft)


def low_confidence_fields(draft: Draft) -> list[str]:
    return [name for name in EDITABLE_DRAFT_FIELDS if draft.get_field(name).is_low_confidence]


def is_source_blocked(draft: Draft | None) -> bool:
    if draft is None or not draft.source:
        return False
    return SOURCE_BLOCKED_MARKER in draft.source.upper()


def highlight(draft: Draft, missing_fields: Iterable[str] = ()) -> dict[str, Highlight]:
    """
    Per-field input highlight.

    `missing_fields` comes from the service's 422 response; it is merged with
    locally invalid fields, and "missing" wins over "low_confidence".
    """
    missing = set(missing_fields) | set(invalid_fields(draft))
    out: dict[str, Highlight] = {}
    for name in EDITABLE_DRAFT_FIELDS:
        if name in missing:
            out[name] = "missing"
        elif draft.get_field(name).is_low_confidence:
            out[name] = "low_confidence"
        else:
            out[name] = "ok"
    return out


def can_analyze(request: AnalyzeRequest) -> bool:
    """Same bounds for the manual (non-draft) analyze form."""
    nums = (request.purchase_price, request.arv, request.rehab_budget)
    if not all(math.isfinite(n) for n in nums):
        return False
    return request.purchase_price > 0 and request.arv > 0 and request.rehab_budget >= 0
