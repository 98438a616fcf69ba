# src/flipforge/api/http.py
from __future__ import annotations

from fastapi import FastAPI

from flipforge.adapters.logging_utils import get_logger
from flipforge.domain.result import AnalyzeResult
from flipforge.services.draft_validator import (
    can_finalize,
    highlight,
    invalid_fields,
    is_source_blocked,
    low_confidence_fields,
)
from flipforge.services.header import build_header
from flipforge.services.integrity_gate import allowed_outputs
from flipforge.services.reconcile import why_bullets
from flipforge.services.risk import dominant_flag
from flipforge.services.stress import breakpoint_state, first_break
from .schemas import (
    DraftCheckRequest,
    DraftView,
    GateOut,
    MetricOut,
    ResultView,
    ShieldOut,
)

logger = get_logger(__name__)

app = FastAPI(title="FlipForge views")


def build_result_view(result: AnalyzeResult) -> ResultView:
    header = build_header(result)
    gate = allowed_outputs(result)

    return ResultView(
        verdict=header.verdict,
        shield=ShieldOut(
            label=header.shield.label,
            subtitle=header.shield.subtitle,
            tone=header.shield.tone,
        ),
        best_strategy=header.best_strategy,
        strategy_verdict=header.strategy_verdict,
        confidence=header.confidence,
        risk_count=header.risk_count,
        conflict=header.conflict,
        explanation=header.subline,
        metrics=[MetricOut(key=m.key, label=m.label, text=m.text) for m in header.metrics],
        summary=header.summary,
        why_bullets=why_bullets(result),
        gate=GateOut(
            lender_report=gate.lender_report,
            negotiation_script=gate.negotiation_script,
            suppressed=gate.suppressed,
            status_line=gate.status_line,
        ),
        dominant_flag=dominant_flag(result.typed_flags),
        first_break=first_break(result.stress_tests),
        breakpoint_state=breakpoint_state(result),
        notes=list(result.notes),
    )


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/views/result", response_model=ResultView)
def result_view(result: AnalyzeResult) -> ResultView:
    """
    Display-ready view of an analysis result: header, conflict line,
    "why" bullets and the integrity gate.
    """
    view = build_result_view(result)
    logger.info(
        "result_view",
        extra={"context": {"verdict": view.verdict, "conflict": view.conflict, "suppressed": view.gate.suppressed}},
    )
    return view


@app.post("/views/draft", response_model=DraftView)
def draft_view(body: DraftCheckRequest) -> DraftView:
    draft = body.draft
    return DraftView(
        can_finalize=can_finalize(draft),
        invalid_fields=invalid_fields(draft),
        low_confidence_fields=low_confidence_fields(draft),
        source_blocked=is_source_blocked(draft),
        highlights=dict(highlight(draft, body.missing_fields)),
    )
