# src/flipforge/services/session.py
from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from loguru import logger

from flipforge.adapters.analysis_client import (
    AnalysisClient,
    AnalysisServiceError,
    ExportError,
    write_document,
)
from flipforge.domain.draft import Draft
from flipforge.domain.result import AnalyzeRequest, AnalyzeResult
from flipforge.services.draft_validator import (
    can_analyze,
    can_finalize,
    highlight,
    invalid_fields,
    is_source_blocked,
)
from flipforge.services.export_meta import ExportMeta, build_export_meta
from flipforge.services.integrity_gate import OutputGate, allowed_outputs


class SessionBusyError(RuntimeError):
    """A request for this session is already in flight."""


class OutputSuppressedError(RuntimeError):
    """The integrity gate has locked this output for the current result."""


class DealSession:
    """
    State behind one deal screen.

    Mirrors what the UI holds: the draft being edited, the latest result,
    and the messages shown next to each form. Lives for one session only.

    Error categories:
      - local validation: `invalid_fields` + message, no network call
      - service 422: `missing_fields` + message, draft kept
      - transport/server: message only, previous result kept
    """

    def __init__(self, client: AnalysisClient) -> None:
        self.client = client

        self.listing_url: str = ""
        self.manual_address: str = ""

        self.draft: Draft | None = None
        self.missing_fields: list[str] = []
        self.invalid_fields: list[str] = []

        self.result: AnalyzeResult | None = None
        # what produced `result`; feeds the export snapshot only
        self._basis: Draft | AnalyzeRequest | None = None

        self.draft_error: str = ""
        self.analyze_error: str = ""
        self.export_error: str = ""

        self._busy: str | None = None

    # ------------------------------------------------------------------
    # In-flight guard
    # ------------------------------------------------------------------
    @property
    def busy(self) -> bool:
        return self._busy is not None

    @contextmanager
    def _in_flight(self, action: str) -> Iterator[None]:
        if self._busy is not None:
            raise SessionBusyError(f"{self._busy} already in progress")
        self._busy = action
        try:
            yield
        finally:
            self._busy = None

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------
    @property
    def can_finalize(self) -> bool:
        return can_finalize(self.draft)

    @property
    def gate(self) -> OutputGate | None:
        # re-evaluated from whatever result is current; no stored overrides
        return allowed_outputs(self.result) if self.result is not None else None

    def field_highlights(self) -> dict[str, str]:
        if self.draft is None:
            return {}
        return dict(highlight(self.draft, self.missing_fields))

    def _clear_messages(self) -> None:
        self.draft_error = ""
        self.analyze_error = ""
        self.missing_fields = []
        self.invalid_fields = []

    # ------------------------------------------------------------------
    # Draft flow
    # ------------------------------------------------------------------
    def fetch_draft(self, url: str) -> Draft | None:
        self._clear_messages()
        self.listing_url = url.strip()

        if not self.listing_url:
            self.draft_error = "Paste a listing URL first."
            return None

        with self._in_flight("draft"):
            try:
                draft = self.client.draft_from_url(self.listing_url)
            except AnalysisServiceError as e:
                logger.warning("Draft fetch failed", status=e.status)
                self.draft_error = str(e) or "Failed to draft from URL."
                self.draft = None
                return None

        logger.info("Draft fetched", source=draft.source, blocked=is_source_blocked(draft))
        self.draft = draft
        self.result = None
        self._basis = None
        return draft

    def start_manual_draft(self, **identity: Any) -> Draft:
        self._clear_messages()
        self.draft = Draft.manual(**identity)
        return self.draft

    def edit_field(self, name: str, value: Any) -> Draft | None:
        if self.draft is None:
            return None
        self.draft = self.draft.with_field_value(name, value)
        return self.draft

    def finalize(self) -> AnalyzeResult | None:
        self._clear_messages()

        if self.draft is None:
            self.analyze_error = "Fetch a draft first."
            return None

        if not can_finalize(self.draft):
            self.invalid_fields = invalid_fields(self.draft)
            self.analyze_error = "Fill Purchase Price, ARV, and Rehab Budget before analyzing."
            return None

        draft = self.draft
        with self._in_flight("finalize"):
            try:
                outcome = self.client.finalize_and_analyze(draft)
            except AnalysisServiceError as e:
                logger.warning("Finalize failed", status=e.status)
                self.analyze_error = str(e) or "Failed to finalize/analyze."
                return None

        if not outcome.ok:
            self.missing_fields = list(outcome.missing_fields)
            self.analyze_error = "Missing required fields. Fill the highlighted inputs."
            return None

        logger.info("Draft finalized", verdict=outcome.result.overall_verdict)
        self.result = outcome.result
        # the draft is consumed; the result is the state from here on
        self.draft = None
        self._basis = draft
        return self.result

    # ------------------------------------------------------------------
    # Manual flow
    # ------------------------------------------------------------------
    def analyze_manual(self, request: AnalyzeRequest) -> AnalyzeResult | None:
        self._clear_messages()

        if not can_analyze(request):
            self.analyze_error = "Please enter valid Purchase Price, ARV, and Rehab Budget."
            return None

        with self._in_flight("analyze"):
            try:
                result = self.client.analyze(request)
            except AnalysisServiceError as e:
                logger.warning("Manual analyze failed", status=e.status)
                self.analyze_error = str(e) or "Failed to analyze deal."
                return None

        logger.info("Manual analyze done", verdict=result.overall_verdict)
        self.result = result
        self._basis = request
        return result

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def export_meta(
        self,
        *,
        holding_months: float | None = None,
        interest_rate_pct: float | None = None,
        ltc_pct: float | None = None,
    ) -> ExportMeta:
        basis = self._basis if self._basis is not None else self.draft
        return build_export_meta(
            draft=basis if isinstance(basis, Draft) else None,
            manual=basis if isinstance(basis, AnalyzeRequest) else None,
            listing_url=self.listing_url,
            manual_address=self.manual_address,
            holding_months=holding_months,
            interest_rate_pct=interest_rate_pct,
            ltc_pct=ltc_pct,
        )

    def export_lender_report(self, dest_dir: Path, meta: ExportMeta | None = None) -> Path | None:
        self.export_error = ""

        if self.result is None:
            self.export_error = "Analyze a deal first."
            return None

        gate = allowed_outputs(self.result)
        if not gate.lender_report:
            raise OutputSuppressedError("Lender Report is suppressed by the Integrity Gate.")

        meta = meta or self.export_meta()
        with self._in_flight("export"):
            try:
                content = self.client.export_lender_report(self.result, meta.to_payload())
            except ExportError as e:
                logger.warning("Lender report export failed", status=e.status)
                self.export_error = str(e)
                return None

        path = write_document(content, dest_dir)
        logger.info("Lender report saved", path=str(path), size=len(content))
        return path
