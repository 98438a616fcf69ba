# src/flipforge/adapters/analysis_client.py
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import requests
from pydantic import ValidationError

from flipforge.adapters.config import config
from flipforge.adapters.logging_utils import get_logger
from flipforge.domain.draft import Draft
from flipforge.domain.result import AnalyzeRequest, AnalyzeResult

logger = get_logger(__name__)

EXPORT_FALLBACK_MESSAGE = "Failed to generate lender report."


class AnalysisServiceError(RuntimeError):
    """Transport or server failure. Terminal for the action; never retried."""

    def __init__(self, message: str, status: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class ExportError(AnalysisServiceError):
    pass


@dataclass(frozen=True)
class FinalizeOutcome:
    """
    finalize-and-analyze result.

    `ok=False` is the service's 422 "fill these fields" answer, a normal
    outcome rather than an error.
    """
    ok: bool
    result: AnalyzeResult | None = None
    missing_fields: tuple[str, ...] = ()

    @classmethod
    def success(cls, result: AnalyzeResult) -> FinalizeOutcome:
        return cls(ok=True, result=result)

    @classmethod
    def missing(cls, fields: list[str]) -> FinalizeOutcome:
        return cls(ok=False, missing_fields=tuple(fields))


def _json_or_empty(resp: requests.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return {}


def _missing_fields_from(data: Any) -> list[str]:
    if not isinstance(data, dict):
        return []
    missing = data.get("missing_fields")
    if missing is None and isinstance(data.get("detail"), dict):
        missing = data["detail"].get("missing_fields")
    if not isinstance(missing, list):
        return []
    return [str(m) for m in missing]


def _export_error_message(resp: requests.Response) -> str:
    data = _json_or_empty(resp)
    if isinstance(data, dict):
        for key in ("detail", "message"):
            msg = data.get(key)
            if isinstance(msg, str) and msg.strip():
                return msg.strip()
    return EXPORT_FALLBACK_MESSAGE


@dataclass(frozen=True)
class AnalysisClient:
    """
    JSON-over-HTTP client for the deal analysis service.

    One request per call: no retry, no queueing, no cancellation. Any
    non-2xx (other than finalize's 422) or network failure raises
    AnalysisServiceError.
    """
    base_url: str
    timeout_s: float = 20.0
    session: requests.Session = field(default_factory=requests.Session)

    def _url(self, path: str) -> str:
        return self.base_url.rstrip("/") + "/" + path.lstrip("/")

    def _post(self, path: str, payload: Any) -> requests.Response:
        url = self._url(path)
        try:
            resp = self.session.post(
                url,
                json=payload,
                headers={"Accept": "application/json"},
                timeout=self.timeout_s,
            )
        except requests.RequestException as e:
            logger.warning(
                "analysis_service_unreachable",
                extra={"context": {"path": path, "error": type(e).__name__}},
            )
            raise AnalysisServiceError(f"Cannot reach analysis service at {self.base_url}: {e}") from e

        logger.info(
            "analysis_service_call",
            extra={"context": {"path": path, "status": resp.status_code}},
        )
        return resp

    @staticmethod
    def _parse_result(data: Any, status: int) -> AnalyzeResult:
        try:
            return AnalyzeResult.model_validate(data)
        except ValidationError as e:
            raise AnalysisServiceError(
                f"Malformed analysis response: {e.error_count()} validation error(s)",
                status=status,
                body=json.dumps(data, default=str)[:2000],
            ) from e

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def analyze(self, request: AnalyzeRequest) -> AnalyzeResult:
        resp = self._post("/api/analyze", request.to_payload())
        if not resp.ok:
            raise AnalysisServiceError(
                f"API error {resp.status_code}: {resp.text}",
                status=resp.status_code,
                body=resp.text,
            )
        return self._parse_result(_json_or_empty(resp), resp.status_code)

    def draft_from_url(self, url: str) -> Draft:
        resp = self._post("/api/draft-from-url", {"url": url})
        if not resp.ok:
            raise AnalysisServiceError(
                f"Draft API error {resp.status_code}: {resp.text}",
                status=resp.status_code,
                body=resp.text,
            )
        data = _json_or_empty(resp)
        # service wraps it: {"draft": {...}}
        raw = data.get("draft") if isinstance(data, dict) else None
        if not isinstance(raw, dict):
            raise AnalysisServiceError(
                "Draft API response has no draft", status=resp.status_code, body=resp.text
            )
        try:
            return Draft.model_validate(raw)
        except ValidationError as e:
            raise AnalysisServiceError(
                f"Malformed draft response: {e.error_count()} validation error(s)",
                status=resp.status_code,
                body=resp.text,
            ) from e

    def finalize_and_analyze(self, draft: Draft) -> FinalizeOutcome:
        resp = self._post("/api/finalize-and-analyze", draft.to_payload())
        data = _json_or_empty(resp)

        if resp.status_code == 422:
            missing = _missing_fields_from(data)
            logger.info("finalize_missing_fields", extra={"context": {"missing_fields": missing}})
            return FinalizeOutcome.missing(missing)

        if not resp.ok:
            raise AnalysisServiceError(
                f"Finalize API error {resp.status_code}: {json.dumps(data, default=str)}",
                status=resp.status_code,
                body=resp.text,
            )
        return FinalizeOutcome.success(self._parse_result(data, resp.status_code))

    def export_lender_report(self, result: AnalyzeResult, meta: dict[str, Any] | None = None) -> bytes:
        payload = {"result": result.to_payload(), "meta": meta or {}}
        try:
            resp = self._post("/api/export/lender-report", payload)
        except AnalysisServiceError as e:
            raise ExportError(str(e)) from e
        if not resp.ok:
            raise ExportError(_export_error_message(resp), status=resp.status_code, body=resp.text)
        return resp.content


def write_document(content: bytes, dest_dir: Path, filename: str | None = None) -> Path:
    """Save an exported document under the fixed report filename."""
    dest_dir.mkdir(parents=True, exist_ok=True)
    path = dest_dir / (filename or config.LENDER_REPORT_FILENAME)
    path.write_bytes(content)
    return path


def make_analysis_client(session: requests.Session | None = None) -> AnalysisClient:
    return AnalysisClient(
        base_url=config.API_BASE_URL,
        timeout_s=config.HTTP_TIMEOUT_S,
        session=session or requests.Session(),
    )
