# tests/conftest.py
import json as jsonlib
from typing import Any

import pytest
from fastapi.testclient import TestClient

from flipforge.adapters.analysis_client import AnalysisClient
from flipforge.api.http import app
from flipforge.domain.confidence import ConfidenceField
from flipforge.domain.draft import Draft
from flipforge.domain.result import AnalyzeResult


def base_result_payload() -> dict[str, Any]:
    """A clean flip BUY with no flags, no stress tests, no gating."""
    return {
        "total_project_cost": 170_000.0,
        "gross_profit": 50_000.0,
        "net_profit": 32_000.0,
        "profit_pct": 0.188,
        "annualized_roi": 0.41,
        "max_safe_offer": 118_500.0,
        "flip_score": 72.0,
        "brrrr_score": 55.0,
        "wholesale_score": 40.0,
        "best_strategy": "flip",
        "overall_verdict": "BUY",
        "flip_verdict": "BUY",
        "brrrr_verdict": "CONDITIONAL",
        "wholesale_verdict": "PASS",
        "confidence_score": 78.0,
        "risk_flags": [],
        "typed_flags": [],
        "stress_tests": [],
        "notes": [],
    }


def scenario(name: str, verdict: str, net_profit: float = 10_000.0) -> dict[str, Any]:
    return {
        "name": name,
        "arv": 200_000.0,
        "rehab_budget": 35_000.0,
        "holding_months": 6,
        "net_profit": net_profit,
        "profit_pct": 0.05,
        "annualized_roi": 0.10,
        "verdict": verdict,
    }


@pytest.fixture(scope="session")
def client():
    return TestClient(app)


@pytest.fixture
def result_payload() -> dict[str, Any]:
    return base_result_payload()


@pytest.fixture
def make_result():
    def _make(**overrides: Any) -> AnalyzeResult:
        payload = base_result_payload()
        payload.update(overrides)
        return AnalyzeResult.model_validate(payload)

    return _make


@pytest.fixture
def make_scenario():
    return scenario


@pytest.fixture
def make_draft():
    def _make(
        purchase_price: Any = (150_000.0, "HIGH"),
        arv: Any = (230_000.0, "MEDIUM"),
        rehab_budget: Any = (20_000.0, "MEDIUM"),
        est_monthly_rent: Any = (None, "MISSING"),
        **identity: Any,
    ) -> Draft:
        def _cf(pair: Any) -> ConfidenceField:
            value, confidence = pair
            return ConfidenceField(value=value, confidence=confidence, source="listing")

        identity.setdefault("source", "ZILLOW")
        return Draft(
            purchase_price=_cf(purchase_price),
            arv=_cf(arv),
            rehab_budget=_cf(rehab_budget),
            est_monthly_rent=_cf(est_monthly_rent),
            **identity,
        )

    return _make


# ---------------------------------------------------------------------
# Fake HTTP session for the analysis client
# ---------------------------------------------------------------------

class FakeResponse:
    def __init__(self, status_code: int = 200, json_body: Any = None, content: bytes | None = None, text: str | None = None):
        self.status_code = status_code
        self._json = json_body
        if content is None:
            content = b"" if json_body is None else jsonlib.dumps(json_body).encode()
        self.content = content
        self.text = text if text is not None else content.decode("utf-8", errors="replace")

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if self._json is None:
            raise ValueError("No JSON body")
        return self._json


class FakeSession:
    """Records posts; replies from a queue of FakeResponse or exceptions."""

    def __init__(self, *replies: Any) -> None:
        self.replies = list(replies)
        self.calls: list[dict[str, Any]] = []

    def post(self, url: str, json: Any = None, headers: Any = None, timeout: Any = None) -> FakeResponse:
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if not self.replies:
            raise AssertionError(f"unexpected POST {url}")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def make_client():
    def _make(*replies: Any) -> tuple[AnalysisClient, FakeSession]:
        session = FakeSession(*replies)
        return AnalysisClient(base_url="http://svc.test/", timeout_s=5.0, session=session), session

    return _make
