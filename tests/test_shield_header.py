from flipforge.domain.shield import FALLBACK_SHIELD, SHIELD, shield_for
from flipforge.services.header import build_header, fmt_money, fmt_pct, offer_clipboard_text


def test_shield_lookup_and_fallback():
    assert shield_for("BUY").tone == "emerald"
    assert shield_for("PASS").label == "PASS"
    assert shield_for("MAYBE") is FALLBACK_SHIELD
    assert shield_for(None) is SHIELD["CONDITIONAL"]


def test_money_and_pct_formatting():
    assert fmt_money(118_500.4) == "$118,500"
    assert fmt_money(-2_500) == "-$2,500"
    assert fmt_money(float("nan")) == "—"
    assert fmt_pct(0.188) == "18.8%"
    assert fmt_pct(float("inf")) == "—"


def test_header_without_conflict(make_result):
    h = build_header(make_result())
    assert h.verdict == "BUY"
    assert h.best_strategy == "Flip"
    assert h.strategy_verdict == "BUY"
    assert h.conflict is False
    assert h.subline == ""
    assert h.confidence == 78
    assert [m.key for m in h.metrics] == ["net", "pp", "rf", "offer", "roi"]


def test_header_conflict_subline(make_result, make_scenario):
    h = build_header(
        make_result(
            best_strategy="brrrr",
            brrrr_verdict="BUY",
            overall_verdict="PASS",
            stress_tests=[make_scenario("Vacancy Spike", "PASS")],
        )
    )
    assert h.best_strategy == "BRRRR"
    assert h.shield.tone == "red"
    assert h.conflict
    assert h.subline == 'Breaks under "Vacancy Spike" stress (PASS).'


def test_confidence_is_clamped(make_result):
    assert build_header(make_result(confidence_score=140)).confidence == 100
    assert build_header(make_result(confidence_score=-3)).confidence == 0


def test_summary_line(make_result):
    r = make_result(typed_flags=[{"code": "A", "label": "A", "severity": "mild"}])
    assert build_header(r).summary == (
        "BUY | Offer $118,500 | Net $32,000 | Profit 18.8% | ROI 41.0% | Flags 1 | Strategy flip | Conf 78/100"
    )


def test_offer_clipboard_text(make_result):
    assert offer_clipboard_text(make_result(max_safe_offer=118_499.6)) == "118500"
