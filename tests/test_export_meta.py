from flipforge.domain.result import AnalyzeRequest
from flipforge.services.export_meta import build_export_meta


def test_draft_values_win(make_draft):
    d = make_draft(address="44 Oak Ave", est_monthly_rent=(1_800.0, "LOW"))
    meta = build_export_meta(
        draft=d,
        manual=AnalyzeRequest(purchase_price=1, arv=2, rehab_budget=3),
        listing_url="  https://example.com/l/9  ",
        manual_address="typed address",
        holding_months=6,
        interest_rate_pct=10,
        ltc_pct=80,
    )
    assert meta.listing_url == "https://example.com/l/9"
    assert meta.property_address == "44 Oak Ave"
    assert meta.purchase_price == 150_000.0
    assert meta.arv == 230_000.0
    assert meta.rehab_budget == 20_000.0
    assert meta.est_monthly_rent == 1_800.0
    assert (meta.holding_months, meta.interest_rate_pct, meta.ltc_pct) == (6, 10, 80)


def test_manual_values_when_no_draft():
    meta = build_export_meta(
        manual=AnalyzeRequest(purchase_price=120_000, arv=220_000, rehab_budget=35_000, est_monthly_rent=1_800),
        listing_url="",
        manual_address=" 9 Pine Rd ",
    )
    assert meta.listing_url is None
    assert meta.property_address == "9 Pine Rd"
    assert meta.purchase_price == 120_000
    assert meta.est_monthly_rent == 1_800


def test_typed_address_used_when_draft_has_none(make_draft):
    meta = build_export_meta(draft=make_draft(), manual_address="1 Main St")
    assert meta.property_address == "1 Main St"


def test_payload_shape():
    payload = build_export_meta().to_payload()
    assert set(payload) == {
        "listing_url",
        "property_address",
        "purchase_price",
        "arv",
        "rehab_budget",
        "est_monthly_rent",
        "holding_months",
        "interest_rate_pct",
        "ltc_pct",
    }


def test_financing_comes_from_draft(make_draft):
    d = make_draft(holding_months=9, annual_interest_rate=0.12, loan_to_cost_pct=0.75)
    meta = build_export_meta(draft=d)
    assert meta.holding_months == 9
    assert meta.interest_rate_pct == 12.0
    assert meta.ltc_pct == 75.0


def test_explicit_financing_beats_draft(make_draft):
    d = make_draft(holding_months=9, annual_interest_rate=0.12, loan_to_cost_pct=0.75)
    meta = build_export_meta(draft=d, holding_months=4, interest_rate_pct=11.5, ltc_pct=70)
    assert (meta.holding_months, meta.interest_rate_pct, meta.ltc_pct) == (4, 11.5, 70)


def test_manual_request_assumptions_then_defaults():
    request = AnalyzeRequest(purchase_price=120_000, arv=220_000, rehab_budget=35_000, holding_months=8)
    meta = build_export_meta(manual=request)
    assert meta.holding_months == 8
    assert meta.interest_rate_pct == 10.0
    assert meta.ltc_pct == 80.0


def test_defaults_without_basis():
    meta = build_export_meta()
    assert (meta.holding_months, meta.interest_rate_pct, meta.ltc_pct) == (6.0, 10.0, 80.0)
