from flipforge.domain.confidence import ConfidenceField
from flipforge.domain.draft import Draft


def test_default_field_is_missing():
    f = ConfidenceField()
    assert f.value is None
    assert f.confidence == "MISSING"
    assert f.is_missing
    assert f.is_low_confidence


def test_fields_compare_by_value():
    a = ConfidenceField(value=100.0, confidence="HIGH", source="zillow")
    b = ConfidenceField(value=100.0, confidence="HIGH", source="zillow")
    assert a == b
    assert a != b.with_value(101.0)


def test_with_value_keeps_provenance():
    f = ConfidenceField(value=180_000.0, confidence="LOW", source="listing", evidence="Price: $180k")
    edited = f.with_value(175_000.0)

    assert edited.value == 175_000.0
    assert edited.confidence == "LOW"
    assert edited.source == "listing"
    assert edited.evidence == "Price: $180k"
    # source field unchanged
    assert f.value == 180_000.0


def test_value_none_is_missing_even_when_confidence_says_high():
    f = ConfidenceField(value=None, confidence="HIGH")
    assert f.is_missing
    assert not f.is_low_confidence


def test_draft_edit_replaces_only_that_field():
    d = Draft(
        source="ZILLOW",
        purchase_price=ConfidenceField(value=150_000.0, confidence="HIGH", source="listing"),
    )
    edited = d.with_field_value("purchase_price", "145,000")

    assert edited.purchase_price.value == 145_000.0
    assert edited.purchase_price.confidence == "HIGH"
    assert edited.purchase_price.source == "listing"
    assert edited.arv == d.arv
    assert d.purchase_price.value == 150_000.0


def test_draft_edit_blank_clears_value():
    d = Draft(arv=ConfidenceField(value=200_000.0, confidence="MEDIUM"))
    edited = d.with_field_value("arv", "  ")
    assert edited.arv.value is None
    assert edited.arv.confidence == "MEDIUM"


def test_draft_from_wire_tolerates_nulls():
    d = Draft.model_validate(
        {
            "source": "REDFIN",
            "url": "https://example.com/listing/1",
            "purchase_price": {"value": 99_000, "confidence": "HIGH"},
            "arv": None,
            "notes": None,
            "signals": ["price_found"],
            "closing_cost_pct": 0.02,
        }
    )
    assert d.arv.is_missing
    assert d.notes == []
    assert d.signals == ["price_found"]
    assert d.closing_cost_pct == 0.02


def test_manual_draft_has_all_inputs_missing():
    d = Draft.manual(address="12 Elm St")
    assert d.source == "MANUAL"
    assert d.address == "12 Elm St"
    for name in ("purchase_price", "arv", "rehab_budget", "est_monthly_rent"):
        assert d.get_field(name).is_missing


def test_manual_draft_accepts_explicit_source():
    d = Draft.manual(source="MANUAL:IMPORT", address="12 Elm St")
    assert d.source == "MANUAL:IMPORT"
    assert d.purchase_price.is_missing
