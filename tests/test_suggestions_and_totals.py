import pytest

from conftest import make_quote, make_rule
from printshop.services.pricing_engine.formatter import format_discount_description
from printshop.services.pricing_engine.suggestions import suggest_pricing_rules
from printshop.services.pricing_engine.totals import calculate_quote_totals


TEES = {"product_name": "Bella Canvas Tee", "product_category": "tshirt",
        "quantity": 100, "unit_price": 6.5, "setup_fee": 40.0, "line_total": 690.0}
HATS = {"product_name": "Richardson 112", "product_category": "hat",
        "quantity": 20, "unit_price": 14.0, "setup_fee": 30.0, "line_total": 310.0}


# ---------- formatter ----------

@pytest.mark.parametrize("overrides, expected", [
    ({"discount_type": "percent", "discount_value": 10}, "10% off"),
    ({"discount_type": "percent", "discount_value": 12.5}, "12.5% off"),
    ({"discount_type": "fixed", "discount_value": 25}, "$25.00 off"),
    ({"discount_type": "fixed", "discount_value": 5, "apply_to": "setup"}, "$5.00 off setup fees"),
    ({"discount_type": "percent", "discount_value": 15, "apply_to": "product"}, "15% off products"),
])
def test_format_discount_description(overrides, expected):
    assert format_discount_description(make_rule("R1", **overrides)) == expected


def test_format_discount_description_custom_symbol():
    rule = make_rule("R1", discount_type="fixed", discount_value=7.5)

    assert format_discount_description(rule, currency_symbol="€") == "€7.50 off"


# ---------- suggestions ----------

def test_suggestions_explain_and_pick_best_saving():
    quote = make_quote(tier="gold", items=[TEES, HATS])
    tier_rule = make_rule(
        "TIER", priority=1, discount_value=5,
        conditions=[{"kind": "tier", "tiers": ["gold", "platinum"]}],
    )
    volume_rule = make_rule(
        "VOL", priority=2, discount_type="fixed", discount_value=75,
        conditions=[
            {"kind": "min_quantity", "min_quantity": 100},
            {"kind": "min_subtotal", "min_subtotal": 500},
        ],
    )
    hats_rule = make_rule(
        "HATS", priority=3, discount_value=10,
        conditions=[{"kind": "category", "categories": ["hat"]}],
    )
    polo_rule = make_rule(
        "POLO", conditions=[{"kind": "products", "product_names": ["polo"]}],
    )

    report = suggest_pricing_rules(quote, [hats_rule, polo_rule, volume_rule, tier_rule])

    assert [s.rule.id for s in report.suggestions] == ["TIER", "VOL", "HATS"]
    reasons = {s.rule.id: s.reason for s in report.suggestions}
    assert reasons["TIER"] == "Gold tier customer"
    assert reasons["VOL"] == (
        "Order quantity 120 meets minimum 100; "
        "Order value $1000.00 meets minimum $500.00"
    )
    assert reasons["HATS"] == "Contains eligible product categories"
    savings = {s.rule.id: s.savings for s in report.suggestions}
    assert savings == {"TIER": 50.0, "VOL": 75.0, "HATS": 100.0}
    assert report.best.rule.id == "HATS"


def test_suggestions_ties_keep_first_and_unconditional_reason():
    quote = make_quote(items=[TEES])
    first = make_rule("A", priority=1, discount_type="fixed", discount_value=10)
    second = make_rule("B", priority=2, discount_type="fixed", discount_value=10)

    report = suggest_pricing_rules(quote, [second, first])

    assert report.best.rule.id == "A"
    assert report.suggestions[0].reason == "Applies to every quote"


def test_suggestions_empty_when_nothing_matches():
    quote = make_quote(tier="bronze", items=[TEES])
    rule = make_rule("PLAT", conditions=[{"kind": "tier", "tiers": ["platinum"]}])

    report = suggest_pricing_rules(quote, [rule])

    assert report.suggestions == []
    assert report.best is None


# ---------- quote totals ----------

def test_quote_totals_combine_automatic_manual_and_tax():
    quote = make_quote(
        tier="gold",
        items=[TEES, HATS],
        subtotal=0.0,  # recomputed from line totals
        discount=25.0,
        discount_type="fixed",
        tax_rate=8.25,
    )
    rule = make_rule("GOLD", discount_value=10, conditions=[{"kind": "tier", "tiers": ["gold"]}])

    totals = calculate_quote_totals(quote, [rule])

    assert totals.subtotal == 1000.00
    assert totals.automatic_discount == 100.00
    assert totals.manual_discount == 25.00
    assert totals.total_discount == 125.00
    assert totals.tax_amount == 72.19  # 875 * 8.25% = 72.1875
    assert totals.total == 947.19
    assert totals.applied_rule_ids == ["GOLD"]


def test_quote_totals_percent_manual_discount_without_rules():
    quote = make_quote(items=[HATS], discount=10, discount_type="percent")

    totals = calculate_quote_totals(quote)

    assert totals.automatic_discount == 0.0
    assert totals.manual_discount == 31.00
    assert totals.total == 279.00
    assert totals.applied_rule_ids == []


def test_quote_totals_discounts_never_exceed_subtotal():
    quote = make_quote(items=[HATS], discount=300, discount_type="fixed", tax_rate=10)
    rule = make_rule("BIG", discount_type="fixed", discount_value=200)

    totals = calculate_quote_totals(quote, [rule])

    assert totals.total_discount == 310.00
    assert totals.tax_amount == 0.0
    assert totals.total == 0.0


def test_quote_totals_uses_subtotal_when_no_line_items():
    quote = make_quote(items=[], subtotal=150.0)
    rule = make_rule("R", discount_type="fixed", discount_value=20)

    totals = calculate_quote_totals(quote, [rule])

    assert totals.subtotal == 150.00
    assert totals.total == 130.00
