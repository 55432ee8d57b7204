from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List

from printshop.enums.pricing import ApplyTo, DiscountType
from printshop.schemas.discount import EvaluationResult, RuleContribution
from printshop.schemas.pricing_rule import CustomerPricingRule
from printshop.services.pricing_engine.facts import Facts
from printshop.services.pricing_engine.formatter import format_discount_description
from printshop.services.pricing_engine.matcher import rule_sort_key

CENT = Decimal("0.01")


def to_decimal(value: float) -> Decimal:
    return Decimal(str(value))


def round_currency(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


# ===================== CONTRIBUTIONS =====================


def _base_amount(rule: CustomerPricingRule, facts: Facts) -> Decimal:
    if rule.apply_to == ApplyTo.product:
        return to_decimal(facts.product_total)
    if rule.apply_to == ApplyTo.setup:
        return to_decimal(facts.setup_total)
    return to_decimal(facts.subtotal)


def rule_contribution(rule: CustomerPricingRule, facts: Facts) -> Decimal:
    """
    percent: base * value / 100
    fixed:   value, never more than the base it is taken from
    """
    base = _base_amount(rule, facts)
    value = to_decimal(rule.discount_value)
    if rule.discount_type == DiscountType.percent:
        return base * value / Decimal(100)
    return min(value, base)


# ===================== STACKING =====================


def select_applied(eligible_rules: Iterable[CustomerPricingRule]) -> List[CustomerPricingRule]:
    """
    The first non-stackable rule wins the exclusive slot, every stackable
    rule joins it. Ordering follows rule_sort_key.
    """
    ordered = sorted(eligible_rules, key=rule_sort_key)
    winner = next((rule for rule in ordered if not rule.stackable), None)
    return [rule for rule in ordered if rule.stackable or rule is winner]


def resolve(eligible_rules: Iterable[CustomerPricingRule], facts: Facts) -> EvaluationResult:
    applied = select_applied(eligible_rules)

    total = Decimal(0)
    breakdown: List[RuleContribution] = []
    for rule in applied:
        amount = rule_contribution(rule, facts)
        total += amount
        breakdown.append(
            RuleContribution(
                rule_id=rule.id,
                name=rule.name,
                description=format_discount_description(rule),
                amount=float(round_currency(amount)),
            )
        )

    # overlapping stackable rules are additive; only the order value caps them
    discount = round_currency(min(total, to_decimal(facts.subtotal)))

    return EvaluationResult(
        discount=float(discount),
        applied_rules=applied,
        breakdown=breakdown,
    )
