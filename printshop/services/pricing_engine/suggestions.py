from typing import Any, Callable, Dict, Iterable, List, Optional

from printshop.core.config import settings
from printshop.schemas.discount import RuleSuggestion, SuggestionReport
from printshop.schemas.pricing_rule import CustomerPricingRule
from printshop.schemas.quote import Quote
from printshop.services.pricing_engine.facts import Facts, extract_facts
from printshop.services.pricing_engine.matcher import match_eligible
from printshop.services.pricing_engine.resolver import round_currency, rule_contribution


def _tier_reason(condition, facts: Facts) -> Optional[str]:
    specific = [t for t in condition.tiers if t.value != "any"]
    if not specific:
        return None
    return f"{facts.tier.capitalize()} tier customer"


def _quantity_reason(condition, facts: Facts) -> Optional[str]:
    return f"Order quantity {facts.total_quantity} meets minimum {condition.min_quantity}"


def _subtotal_reason(condition, facts: Facts) -> Optional[str]:
    symbol = settings.CURRENCY_SYMBOL
    return (
        f"Order value {symbol}{facts.subtotal:.2f} meets minimum "
        f"{symbol}{condition.min_subtotal:.2f}"
    )


def _category_reason(condition, facts: Facts) -> Optional[str]:
    return "Contains eligible product categories" if condition.categories else None


def _date_range_reason(condition, facts: Facts) -> Optional[str]:
    if condition.start_date is None and condition.end_date is None:
        return None
    return "Ordered within the promotion dates"


def _products_reason(condition, facts: Facts) -> Optional[str]:
    return "Contains eligible products" if condition.product_names else None


_REASONS: Dict[str, Callable[[Any, Facts], Optional[str]]] = {
    "tier": _tier_reason,
    "min_quantity": _quantity_reason,
    "min_subtotal": _subtotal_reason,
    "category": _category_reason,
    "date_range": _date_range_reason,
    "products": _products_reason,
}


def describe_match(rule: CustomerPricingRule, facts: Facts) -> str:
    reasons: List[str] = []
    for condition in rule.conditions:
        build = _REASONS.get(condition.kind)
        reason = build(condition, facts) if build else None
        if reason:
            reasons.append(reason)
    return "; ".join(reasons) or "Applies to every quote"


def suggest_pricing_rules(
    quote: Quote,
    rules: Optional[Iterable[CustomerPricingRule]],
) -> SuggestionReport:
    """
    Every eligible rule with why it matched and what it would save on its
    own. Stacking is ignored; `best` is the largest single saving.
    """
    facts = extract_facts(quote)

    suggestions = [
        RuleSuggestion(
            rule=rule,
            reason=describe_match(rule, facts),
            savings=float(round_currency(rule_contribution(rule, facts))),
        )
        for rule in match_eligible(facts, rules)
    ]

    best: Optional[RuleSuggestion] = None
    for suggestion in suggestions:
        if best is None or suggestion.savings > best.savings:
            best = suggestion

    return SuggestionReport(suggestions=suggestions, best=best)
