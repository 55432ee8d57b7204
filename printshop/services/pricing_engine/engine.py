from typing import Iterable, List, Optional

from printshop.schemas.discount import EvaluationResult
from printshop.schemas.pricing_rule import CustomerPricingRule, TierCondition
from printshop.schemas.quote import Customer, Quote
from printshop.services.pricing_engine.facts import NO_TIER, extract_facts
from printshop.services.pricing_engine.matcher import (
    is_usable,
    match_eligible,
    rule_sort_key,
    tier_matches,
)
from printshop.services.pricing_engine.resolver import resolve


def calculate_automatic_discount(
    quote: Quote,
    rules: Optional[Iterable[CustomerPricingRule]],
) -> EvaluationResult:
    """
    Automatic discount for a quote.

    Pipeline:
    - extract facts from the quote
    - keep active, well formed rules whose conditions all pass
    - pick the exclusive winner plus every stackable rule and sum their
      contributions, capped at the subtotal and rounded to cents

    Nothing is cached; call again whenever the quote or the rules change.
    """
    facts = extract_facts(quote)
    eligible = match_eligible(facts, rules)
    return resolve(eligible, facts)


def get_applicable_rules_for_customer(
    customer: Customer,
    rules: Optional[Iterable[CustomerPricingRule]],
) -> List[CustomerPricingRule]:
    """
    Rules a customer can receive based on tier alone. Quantity, subtotal,
    category and date conditions are not checked here.
    """
    tier = customer.tier.value if customer.tier else NO_TIER

    applicable = []
    for rule in rules or []:
        if not is_usable(rule):
            continue
        tier_conditions = [c for c in rule.conditions if isinstance(c, TierCondition)]
        if all(tier_matches(condition, tier) for condition in tier_conditions):
            applicable.append(rule)

    return sorted(applicable, key=rule_sort_key)
