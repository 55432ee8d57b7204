from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from printshop.core.logging_config import logger
from printshop.enums.pricing import CustomerTier
from printshop.schemas.pricing_rule import (
    CategoryCondition,
    CustomerPricingRule,
    DateRangeCondition,
    MinQuantityCondition,
    MinSubtotalCondition,
    ProductCondition,
    TierCondition,
)
from printshop.services.pricing_engine.facts import Facts, normalize_label


# ===================== CONDITION CHECKS =====================


def tier_matches(condition: TierCondition, tier: str) -> bool:
    tiers = {t.value for t in condition.tiers}
    if not tiers or CustomerTier.any.value in tiers:
        return True
    return tier in tiers


def _tier_passes(condition: TierCondition, facts: Facts) -> bool:
    return tier_matches(condition, facts.tier)


def _min_quantity_passes(condition: MinQuantityCondition, facts: Facts) -> bool:
    return facts.total_quantity >= condition.min_quantity


def _min_subtotal_passes(condition: MinSubtotalCondition, facts: Facts) -> bool:
    return facts.subtotal >= condition.min_subtotal


def _category_passes(condition: CategoryCondition, facts: Facts) -> bool:
    wanted = {normalize_label(c) for c in condition.categories} - {""}
    if not wanted:
        return True
    return any(category in wanted for category in facts.categories)


def _date_range_passes(condition: DateRangeCondition, facts: Facts) -> bool:
    if condition.start_date is None and condition.end_date is None:
        return True
    if facts.order_date is None:
        return False
    if condition.start_date is not None and facts.order_date < condition.start_date:
        return False
    if condition.end_date is not None and facts.order_date > condition.end_date:
        return False
    return True


def _products_pass(condition: ProductCondition, facts: Facts) -> bool:
    wanted = [normalize_label(p) for p in condition.product_names if normalize_label(p)]
    if not wanted:
        return True
    return any(w in name for name in facts.product_names for w in wanted)


CONDITION_CHECKS: Dict[str, Callable[[Any, Facts], bool]] = {
    "tier": _tier_passes,
    "min_quantity": _min_quantity_passes,
    "min_subtotal": _min_subtotal_passes,
    "category": _category_passes,
    "date_range": _date_range_passes,
    "products": _products_pass,
}


def condition_passes(condition, facts: Facts) -> bool:
    check = CONDITION_CHECKS.get(getattr(condition, "kind", None))
    if check is None:
        return False
    return check(condition, facts)


# ===================== ELIGIBILITY =====================


def rule_sort_key(rule: CustomerPricingRule) -> Tuple[int, str]:
    return (rule.priority, str(rule.id))


def is_usable(rule: CustomerPricingRule) -> bool:
    """Active and well formed. Malformed rules are logged and skipped."""
    if not rule.active:
        return False
    errors = rule.configuration_errors()
    if errors:
        logger.debug("pricing_rule_excluded", rule_id=rule.id, errors=errors)
        return False
    return True


def is_eligible(rule: CustomerPricingRule, facts: Facts) -> bool:
    if not is_usable(rule):
        return False
    return all(condition_passes(condition, facts) for condition in rule.conditions)


def match_eligible(
    facts: Facts,
    rules: Optional[Iterable[CustomerPricingRule]],
) -> List[CustomerPricingRule]:
    """
    Rules whose present conditions all pass, ordered by priority then id.
    """
    eligible = [rule for rule in rules or [] if is_eligible(rule, facts)]
    return sorted(eligible, key=rule_sort_key)
