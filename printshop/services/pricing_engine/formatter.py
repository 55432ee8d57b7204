from typing import Optional

from printshop.core.config import settings
from printshop.enums.pricing import ApplyTo, DiscountType
from printshop.schemas.pricing_rule import CustomerPricingRuleBase

_TARGET_LABELS = {
    ApplyTo.product: "products",
    ApplyTo.setup: "setup fees",
}


def format_discount_description(
    rule: CustomerPricingRuleBase,
    currency_symbol: Optional[str] = None,
) -> str:
    """
    percent -> "10% off", fixed -> "$25.00 off".
    Rules that target products or setup fees name the target.
    """
    value = rule.discount_value
    if rule.discount_type == DiscountType.percent:
        amount = f"{value:g}%"
    else:
        symbol = settings.CURRENCY_SYMBOL if currency_symbol is None else currency_symbol
        amount = f"{symbol}{value:.2f}"

    target = _TARGET_LABELS.get(rule.apply_to)
    if target:
        return f"{amount} off {target}"
    return f"{amount} off"
