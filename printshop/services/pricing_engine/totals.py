from decimal import Decimal
from typing import Iterable, Optional

from printshop.enums.pricing import DiscountType
from printshop.schemas.discount import QuoteTotals
from printshop.schemas.pricing_rule import CustomerPricingRule
from printshop.schemas.quote import Quote
from printshop.services.pricing_engine.engine import calculate_automatic_discount
from printshop.services.pricing_engine.facts import money_amount
from printshop.services.pricing_engine.resolver import round_currency, to_decimal


def calculate_quote_totals(
    quote: Quote,
    rules: Optional[Iterable[CustomerPricingRule]] = None,
) -> QuoteTotals:
    """
    subtotal - (automatic + manual discount) + tax.

    The subtotal is the sum of line totals, or quote.subtotal for a quote
    without line items. Combined discounts never exceed the subtotal and tax
    is charged on what is left.
    """
    if quote.line_items:
        subtotal = sum((to_decimal(money_amount(item.line_total)) for item in quote.line_items), Decimal(0))
    else:
        subtotal = to_decimal(money_amount(quote.subtotal))

    priced = quote.model_copy(update={"subtotal": float(subtotal)})
    result = calculate_automatic_discount(priced, rules)
    automatic = to_decimal(result.discount)

    manual_value = to_decimal(money_amount(quote.discount))
    if quote.discount_type == DiscountType.percent:
        manual = subtotal * manual_value / Decimal(100)
    else:
        manual = manual_value
    manual = round_currency(manual)

    total_discount = min(automatic + manual, subtotal)
    taxable = subtotal - total_discount
    tax = round_currency(taxable * to_decimal(money_amount(quote.tax_rate)) / Decimal(100))

    return QuoteTotals(
        subtotal=float(round_currency(subtotal)),
        automatic_discount=float(automatic),
        manual_discount=float(manual),
        total_discount=float(round_currency(total_discount)),
        tax_amount=float(tax),
        total=float(round_currency(taxable + tax)),
        applied_rule_ids=[rule.id for rule in result.applied_rules],
    )
