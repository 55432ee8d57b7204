import math
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Optional, Tuple

from printshop.schemas.quote import Quote

NO_TIER = "none"


@dataclass(frozen=True)
class CategoryTotals:
    quantity: int = 0
    subtotal: float = 0.0


@dataclass(frozen=True)
class Facts:
    """Values derived from a quote that rule conditions are checked against."""

    tier: str = NO_TIER
    total_quantity: int = 0
    subtotal: float = 0.0
    order_date: Optional[date] = None
    categories: Dict[str, CategoryTotals] = field(default_factory=dict)
    product_total: float = 0.0
    setup_total: float = 0.0
    product_names: Tuple[str, ...] = ()


def normalize_label(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def money_amount(value) -> float:
    """Non-finite, negative or unreadable money values count as zero."""
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(amount) or amount < 0:
        return 0.0
    return amount


def _count(value) -> int:
    try:
        count = int(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(count, 0)


def extract_facts(quote: Quote) -> Facts:
    """
    Derive the matchable facts of a quote. Never raises for a built Quote.
    """
    customer = quote.customer
    tier = customer.tier.value if customer is not None and customer.tier else NO_TIER

    total_quantity = 0
    product_total = 0.0
    setup_total = 0.0
    product_names = []
    quantities: Dict[str, int] = {}
    subtotals: Dict[str, float] = {}

    for item in quote.line_items:
        quantity = _count(item.quantity)
        total_quantity += quantity
        product_total += quantity * money_amount(item.unit_price)
        setup_total += money_amount(item.setup_fee)

        name = normalize_label(item.product_name)
        if name:
            product_names.append(name)

        category = normalize_label(item.product_category)
        if category:
            quantities[category] = quantities.get(category, 0) + quantity
            subtotals[category] = subtotals.get(category, 0.0) + money_amount(item.line_total)

    categories = {
        key: CategoryTotals(quantity=quantities[key], subtotal=subtotals[key])
        for key in quantities
    }

    order_date = quote.created_at.date() if quote.created_at is not None else None

    return Facts(
        tier=tier,
        total_quantity=total_quantity,
        subtotal=money_amount(quote.subtotal),
        order_date=order_date,
        categories=categories,
        product_total=product_total,
        setup_total=setup_total,
        product_names=tuple(product_names),
    )
