from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from printshop.enums.pricing import CustomerTier, DiscountType


class Customer(BaseModel):
    id: Optional[str] = None
    name: str = ""
    email: Optional[str] = None
    company: Optional[str] = None
    tier: Optional[CustomerTier] = None

    @field_validator("tier")
    @classmethod
    def tier_is_concrete(cls, value):
        # "any" only makes sense on a rule condition
        if value == CustomerTier.any:
            raise ValueError("customer tier must be bronze, silver, gold or platinum")
        return value


class LineItem(BaseModel):
    id: Optional[str] = None
    product_name: str = ""
    product_category: Optional[str] = None
    quantity: int = 0
    unit_price: float = 0.0
    setup_fee: float = 0.0
    line_total: float = 0.0


class Quote(BaseModel):
    id: Optional[str] = None
    quote_number: Optional[str] = None
    customer: Customer = Customer()
    line_items: List[LineItem] = []
    subtotal: float = 0.0

    # manual discount and tax, only read by the quote totals
    discount: float = 0.0
    discount_type: DiscountType = DiscountType.percent
    tax_rate: float = 0.0

    created_at: Optional[datetime] = Field(default_factory=datetime.utcnow)
