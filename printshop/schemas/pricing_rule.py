import math
from datetime import date
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from printshop.enums.pricing import ApplyTo, CustomerTier, DiscountType


# ---------- CONDITIONS ----------
# A rule carries a list of tagged conditions. A condition kind that is not
# present on a rule never restricts it.

class TierCondition(BaseModel):
    kind: Literal["tier"] = "tier"
    # empty list or "any" matches every customer
    tiers: List[CustomerTier] = []


class MinQuantityCondition(BaseModel):
    kind: Literal["min_quantity"] = "min_quantity"
    min_quantity: int


class MinSubtotalCondition(BaseModel):
    kind: Literal["min_subtotal"] = "min_subtotal"
    min_subtotal: float


class CategoryCondition(BaseModel):
    kind: Literal["category"] = "category"
    categories: List[str] = []


class DateRangeCondition(BaseModel):
    kind: Literal["date_range"] = "date_range"
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class ProductCondition(BaseModel):
    kind: Literal["products"] = "products"
    product_names: List[str] = []


PricingCondition = Annotated[
    Union[
        TierCondition,
        MinQuantityCondition,
        MinSubtotalCondition,
        CategoryCondition,
        DateRangeCondition,
        ProductCondition,
    ],
    Field(discriminator="kind"),
]


# ---------- RULES ----------

class CustomerPricingRuleBase(BaseModel):
    name: str
    description: Optional[str] = ""
    conditions: List[PricingCondition] = []
    discount_type: DiscountType = DiscountType.percent
    discount_value: float = 0.0
    apply_to: ApplyTo = ApplyTo.total
    priority: int = 10
    stackable: bool = True
    active: bool = True

    def configuration_errors(self) -> List[str]:
        """
        Return the reasons this rule is malformed, empty when it is usable.
        """
        errors: List[str] = []

        value = self.discount_value
        if not math.isfinite(value) or value < 0:
            errors.append("discount_value must be a non-negative number")
        elif self.discount_type == DiscountType.percent and value > 100:
            errors.append("percent discount_value must be between 0 and 100")

        for condition in self.conditions:
            if isinstance(condition, MinQuantityCondition) and condition.min_quantity < 0:
                errors.append("min_quantity must not be negative")
            elif isinstance(condition, MinSubtotalCondition) and (
                not math.isfinite(condition.min_subtotal) or condition.min_subtotal < 0
            ):
                errors.append("min_subtotal must be a non-negative number")
            elif (
                isinstance(condition, DateRangeCondition)
                and condition.start_date is not None
                and condition.end_date is not None
                and condition.start_date > condition.end_date
            ):
                errors.append("date_range start_date is after end_date")

        return errors


class CustomerPricingRule(CustomerPricingRuleBase):
    id: str

    class Config:
        from_attributes = True


class _ValidatedRule(CustomerPricingRuleBase):
    @model_validator(mode="after")
    def check_configuration(self):
        errors = self.configuration_errors()
        if errors:
            raise ValueError("; ".join(errors))
        return self


class PricingRuleCreate(_ValidatedRule):
    id: str


class PricingRuleUpdate(_ValidatedRule):
    pass
