from enum import Enum

class CustomerTier(str, Enum):
    any = "any"
    bronze = "bronze"
    silver = "silver"
    gold = "gold"
    platinum = "platinum"


class DiscountType(str, Enum):
    percent = "percent"
    fixed = "fixed"


class ApplyTo(str, Enum):
    total = "total"
    product = "product"
    setup = "setup"
