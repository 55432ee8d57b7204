from typing import List, Optional

from pydantic import BaseModel

from printshop.schemas.pricing_rule import CustomerPricingRule
from printshop.schemas.quote import Customer, Quote


class RuleContribution(BaseModel):
    rule_id: str
    name: str
    description: str
    amount: float


class EvaluationResult(BaseModel):
    discount: float = 0.0
    applied_rules: List[CustomerPricingRule] = []
    breakdown: List[RuleContribution] = []


class RuleSuggestion(BaseModel):
    rule: CustomerPricingRule
    reason: str
    savings: float


class SuggestionReport(BaseModel):
    suggestions: List[RuleSuggestion] = []
    best: Optional[RuleSuggestion] = None


class QuoteTotals(BaseModel):
    subtotal: float
    automatic_discount: float
    manual_discount: float
    total_discount: float
    tax_amount: float
    total: float
    applied_rule_ids: List[str] = []


# ---------- REQUEST BODIES ----------
# rules=None means "use the configured rule store"

class QuoteEvaluationRequest(BaseModel):
    quote: Quote
    rules: Optional[List[CustomerPricingRule]] = None


class CustomerRulesRequest(BaseModel):
    customer: Customer
    rules: Optional[List[CustomerPricingRule]] = None
