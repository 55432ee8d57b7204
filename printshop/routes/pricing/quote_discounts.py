from time import perf_counter
from typing import List, Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from printshop.core.config import settings
from printshop.core.logging_config import logger
from printshop.database.connection import get_db
from printshop.schemas.discount import (
    CustomerRulesRequest,
    EvaluationResult,
    QuoteEvaluationRequest,
    QuoteTotals,
    SuggestionReport,
)
from printshop.schemas.pricing_rule import CustomerPricingRule
from printshop.services.pricing_engine.engine import (
    calculate_automatic_discount,
    get_applicable_rules_for_customer,
)
from printshop.services.pricing_engine.suggestions import suggest_pricing_rules
from printshop.services.pricing_engine.totals import calculate_quote_totals
from printshop.services.pricing_service.pricing_service import load_rules_for_evaluation

router = APIRouter(tags=["Automatic Discounts"])


def _rules_for(
    supplied: Optional[List[CustomerPricingRule]],
    db: Session,
) -> List[CustomerPricingRule]:
    if supplied is not None:
        return supplied
    return load_rules_for_evaluation(db)


def _record_evaluation(request: Request, started: float, quote_id: Optional[str]) -> None:
    duration_ms = (perf_counter() - started) * 1000.0

    metrics = getattr(request.app.state, "metrics", None)
    if metrics is not None:
        metrics["discount_evaluations"] = metrics.get("discount_evaluations", 0) + 1

    if duration_ms > settings.SLOW_EVALUATION_MS:
        logger.warning(
            "slow_discount_evaluation",
            quote_id=quote_id,
            duration_ms=round(duration_ms, 2),
        )


@router.post("/quotes/automatic-discount", response_model=EvaluationResult)
def automatic_discount(
    payload: QuoteEvaluationRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Automatic discount for the quote. Uses the rules in the body when given,
    otherwise every active stored rule.
    """
    rules = _rules_for(payload.rules, db)

    start = perf_counter()
    result = calculate_automatic_discount(payload.quote, rules)
    _record_evaluation(request, start, payload.quote.id)

    logger.info(
        "automatic_discount_calculated",
        quote_id=payload.quote.id,
        discount=result.discount,
        applied_rules=[rule.id for rule in result.applied_rules],
    )
    return result


@router.post("/quotes/pricing-suggestions", response_model=SuggestionReport)
def pricing_suggestions(
    payload: QuoteEvaluationRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    rules = _rules_for(payload.rules, db)

    start = perf_counter()
    report = suggest_pricing_rules(payload.quote, rules)
    _record_evaluation(request, start, payload.quote.id)
    return report


@router.post("/quotes/totals", response_model=QuoteTotals)
def quote_totals(
    payload: QuoteEvaluationRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    rules = _rules_for(payload.rules, db)

    start = perf_counter()
    totals = calculate_quote_totals(payload.quote, rules)
    _record_evaluation(request, start, payload.quote.id)
    return totals


@router.post("/customers/applicable-rules", response_model=list[CustomerPricingRule])
def customer_applicable_rules(
    payload: CustomerRulesRequest,
    db: Session = Depends(get_db),
):
    rules = _rules_for(payload.rules, db)
    return get_applicable_rules_for_customer(payload.customer, rules)
