from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from printshop.database.connection import get_db
from printshop.schemas.pricing_rule import CustomerPricingRule, PricingRuleCreate, PricingRuleUpdate
from printshop.services.pricing_service.pricing_service import (
    create_pricing_rule, get_pricing_rules, get_pricing_rule,
    update_pricing_rule, deactivate_pricing_rule, activate_pricing_rule,
    InvalidPricingRule,
)


router = APIRouter(prefix="/pricing-rules", tags=["Pricing Rules"])

@router.post("/", response_model=CustomerPricingRule)
def create_rule(rule: PricingRuleCreate, db: Session = Depends(get_db)):
    if get_pricing_rule(db, rule.id):
        raise HTTPException(status_code=400, detail="Rule id already exists")
    return create_pricing_rule(db, rule)

@router.get("/", response_model=list[CustomerPricingRule])
def list_rules(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return get_pricing_rules(db, skip=skip, limit=limit)

@router.get("/{rule_id}", response_model=CustomerPricingRule)
def get_rule(rule_id: str, db: Session = Depends(get_db)):
    rule = get_pricing_rule(db, rule_id)
    if not rule:
        raise HTTPException(status_code=404, detail="Rule not found")
    return rule

@router.put("/{rule_id}", response_model=CustomerPricingRule)
def update_rule(rule_id: str, rule: PricingRuleUpdate, db: Session = Depends(get_db)):
    try:
        updated = update_pricing_rule(db, rule_id, rule)
    except InvalidPricingRule as e:
        raise HTTPException(status_code=422, detail=e.errors)
    if not updated:
        raise HTTPException(status_code=404, detail="Rule not found")
    return updated

@router.delete("/{rule_id}", response_model=CustomerPricingRule)
def deactivate_rule(rule_id: str, db: Session = Depends(get_db)):
    rule = deactivate_pricing_rule(db, rule_id)
    if not rule:
        raise HTTPException(status_code=404, detail="Rule not found")
    return rule

@router.post("/{rule_id}/activate", response_model=CustomerPricingRule)
def activate_rule(rule_id: str, db: Session = Depends(get_db)):
    rule = activate_pricing_rule(db, rule_id)
    if not rule:
        raise HTTPException(status_code=404, detail="Rule not found")
    return rule
