from typing import List

from pydantic import ValidationError
from sqlalchemy.orm import Session

from printshop.core.logging_config import logger
from printshop.models.pricing_rule import PricingRule
from printshop.schemas.pricing_rule import CustomerPricingRule, PricingRuleCreate, PricingRuleUpdate

def create_pricing_rule(db: Session, rule: PricingRuleCreate):
    db_rule = PricingRule(**rule.model_dump(mode="json"))
    db.add(db_rule)
    db.commit()
    db.refresh(db_rule)
    logger.info("pricing_rule_created", rule_id=db_rule.id)
    return db_rule

def get_pricing_rules(db: Session, skip: int = 0, limit: int = 100):
    return (
        db.query(PricingRule)
        .order_by(PricingRule.priority, PricingRule.id)
        .offset(skip)
        .limit(limit)
        .all()
    )

def get_pricing_rule(db: Session, rule_id: str):
    return db.query(PricingRule).filter(PricingRule.id == rule_id).first()

class InvalidPricingRule(ValueError):
    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors

def _merged_rule(db_rule: PricingRule, changes: dict) -> CustomerPricingRule:
    """
    The stored rule with `changes` applied, checked as a whole so a partial
    update cannot leave a malformed rule behind.
    """
    stored = {column.name: getattr(db_rule, column.name) for column in PricingRule.__table__.columns}
    try:
        merged = CustomerPricingRule.model_validate({**stored, **changes})
    except ValidationError as e:
        raise InvalidPricingRule([error["msg"] for error in e.errors()])

    errors = merged.configuration_errors()
    if errors:
        raise InvalidPricingRule(errors)
    return merged

def update_pricing_rule(db: Session, rule_id: str, rule_update: PricingRuleUpdate):
    db_rule = db.query(PricingRule).filter(PricingRule.id == rule_id).first()
    if not db_rule:
        return None

    changes = rule_update.model_dump(mode="json", exclude_unset=True)
    _merged_rule(db_rule, changes)

    for key, value in changes.items():
        setattr(db_rule, key, value)

    db.commit()
    db.refresh(db_rule)
    logger.info("pricing_rule_updated", rule_id=rule_id)
    return db_rule

def _set_active(db: Session, rule_id: str, active: bool):
    db_rule = db.query(PricingRule).filter(PricingRule.id == rule_id).first()
    if not db_rule:
        return None
    db_rule.active = active
    db.commit()
    db.refresh(db_rule)
    logger.info("pricing_rule_toggled", rule_id=rule_id, active=active)
    return db_rule

def deactivate_pricing_rule(db: Session, rule_id: str):
    return _set_active(db, rule_id, False)

def activate_pricing_rule(db: Session, rule_id: str):
    return _set_active(db, rule_id, True)

def load_rules_for_evaluation(db: Session) -> List[CustomerPricingRule]:
    """
    Active rules as engine models. A stored row that no longer validates is
    skipped so it cannot block quoting.
    """
    rows = db.query(PricingRule).filter(PricingRule.active.is_(True)).all()

    rules: List[CustomerPricingRule] = []
    for row in rows:
        try:
            rules.append(CustomerPricingRule.model_validate(row))
        except ValidationError as e:
            logger.warning("pricing_rule_unreadable", rule_id=row.id, error=str(e))
    return rules
