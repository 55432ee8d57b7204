from sqlalchemy import Column, Integer, String, Float, JSON, Boolean, DateTime
import datetime
from printshop.database.connection import Base


class PricingRule(Base):
    __tablename__ = "customer_pricing_rules"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(String, default="")
    conditions = Column(JSON, default=[])  # list of {"kind": ..., ...}
    discount_type = Column(String, default="percent")  # percent, fixed
    discount_value = Column(Float, default=0.0)
    apply_to = Column(String, default="total")  # total, product, setup
    priority = Column(Integer, default=10)
    stackable = Column(Boolean, default=True)
    active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow)
