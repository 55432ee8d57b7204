import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_JSON", "false")

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from printshop.database.connection import Base, get_db
from printshop.main import app
from printshop.schemas.pricing_rule import CustomerPricingRule
from printshop.schemas.quote import Customer, LineItem, Quote

TEST_DB_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture(scope="session", autouse=True)
def create_test_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    connection = engine.connect()
    trans = connection.begin()
    session = TestingSessionLocal(bind=connection)
    try:
        yield session
    finally:
        session.close()
        trans.rollback()
        connection.close()


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


# ---------- builders ----------

def make_rule(rule_id="R1", **overrides) -> CustomerPricingRule:
    data = {
        "id": rule_id,
        "name": f"Rule {rule_id}",
        "discount_type": "percent",
        "discount_value": 10.0,
        "priority": 10,
        "stackable": True,
        "active": True,
        "conditions": [],
    }
    data.update(overrides)
    return CustomerPricingRule.model_validate(data)


def make_quote(
    tier=None,
    items=None,
    subtotal=None,
    created_at=datetime(2024, 1, 15, 10, 30),
    **overrides,
) -> Quote:
    line_items = [LineItem(**item) for item in (items or [])]
    if subtotal is None:
        subtotal = sum(item.line_total for item in line_items)
    return Quote(
        id="Q-1",
        quote_number="Q-2024-0001",
        customer=Customer(id="C-1", name="Acme Screen Co", tier=tier),
        line_items=line_items,
        subtotal=subtotal,
        created_at=created_at,
        **overrides,
    )
