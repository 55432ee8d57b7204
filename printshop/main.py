from fastapi import FastAPI
from datetime import datetime
from printshop.core.logging_config import logger, setup_logging
from printshop.middleware.metrics import MetricsMiddleware, new_metrics
from printshop.routes import system
from printshop.database.connection import Base, engine
from printshop.models import pricing_rule  # noqa: F401  registers the table
from printshop.routes.pricing.pricing_route import router as pricing_router
from printshop.routes.pricing.quote_discounts import router as quote_discounts_router

setup_logging()

Base.metadata.create_all(bind=engine)

app = FastAPI(title="Print Shop Customer Pricing Rules")

app.add_middleware(MetricsMiddleware)


app.include_router(pricing_router)
app.include_router(quote_discounts_router)
app.include_router(system.router)

@app.on_event("startup")
async def startup_event():
    app.state.start_time = datetime.utcnow()
    app.state.metrics = new_metrics()
    logger.info("startup", service="printshop-pricing")
