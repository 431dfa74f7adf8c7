"""
Delivery Receipt Ledger — FastAPI Application.

This is the entry point for the application.
All routers are registered here.
"""

import logging

from fastapi import FastAPI

from delivery_ledger.config import get_settings
from delivery_ledger.api.health import router as health_router
from delivery_ledger.api.companies import router as companies_router
from delivery_ledger.api.receipts import router as receipts_router
from delivery_ledger.api.history import router as history_router

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Per-company delivery receipt ledger with running balances",
    debug=settings.DEBUG,
)

# Register routers
app.include_router(health_router)
app.include_router(companies_router)
app.include_router(receipts_router)
app.include_router(history_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "delivery_ledger.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development",
    )
