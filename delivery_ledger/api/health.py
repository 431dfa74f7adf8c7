"""
Health check: is the ledger service up, and can it reach its database.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from delivery_ledger.config import get_settings
from delivery_ledger.models.base import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """
    Report the service version, environment and database status.

    An unreachable database degrades the instance; the endpoint
    itself still answers 200.
    """
    settings = get_settings()
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("Health check could not reach the database: %s", e)
        database = "unhealthy"
    else:
        database = "healthy"

    return {
        "status": "healthy" if database == "healthy" else "degraded",
        "service": "delivery-ledger",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "database": database,
    }
