"""
Flushing with database errors turned into PersistenceError.

Routes answer PersistenceError with 503 after a rollback, so a
failed write never reaches the client as a 500.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from delivery_ledger.exceptions import PersistenceError

logger = logging.getLogger(__name__)


def flush(db: Session, action: str) -> None:
    try:
        db.flush()
    except SQLAlchemyError as e:
        logger.error("Failed to %s: %s", action, e)
        raise PersistenceError(f"Failed to {action}") from e


def execute(db: Session, statement, action: str):
    """Run a bulk statement (e.g. a DELETE) and return its result."""
    try:
        return db.execute(statement)
    except SQLAlchemyError as e:
        logger.error("Failed to %s: %s", action, e)
        raise PersistenceError(f"Failed to {action}") from e
