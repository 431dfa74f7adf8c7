"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from delivery_ledger.models.base import Base
from delivery_ledger.models.enums import HistoryAction, PeriodGranularity
from delivery_ledger.models.company import Company
from delivery_ledger.models.delivery_receipt import DeliveryReceipt
from delivery_ledger.models.history_entry import HistoryEntry

__all__ = [
    "Base",
    "HistoryAction",
    "PeriodGranularity",
    "Company",
    "DeliveryReceipt",
    "HistoryEntry",
]
