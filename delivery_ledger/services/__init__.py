"""Business logic services."""

from delivery_ledger.services.ledger_calculator import (
    compute_contribution,
    recalculate_ledger,
)
from delivery_ledger.services.receipt_store import ReceiptStore
from delivery_ledger.services.company_service import CompanyService
from delivery_ledger.services.history_service import HistoryService
from delivery_ledger.services.receipt_service import ReceiptService

__all__ = [
    "compute_contribution",
    "recalculate_ledger",
    "ReceiptStore",
    "CompanyService",
    "HistoryService",
    "ReceiptService",
]
