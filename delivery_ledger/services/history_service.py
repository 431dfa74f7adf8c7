"""
History service — the informational log of receipt changes.

The receipt service records an entry after each add, update and
delete. The log can be edited, pruned or cleared by the user, so
nothing in the ledger depends on it; it only serves display and
best-effort restore.
"""

import logging

from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from delivery_ledger.exceptions import NotFoundError
from delivery_ledger.models.enums import HistoryAction
from delivery_ledger.models.history_entry import HistoryEntry
from delivery_ledger.schemas.receipt import ReceiptSnapshot
from delivery_ledger.services.persistence import execute, flush

logger = logging.getLogger(__name__)


def snapshot_of(details) -> dict:
    """JSON-safe snapshot of a receipt, a ReceiptSnapshot or a dict."""
    if not isinstance(details, ReceiptSnapshot):
        details = ReceiptSnapshot.model_validate(details)
    return details.model_dump(mode="json")


class HistoryService:

    def __init__(self, db: Session):
        self.db = db

    def record_action(
        self,
        action: HistoryAction,
        receipt_id: int,
        details,
        company_id: int,
    ) -> HistoryEntry:
        """Append an entry. details is snapshotted immediately."""
        entry = HistoryEntry(
            action=HistoryAction(action),
            receipt_id=receipt_id,
            details=snapshot_of(details),
            company_id=company_id,
        )
        self.db.add(entry)
        flush(self.db, f"record history of receipt {receipt_id}")
        return entry

    def list_entries(self, company_id: int) -> list[HistoryEntry]:
        """A company's history, newest first."""
        entries = self.db.execute(
            select(HistoryEntry)
            .where(HistoryEntry.company_id == company_id)
            .order_by(HistoryEntry.created_at.desc(), HistoryEntry.id.desc())
        ).scalars().all()
        return list(entries)

    def get_entry(self, entry_id: int) -> HistoryEntry:
        entry = self.db.get(HistoryEntry, entry_id)
        if not entry:
            raise NotFoundError(f"History entry {entry_id} not found")
        return entry

    def latest_for_receipt(self, company_id: int, receipt_id: int) -> HistoryEntry:
        """The most recent entry recorded for a receipt."""
        entry = self.db.execute(
            select(HistoryEntry)
            .where(
                HistoryEntry.company_id == company_id,
                HistoryEntry.receipt_id == receipt_id,
            )
            .order_by(HistoryEntry.created_at.desc(), HistoryEntry.id.desc())
            .limit(1)
        ).scalar_one_or_none()
        if not entry:
            raise NotFoundError(f"No history for receipt {receipt_id}")
        return entry

    def update_details(self, entry_id: int, details: ReceiptSnapshot) -> HistoryEntry:
        """Merge the fields that were sent into the stored snapshot."""
        entry = self.get_entry(entry_id)
        changes = details.model_dump(mode="json", exclude_unset=True)
        # Reassign so the JSON column is marked dirty.
        entry.details = {**entry.details, **changes}
        flush(self.db, f"update history entry {entry_id}")
        return entry

    def delete_for_receipts(self, company_id: int, receipt_ids: list[int]) -> int:
        result = execute(
            self.db,
            delete(HistoryEntry).where(
                HistoryEntry.company_id == company_id,
                HistoryEntry.receipt_id.in_(receipt_ids),
            ),
            f"delete history of company {company_id}",
        )
        logger.info(
            "Deleted %s history entries of company %s", result.rowcount, company_id
        )
        return result.rowcount

    def clear(self, company_id: int) -> int:
        result = execute(
            self.db,
            delete(HistoryEntry).where(HistoryEntry.company_id == company_id),
            f"clear history of company {company_id}",
        )
        logger.info("Cleared history of company %s", company_id)
        return result.rowcount
