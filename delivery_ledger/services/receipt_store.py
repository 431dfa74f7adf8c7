"""
Receipt store: the persistence boundary for receipts.

ReceiptService talks to receipts only through this class, so a
different store (or a fake in tests) can be passed in instead.
Like the services, the store never commits: the caller owns the
transaction.
"""

from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from delivery_ledger.exceptions import NotFoundError
from delivery_ledger.models.delivery_receipt import DeliveryReceipt
from delivery_ledger.services.persistence import flush

EDITABLE_FIELDS = {"date", "reference", "billed_amount", "advance_amount"}


class ReceiptStore:

    def __init__(self, db: Session):
        self.db = db

    def list_entries(self, company_id: int) -> list[DeliveryReceipt]:
        """All receipts of a company in stored order."""
        receipts = self.db.execute(
            select(DeliveryReceipt)
            .where(DeliveryReceipt.company_id == company_id)
            .order_by(DeliveryReceipt.position, DeliveryReceipt.id)
        ).scalars().all()
        return list(receipts)

    def get_entry(self, receipt_id: int) -> DeliveryReceipt:
        receipt = self.db.get(DeliveryReceipt, receipt_id)
        if not receipt:
            raise NotFoundError(f"Receipt {receipt_id} not found")
        return receipt

    def next_position(self, company_id: int) -> int:
        highest = self.db.execute(
            select(func.max(DeliveryReceipt.position)).where(
                DeliveryReceipt.company_id == company_id
            )
        ).scalar()
        return 0 if highest is None else highest + 1

    def insert_entry(self, company_id: int, fields: dict) -> DeliveryReceipt:
        """
        Insert a receipt at the end of the stored order.

        The total starts at zero; it is set by the recalculation
        that follows every insert.
        """
        receipt = DeliveryReceipt(
            company_id=company_id,
            position=self.next_position(company_id),
            total=Decimal("0"),
            **{k: v for k, v in fields.items() if k in EDITABLE_FIELDS},
        )
        self.db.add(receipt)
        flush(self.db, "insert receipt")
        return receipt

    def update_entry_fields(self, receipt_id: int, fields: dict) -> DeliveryReceipt:
        receipt = self.get_entry(receipt_id)
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {sorted(unknown)}")
        for name, value in fields.items():
            setattr(receipt, name, value)
        flush(self.db, f"update receipt {receipt_id}")
        return receipt

    def delete_entry(self, receipt_id: int) -> None:
        receipt = self.get_entry(receipt_id)
        self.db.delete(receipt)
        flush(self.db, f"delete receipt {receipt_id}")

    def persist_total(self, receipt_id: int, total: Decimal) -> None:
        receipt = self.get_entry(receipt_id)
        receipt.total = total
        flush(self.db, f"persist total of receipt {receipt_id}")

    def persist_position(self, receipt_id: int, position: int) -> None:
        receipt = self.get_entry(receipt_id)
        receipt.position = position
        flush(self.db, f"persist position of receipt {receipt_id}")
