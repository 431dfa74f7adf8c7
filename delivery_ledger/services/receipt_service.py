"""
Receipt service — every change to a company's ledger.

Each mutation follows the same steps:
1. Validate the request (company exists, receipt belongs to it,
   dates normalize)
2. Write the change through the ReceiptStore
3. Recalculate the whole ledger of the company and persist the
   totals (and positions) that changed
4. Record the action in the history log

Totals are never patched incrementally: a company has tens of
receipts, and a full pass is always correct. The caller controls
the commit, so a failure anywhere leaves nothing half-written.
"""

import logging

from delivery_ledger.exceptions import NotFoundError
from delivery_ledger.formatters import canonical_date
from delivery_ledger.models.company import Company
from delivery_ledger.models.delivery_receipt import DeliveryReceipt
from delivery_ledger.models.enums import HistoryAction, PeriodGranularity
from delivery_ledger.schemas.receipt import (
    ReceiptCreate,
    ReceiptUpdate,
    ReceiptImportRequest,
    ReceiptLine,
    ReceiptSnapshot,
    PeriodBalance,
)
from delivery_ledger.services.company_service import CompanyService
from delivery_ledger.services.history_service import HistoryService
from delivery_ledger.services.persistence import flush
from delivery_ledger.services.ledger_calculator import (
    recalculate_ledger,
    period_balances,
    lines_in_period,
)
from delivery_ledger.services.receipt_store import ReceiptStore

logger = logging.getLogger(__name__)


class ReceiptService:
    """
    Ledger operations for one database session.

    The store and history log can be injected; by default both
    work on the given session.
    """

    def __init__(
        self,
        db,
        store: ReceiptStore | None = None,
        history: HistoryService | None = None,
    ):
        self.db = db
        self.store = store or ReceiptStore(db)
        self.history = history or HistoryService(db)
        self.companies = CompanyService(db)

    def _get_receipt(self, company_id: int, receipt_id: int) -> DeliveryReceipt:
        receipt = self.store.get_entry(receipt_id)
        if receipt.company_id != company_id:
            raise NotFoundError(
                f"Receipt {receipt_id} not found for company {company_id}"
            )
        return receipt

    def _ledger_for(self, company: Company) -> tuple[list, list[ReceiptLine]]:
        receipts = self.store.list_entries(company.id)
        lines = recalculate_ledger(receipts, preserve_order=company.manual_order)
        return receipts, lines

    # --- Recalculation ---

    def recalculate(self, company_id: int) -> list[ReceiptLine]:
        """
        Recompute every running total of a company and persist the
        ones that changed.

        In chronological mode positions are rewritten too, so the
        stored order always matches the ledger order.
        """
        company = self.companies.get_company(company_id)
        receipts, lines = self._ledger_for(company)
        by_id = {r.id: r for r in receipts}

        changed = 0
        for line in lines:
            receipt = by_id[line.id]
            if receipt.total != line.total:
                self.store.persist_total(line.id, line.total)
                changed += 1
            if receipt.position != line.position:
                self.store.persist_position(line.id, line.position)

        logger.debug(
            "Recalculated company %s: %s receipts, %s totals changed",
            company_id, len(lines), changed,
        )
        return lines

    def ledger(self, company_id: int) -> list[ReceiptLine]:
        """Recalculated lines in ledger order, without writing anything."""
        company = self.companies.get_company(company_id)
        return self._ledger_for(company)[1]

    # --- Queries ---

    def list_receipts(self, company_id: int) -> list[DeliveryReceipt]:
        """A company's receipts in stored (ledger) order."""
        self.companies.get_company(company_id)
        return self.store.list_entries(company_id)

    def get_receipt(self, company_id: int, receipt_id: int) -> DeliveryReceipt:
        return self._get_receipt(company_id, receipt_id)

    def period_balances(
        self,
        company_id: int,
        granularity: PeriodGranularity = PeriodGranularity.MONTH,
    ) -> list[PeriodBalance]:
        return period_balances(self.ledger(company_id), granularity)

    def period_lines(
        self, company_id: int, year: int, month: int | None = None
    ) -> list[ReceiptLine]:
        return lines_in_period(self.ledger(company_id), year, month)

    # --- Mutations ---

    def add_receipt(self, company_id: int, request: ReceiptCreate) -> DeliveryReceipt:
        """
        Add a receipt to a company's ledger.

        In manual order mode the receipt is appended at the end;
        otherwise its date decides where it lands.
        """
        self.companies.get_company(company_id)

        receipt = self.store.insert_entry(company_id, request.model_dump())
        self.recalculate(company_id)
        self.history.record_action(
            HistoryAction.ADD, receipt.id, receipt, company_id
        )

        logger.info("Added receipt %s to company %s", receipt.id, company_id)
        return receipt

    def update_receipt(
        self, company_id: int, receipt_id: int, request: ReceiptUpdate
    ) -> DeliveryReceipt:
        """Change some fields of a receipt and recalculate the ledger."""
        self._get_receipt(company_id, receipt_id)
        changes = request.model_dump(exclude_unset=True)
        if not changes:
            raise ValueError("No fields to update")

        receipt = self.store.update_entry_fields(receipt_id, changes)
        self.recalculate(company_id)
        self.history.record_action(
            HistoryAction.UPDATE, receipt_id, receipt, company_id
        )

        logger.info(
            "Updated receipt %s of company %s: %s",
            receipt_id, company_id, sorted(changes),
        )
        return receipt

    def delete_receipt(self, company_id: int, receipt_id: int) -> None:
        """Remove a receipt; the remaining totals are recalculated."""
        receipt = self._get_receipt(company_id, receipt_id)
        snapshot = ReceiptSnapshot.model_validate(receipt)

        self.store.delete_entry(receipt_id)
        self.recalculate(company_id)
        self.history.record_action(
            HistoryAction.DELETE, receipt_id, snapshot, company_id
        )

        logger.info("Deleted receipt %s of company %s", receipt_id, company_id)

    def reorder(self, company_id: int, receipt_ids: list[int]) -> list[DeliveryReceipt]:
        """
        Make the given order the ledger order.

        receipt_ids must list every receipt of the company exactly
        once. The company switches to manual order until resort()
        is called; receipts added meanwhile go to the end.
        """
        company = self.companies.get_company(company_id)
        current = self.store.list_entries(company_id)

        if sorted(receipt_ids) != sorted(r.id for r in current):
            raise ValueError(
                "Reorder must list every receipt of the company exactly once"
            )

        for position, receipt_id in enumerate(receipt_ids):
            self.store.persist_position(receipt_id, position)
        company.manual_order = True
        flush(self.db, f"switch company {company_id} to manual order")

        self.recalculate(company_id)
        logger.info("Company %s switched to manual order", company_id)
        return self.store.list_entries(company_id)

    def resort(self, company_id: int) -> list[DeliveryReceipt]:
        """Drop the manual order and go back to chronological order."""
        company = self.companies.get_company(company_id)
        company.manual_order = False
        flush(self.db, f"switch company {company_id} to chronological order")

        self.recalculate(company_id)
        logger.info("Company %s back to chronological order", company_id)
        return self.store.list_entries(company_id)

    def import_receipts(
        self, company_id: int, request: ReceiptImportRequest
    ) -> list[DeliveryReceipt]:
        """
        Add many receipts at once.

        All dates are checked before anything is written; if any
        row is invalid the whole import is rejected with the row
        numbers (1-based). The ledger is recalculated once at the
        end.
        """
        self.companies.get_company(company_id)

        dates = []
        bad_rows = []
        for row_number, row in enumerate(request.rows, start=1):
            try:
                dates.append(canonical_date(row.date))
            except ValueError:
                bad_rows.append(row_number)
        if bad_rows:
            raise ValueError(f"Invalid dates in rows: {bad_rows}")

        receipts = []
        for row, date_value in zip(request.rows, dates):
            fields = row.model_dump()
            fields["date"] = date_value
            receipts.append(self.store.insert_entry(company_id, fields))

        self.recalculate(company_id)
        for receipt in receipts:
            self.history.record_action(
                HistoryAction.ADD, receipt.id, receipt, company_id
            )

        logger.info("Imported %s receipts into company %s", len(receipts), company_id)
        return receipts

    def restore_from_history(
        self, company_id: int, receipt_id: int
    ) -> DeliveryReceipt:
        """
        Bring a receipt back to its most recently logged values.

        A receipt that still exists is updated in place; a deleted
        one is re-created (with a new id).

        The newest entry is always used. After an add or update that
        entry already matches the stored row, so the restore changes
        nothing but is still logged as an update. Edit the entry
        first (HistoryService.update_details) to restore other values.
        """
        entry = self.history.latest_for_receipt(company_id, receipt_id)
        snapshot = ReceiptSnapshot.model_validate(entry.details)
        fields = {
            "date": canonical_date(snapshot.date),
            "reference": snapshot.reference,
            "billed_amount": snapshot.billed_amount,
            "advance_amount": snapshot.advance_amount,
        }

        try:
            self._get_receipt(company_id, receipt_id)
        except NotFoundError:
            receipt = self.store.insert_entry(company_id, fields)
            action = HistoryAction.ADD
        else:
            receipt = self.store.update_entry_fields(receipt_id, fields)
            action = HistoryAction.UPDATE

        self.recalculate(company_id)
        self.history.record_action(action, receipt.id, receipt, company_id)

        logger.info(
            "Restored receipt %s of company %s as %s",
            receipt_id, company_id, receipt.id,
        )
        return receipt
