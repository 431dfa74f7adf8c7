"""
History API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from delivery_ledger.exceptions import NotFoundError, PersistenceError
from delivery_ledger.models.base import get_db
from delivery_ledger.services.company_service import CompanyService
from delivery_ledger.services.history_service import HistoryService
from delivery_ledger.services.receipt_service import ReceiptService
from delivery_ledger.schemas.history import (
    HistoryEntryResponse,
    HistoryDetailsUpdate,
    HistoryDeleteRequest,
)
from delivery_ledger.schemas.receipt import ReceiptResponse

router = APIRouter(tags=["History"])


def _unavailable(e: PersistenceError) -> HTTPException:
    return HTTPException(
        status_code=503,
        detail=f"{e}. Nothing was saved, reload and try again.",
    )


@router.get(
    "/companies/{company_id}/history",
    response_model=list[HistoryEntryResponse],
)
def list_history(
    company_id: int,
    db: Session = Depends(get_db),
):
    """A company's history, newest first."""
    try:
        CompanyService(db).get_company(company_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return HistoryService(db).list_entries(company_id)


@router.patch(
    "/history/{entry_id}",
    response_model=HistoryEntryResponse,
)
def update_history_entry(
    entry_id: int,
    request: HistoryDetailsUpdate,
    db: Session = Depends(get_db),
):
    """Edit the snapshot stored in a history entry."""
    service = HistoryService(db)
    try:
        entry = service.update_details(entry_id, request.details)
        db.commit()
        return entry
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except PersistenceError as e:
        db.rollback()
        raise _unavailable(e)


@router.post("/companies/{company_id}/history/delete")
def delete_history_entries(
    company_id: int,
    request: HistoryDeleteRequest,
    db: Session = Depends(get_db),
):
    """Delete the history of the given receipts."""
    try:
        CompanyService(db).get_company(company_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    try:
        deleted = HistoryService(db).delete_for_receipts(
            company_id, request.receipt_ids
        )
        db.commit()
    except PersistenceError as e:
        db.rollback()
        raise _unavailable(e)
    return {"deleted": deleted}


@router.delete("/companies/{company_id}/history")
def clear_history(
    company_id: int,
    db: Session = Depends(get_db),
):
    """Delete the whole history of a company."""
    try:
        CompanyService(db).get_company(company_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    try:
        deleted = HistoryService(db).clear(company_id)
        db.commit()
    except PersistenceError as e:
        db.rollback()
        raise _unavailable(e)
    return {"deleted": deleted}


@router.post(
    "/companies/{company_id}/history/{receipt_id}/restore",
    response_model=ReceiptResponse,
)
def restore_receipt(
    company_id: int,
    receipt_id: int,
    db: Session = Depends(get_db),
):
    """
    Restore a receipt to the values of its latest history entry.

    A deleted receipt comes back with a new id.
    """
    service = ReceiptService(db)
    try:
        receipt = service.restore_from_history(company_id, receipt_id)
        db.commit()
        return receipt
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError as e:
        db.rollback()
        raise _unavailable(e)
