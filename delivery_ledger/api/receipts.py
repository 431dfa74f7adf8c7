"""
Receipt API endpoints.

The API layer is thin: it maps service errors to status codes
and owns the commit. Every mutating endpoint returns data only
after the commit, so nothing is shown as saved before the store
confirms it.
"""

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session

from delivery_ledger.config import get_settings
from delivery_ledger.exceptions import NotFoundError, PersistenceError
from delivery_ledger.models.base import get_db
from delivery_ledger.models.enums import PeriodGranularity
from delivery_ledger.services.receipt_service import ReceiptService
from delivery_ledger.services.import_export import (
    XLSX_MEDIA_TYPE,
    export_ledger_xlsx,
    rows_from_file,
)
from delivery_ledger.schemas.receipt import (
    ReceiptCreate,
    ReceiptUpdate,
    ReceiptResponse,
    ReceiptImportRequest,
    ReceiptLine,
    ReorderRequest,
    PeriodBalance,
    ImportResult,
)

router = APIRouter(prefix="/companies", tags=["Receipts"])


def _unavailable(e: PersistenceError) -> HTTPException:
    return HTTPException(
        status_code=503,
        detail=f"{e}. Nothing was saved, reload and try again.",
    )


# --- Queries ---

@router.get(
    "/{company_id}/receipts",
    response_model=list[ReceiptResponse],
)
def list_receipts(
    company_id: int,
    db: Session = Depends(get_db),
):
    """All receipts of a company in ledger order."""
    service = ReceiptService(db)
    try:
        return service.list_receipts(company_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{company_id}/receipts/export.xlsx")
def export_receipts(
    company_id: int,
    db: Session = Depends(get_db),
):
    """Download the recalculated ledger as an Excel workbook."""
    service = ReceiptService(db)
    try:
        company = service.companies.get_company(company_id)
        lines = service.ledger(company_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    content = export_ledger_xlsx(company.name, lines)
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="ledger-{company_id}.xlsx"'
        },
    )


@router.get(
    "/{company_id}/receipts/{receipt_id}",
    response_model=ReceiptResponse,
)
def get_receipt(
    company_id: int,
    receipt_id: int,
    db: Session = Depends(get_db),
):
    service = ReceiptService(db)
    try:
        return service.get_receipt(company_id, receipt_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get(
    "/{company_id}/periods",
    response_model=list[PeriodBalance],
)
def get_period_balances(
    company_id: int,
    granularity: PeriodGranularity = PeriodGranularity.MONTH,
    db: Session = Depends(get_db),
):
    """
    Running balance at the end of each year or month.

    The balance of a period is the total of its last receipt,
    not the sum of the period's receipts.
    """
    service = ReceiptService(db)
    try:
        return service.period_balances(company_id, granularity)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get(
    "/{company_id}/periods/{year}",
    response_model=list[ReceiptLine],
)
def get_year_receipts(
    company_id: int,
    year: int,
    db: Session = Depends(get_db),
):
    """Receipts of one year, including its placeholder rows."""
    service = ReceiptService(db)
    try:
        return service.period_lines(company_id, year)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get(
    "/{company_id}/periods/{year}/{month}",
    response_model=list[ReceiptLine],
)
def get_month_receipts(
    company_id: int,
    year: int,
    month: int,
    db: Session = Depends(get_db),
):
    """Receipts of one month."""
    if not 1 <= month <= 12:
        raise HTTPException(status_code=400, detail="month must be 1-12")
    service = ReceiptService(db)
    try:
        return service.period_lines(company_id, year, month)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


# --- Mutations ---

@router.post(
    "/{company_id}/receipts",
    response_model=ReceiptResponse,
    status_code=201,
)
def add_receipt(
    company_id: int,
    request: ReceiptCreate,
    db: Session = Depends(get_db),
):
    """Add a receipt; the running totals are recalculated."""
    service = ReceiptService(db)
    try:
        receipt = service.add_receipt(company_id, request)
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


@router.patch(
    "/{company_id}/receipts/{receipt_id}",
    response_model=ReceiptResponse,
)
def update_receipt(
    company_id: int,
    receipt_id: int,
    request: ReceiptUpdate,
    db: Session = Depends(get_db),
):
    """Change some fields of a receipt."""
    service = ReceiptService(db)
    try:
        receipt = service.update_receipt(company_id, receipt_id, request)
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


@router.delete("/{company_id}/receipts/{receipt_id}", status_code=204)
def delete_receipt(
    company_id: int,
    receipt_id: int,
    db: Session = Depends(get_db),
):
    """Delete a receipt; the remaining totals are recalculated."""
    service = ReceiptService(db)
    try:
        service.delete_receipt(company_id, receipt_id)
        db.commit()
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except PersistenceError as e:
        db.rollback()
        raise _unavailable(e)


@router.put(
    "/{company_id}/receipts/order",
    response_model=list[ReceiptResponse],
)
def reorder_receipts(
    company_id: int,
    request: ReorderRequest,
    db: Session = Depends(get_db),
):
    """
    Save a drag-and-drop order.

    The order stays in force until /receipts/resort is called.
    """
    service = ReceiptService(db)
    try:
        receipts = service.reorder(company_id, request.receipt_ids)
        db.commit()
        return receipts
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError as e:
        db.rollback()
        raise _unavailable(e)


@router.post(
    "/{company_id}/receipts/resort",
    response_model=list[ReceiptResponse],
)
def resort_receipts(
    company_id: int,
    db: Session = Depends(get_db),
):
    """Return to chronological order."""
    service = ReceiptService(db)
    try:
        receipts = service.resort(company_id)
        db.commit()
        return receipts
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except PersistenceError as e:
        db.rollback()
        raise _unavailable(e)


@router.post(
    "/{company_id}/receipts/import",
    response_model=ImportResult,
    status_code=201,
)
def import_receipts(
    company_id: int,
    request: ReceiptImportRequest,
    db: Session = Depends(get_db),
):
    """Add many receipts at once; all or nothing."""
    service = ReceiptService(db)
    try:
        receipts = service.import_receipts(company_id, request)
        db.commit()
        return ImportResult(
            imported=len(receipts),
            receipts=[ReceiptResponse.model_validate(r) for r in receipts],
        )
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError as e:
        db.rollback()
        raise _unavailable(e)


@router.post(
    "/{company_id}/receipts/import-file",
    response_model=ImportResult,
    status_code=201,
)
def import_receipts_file(
    company_id: int,
    filename: str,
    content: bytes = Body(..., media_type="application/octet-stream"),
    db: Session = Depends(get_db),
):
    """
    Import an .xlsx or .csv file sent as the raw request body.

    filename (query parameter) selects the parser.
    """
    max_bytes = get_settings().IMPORT_MAX_BYTES
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File is larger than {max_bytes} bytes",
        )

    service = ReceiptService(db)
    try:
        rows = rows_from_file(filename, content)
        if not rows:
            raise ValueError(f"No receipts found in {filename}")
        receipts = service.import_receipts(
            company_id, ReceiptImportRequest(rows=rows)
        )
        db.commit()
        return ImportResult(
            imported=len(receipts),
            receipts=[ReceiptResponse.model_validate(r) for r in receipts],
        )
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError as e:
        db.rollback()
        raise _unavailable(e)
