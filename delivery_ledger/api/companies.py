"""
Company API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from delivery_ledger.exceptions import NotFoundError
from delivery_ledger.models.base import get_db
from delivery_ledger.services.company_service import CompanyService
from delivery_ledger.schemas.company import (
    CompanyCreate,
    CompanyUpdate,
    CompanyResponse,
)

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.post("", response_model=CompanyResponse, status_code=201)
def create_company(
    request: CompanyCreate,
    db: Session = Depends(get_db),
):
    """Create a new company with default colors unless given."""
    service = CompanyService(db)
    try:
        company = service.create_company(request)
        db.commit()
        return company
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=list[CompanyResponse])
def list_companies(db: Session = Depends(get_db)):
    """All companies, by name."""
    return CompanyService(db).list_companies()


@router.get("/{company_id}", response_model=CompanyResponse)
def get_company(
    company_id: int,
    db: Session = Depends(get_db),
):
    service = CompanyService(db)
    try:
        return service.get_company(company_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{company_id}", response_model=CompanyResponse)
def update_company(
    company_id: int,
    request: CompanyUpdate,
    db: Session = Depends(get_db),
):
    """Rename a company or change its logo and colors."""
    service = CompanyService(db)
    try:
        company = service.update_company(company_id, request)
        db.commit()
        return company
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{company_id}", status_code=204)
def delete_company(
    company_id: int,
    db: Session = Depends(get_db),
):
    """Delete a company, its receipts and its history."""
    service = CompanyService(db)
    try:
        service.delete_company(company_id)
        db.commit()
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
