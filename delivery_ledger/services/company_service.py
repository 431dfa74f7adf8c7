"""
Company service — companies and their display preferences.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from delivery_ledger.exceptions import NotFoundError
from delivery_ledger.models.company import (
    Company,
    DEFAULT_COLUMN_COLORS,
    DEFAULT_ROW_COLORS,
)
from delivery_ledger.schemas.company import CompanyCreate, CompanyUpdate

logger = logging.getLogger(__name__)


class CompanyService:

    def __init__(self, db: Session):
        self.db = db

    def _check_name_free(self, name: str, company_id: int | None = None) -> None:
        existing = self.db.execute(
            select(Company).where(Company.name == name)
        ).scalar_one_or_none()
        if existing and existing.id != company_id:
            raise ValueError(f"Company '{name}' already exists")

    def create_company(self, request: CompanyCreate) -> Company:
        """Create a company; missing colors fall back to the defaults."""
        self._check_name_free(request.name)

        company = Company(
            name=request.name,
            logo_url=request.logo_url,
            column_colors={**DEFAULT_COLUMN_COLORS, **(request.column_colors or {})},
            row_colors={**DEFAULT_ROW_COLORS, **(request.row_colors or {})},
        )
        self.db.add(company)
        self.db.flush()
        logger.info("Created company %s (%s)", company.id, company.name)
        return company

    def get_company(self, company_id: int) -> Company:
        company = self.db.get(Company, company_id)
        if not company:
            raise NotFoundError(f"Company {company_id} not found")
        return company

    def list_companies(self) -> list[Company]:
        companies = self.db.execute(
            select(Company).order_by(Company.name)
        ).scalars().all()
        return list(companies)

    def update_company(self, company_id: int, request: CompanyUpdate) -> Company:
        """
        Apply a partial update.

        Color maps are merged key by key, so a client can change
        one column color without resending the others.
        """
        company = self.get_company(company_id)
        changes = request.model_dump(exclude_unset=True)

        if changes.get("name") is not None:
            self._check_name_free(changes["name"], company_id)
            company.name = changes["name"]
        if "logo_url" in changes:
            company.logo_url = changes["logo_url"]
        if changes.get("column_colors"):
            company.column_colors = {
                **company.column_colors, **changes["column_colors"]
            }
        if changes.get("row_colors"):
            company.row_colors = {**company.row_colors, **changes["row_colors"]}

        self.db.flush()
        return company

    def delete_company(self, company_id: int) -> None:
        """Delete a company together with its receipts and history."""
        company = self.get_company(company_id)
        receipt_count = len(company.receipts)
        self.db.delete(company)
        self.db.flush()
        logger.info(
            "Deleted company %s with %s receipts", company_id, receipt_count
        )
