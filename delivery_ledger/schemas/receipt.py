"""
Pydantic schemas for delivery receipts.

Requests never carry a total: it is derived by the ledger
recalculation and only ever appears in responses.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, computed_field, field_validator

from delivery_ledger.formatters import (
    canonical_date,
    format_display_date,
    normalize_date,
)


def _reference_to_text(v):
    """Delivery note numbers come in as numbers or free text."""
    if v is None:
        return None
    if isinstance(v, float) and v.is_integer():
        v = int(v)
    text = str(v).strip()
    return text or None


# --- Request Schemas ---

class ReceiptCreate(BaseModel):
    """A new ledger line. The billed amount is required, it may be 0."""
    date: str = Field(default="", max_length=10)
    reference: str | None = Field(default=None, max_length=50)
    billed_amount: Decimal = Field(ge=0, decimal_places=4)
    advance_amount: Decimal | None = Field(default=None, ge=0, decimal_places=4)

    @field_validator("date", mode="before")
    @classmethod
    def date_must_normalize(cls, v) -> str:
        return canonical_date(v)

    @field_validator("reference", mode="before")
    @classmethod
    def reference_as_text(cls, v):
        return _reference_to_text(v)


class ReceiptUpdate(BaseModel):
    """Partial update; only the fields sent are changed."""
    date: str | None = Field(default=None, max_length=10)
    reference: str | None = Field(default=None, max_length=50)
    billed_amount: Decimal | None = Field(default=None, ge=0, decimal_places=4)
    advance_amount: Decimal | None = Field(default=None, ge=0, decimal_places=4)

    @field_validator("date", mode="before")
    @classmethod
    def date_must_normalize(cls, v) -> str:
        return canonical_date(v)

    @field_validator("reference", mode="before")
    @classmethod
    def reference_as_text(cls, v):
        return _reference_to_text(v)


class ReceiptImportRow(BaseModel):
    """
    One row of a bulk import.

    Dates are checked by the service so every bad row can be
    reported at once. Amounts may be empty.
    """
    date: str = ""
    reference: str | None = Field(default=None, max_length=50)
    billed_amount: Decimal | None = Field(default=None, ge=0)
    advance_amount: Decimal | None = Field(default=None, ge=0)

    @field_validator("date", mode="before")
    @classmethod
    def date_as_text(cls, v) -> str:
        return "" if v is None else str(v).strip()

    @field_validator("reference", mode="before")
    @classmethod
    def reference_as_text(cls, v):
        return _reference_to_text(v)


class ReceiptImportRequest(BaseModel):
    rows: list[ReceiptImportRow] = Field(min_length=1)


class ReorderRequest(BaseModel):
    """The company's receipt ids, in the order the user dropped them."""
    receipt_ids: list[int] = Field(min_length=1)


# --- Ledger Schemas ---

class ReceiptLine(BaseModel):
    """
    The ledger's view of a receipt: just what the running total
    depends on, plus the total itself.
    """
    id: int | None = None
    date: str = ""
    reference: str | None = None
    billed_amount: Decimal | None = None
    advance_amount: Decimal | None = None
    total: Decimal = Decimal("0")
    position: int = 0

    model_config = {"from_attributes": True}

    @field_validator("date", mode="before")
    @classmethod
    def date_as_text(cls, v) -> str:
        if v is None:
            return ""
        if isinstance(v, date):
            return normalize_date(v).canonical
        return str(v)

    @field_validator("reference", mode="before")
    @classmethod
    def reference_as_text(cls, v):
        return _reference_to_text(v)


class ReceiptSnapshot(BaseModel):
    """Field values stored in a history entry."""
    date: str | None = None
    reference: str | None = None
    billed_amount: Decimal | None = None
    advance_amount: Decimal | None = None
    total: Decimal | None = None

    model_config = {"from_attributes": True}


# --- Response Schemas ---

class ReceiptResponse(BaseModel):
    id: int
    company_id: int
    date: str
    reference: str | None
    billed_amount: Decimal | None
    advance_amount: Decimal | None
    total: Decimal
    position: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def display_date(self) -> str:
        return format_display_date(self.date)


class PeriodBalance(BaseModel):
    """
    Running balance at the end of a year or month.

    balance is the total of the bucket's last receipt in ledger
    order; billed and advance are the bucket's own sums.
    """
    year: int
    month: int | None = None
    entry_count: int
    billed: Decimal
    advance: Decimal
    balance: Decimal


class ImportResult(BaseModel):
    imported: int
    receipts: list[ReceiptResponse]
