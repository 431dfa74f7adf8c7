"""
Pydantic schemas for the history log.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from delivery_ledger.models.enums import HistoryAction
from delivery_ledger.schemas.receipt import ReceiptSnapshot


class HistoryEntryResponse(BaseModel):
    id: int
    company_id: int
    action: HistoryAction
    receipt_id: int
    details: ReceiptSnapshot
    created_at: datetime

    model_config = {"from_attributes": True}


class HistoryDetailsUpdate(BaseModel):
    """Snapshot fields to overwrite; fields not sent are kept."""
    details: ReceiptSnapshot


class HistoryDeleteRequest(BaseModel):
    receipt_ids: list[int] = Field(min_length=1)
