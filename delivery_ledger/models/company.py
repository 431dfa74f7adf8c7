"""
Company model.

A company owns a ledger of delivery receipts. Display preferences
(logo, column colors, row colors) are stored alongside it. Deleting
a company deletes its receipts and its history log.
"""

from datetime import datetime

from sqlalchemy import String, Boolean, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from delivery_ledger.models.base import Base


DEFAULT_COLUMN_COLORS: dict[str, str] = {
    "date": "#ffffff",
    "reference": "#ffffff",
    "billed_amount": "#0ea5e9",
    "advance_amount": "#f97316",
    "total": "#22c55e",
}

DEFAULT_ROW_COLORS: dict[str, str] = {
    "even": "#ffffff",
    "odd": "#f8f9fa",
    "header": "#f1f5f9",
}


class Company(Base):
    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    logo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    column_colors: Mapped[dict] = mapped_column(
        JSON, nullable=False, default=lambda: dict(DEFAULT_COLUMN_COLORS)
    )
    row_colors: Mapped[dict] = mapped_column(
        JSON, nullable=False, default=lambda: dict(DEFAULT_ROW_COLORS)
    )
    # When True the ledger follows the user's drag-and-drop order
    # instead of the chronological order.
    manual_order: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    receipts: Mapped[list["DeliveryReceipt"]] = relationship(
        back_populates="company", cascade="all, delete-orphan"
    )
    history_entries: Mapped[list["HistoryEntry"]] = relationship(
        back_populates="company", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Company {self.name}>"
