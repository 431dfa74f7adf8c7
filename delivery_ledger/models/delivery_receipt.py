"""
Delivery receipt model.

One line of a company's ledger. The total column is a cached
projection: it is rewritten by the receipt service after every
mutation and is never accepted from a client.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import String, Integer, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from delivery_ledger.models.base import Base


class DeliveryReceipt(Base):
    """
    A delivery note with its billed amount and advance payment.

    The date is stored in canonical form: YYYY-MM-DD for a full
    date, YYYY for a year placeholder row, or an empty string.
    """

    __tablename__ = "delivery_receipts"
    # Ids are never reused: history entries refer to deleted receipts by id.
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True)
    company_id: Mapped[int] = mapped_column(
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    date: Mapped[str] = mapped_column(String(10), nullable=False, default="")
    reference: Mapped[str | None] = mapped_column(String(50), nullable=True)
    billed_amount: Mapped[Decimal | None] = mapped_column(
        Numeric(19, 4), nullable=True
    )
    advance_amount: Mapped[Decimal | None] = mapped_column(
        Numeric(19, 4), nullable=True
    )
    total: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    company: Mapped["Company"] = relationship(back_populates="receipts")

    def __repr__(self) -> str:
        return (
            f"<DeliveryReceipt {self.id} {self.date or '-'} "
            f"total={self.total}>"
        )
