"""
History entry model.

Records add/update/delete actions on receipts for display and
best-effort restore. Unlike an audit log, entries may be edited
or cleared by the user; the ledger never reads them.
"""

from datetime import datetime

from sqlalchemy import Integer, DateTime, ForeignKey, JSON, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from delivery_ledger.models.base import Base
from delivery_ledger.models.enums import HistoryAction


class HistoryEntry(Base):
    __tablename__ = "history_entries"

    id: Mapped[int] = mapped_column(primary_key=True)
    company_id: Mapped[int] = mapped_column(
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    action: Mapped[HistoryAction] = mapped_column(
        SAEnum(HistoryAction, name="history_action_enum"),
        nullable=False,
    )
    # Not a foreign key: deleted receipts keep their history.
    receipt_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    details: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    company: Mapped["Company"] = relationship(back_populates="history_entries")

    def __repr__(self) -> str:
        return f"<HistoryEntry {self.action.value} receipt={self.receipt_id}>"
