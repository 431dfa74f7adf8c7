"""initial schema: companies, delivery receipts, history

Revision ID: 0001
Revises:
Create Date: 2026-10-17 09:00:00
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "companies",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False, unique=True),
        sa.Column("logo_url", sa.String(length=500), nullable=True),
        sa.Column("column_colors", sa.JSON(), nullable=False),
        sa.Column("row_colors", sa.JSON(), nullable=False),
        sa.Column("manual_order", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "delivery_receipts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "company_id",
            sa.Integer(),
            sa.ForeignKey("companies.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.String(length=10), nullable=False),
        sa.Column("reference", sa.String(length=50), nullable=True),
        sa.Column("billed_amount", sa.Numeric(19, 4), nullable=True),
        sa.Column("advance_amount", sa.Numeric(19, 4), nullable=True),
        sa.Column("total", sa.Numeric(19, 4), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sqlite_autoincrement=True,
    )
    op.create_index(
        "ix_delivery_receipts_company_id", "delivery_receipts", ["company_id"]
    )

    history_action = sa.Enum("ADD", "UPDATE", "DELETE", name="history_action_enum")
    op.create_table(
        "history_entries",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "company_id",
            sa.Integer(),
            sa.ForeignKey("companies.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("action", history_action, nullable=False),
        sa.Column("receipt_id", sa.Integer(), nullable=False),
        sa.Column("details", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_history_entries_company_id", "history_entries", ["company_id"]
    )
    op.create_index(
        "ix_history_entries_receipt_id", "history_entries", ["receipt_id"]
    )


def downgrade() -> None:
    op.drop_index("ix_history_entries_receipt_id", table_name="history_entries")
    op.drop_index("ix_history_entries_company_id", table_name="history_entries")
    op.drop_table("history_entries")
    sa.Enum(name="history_action_enum").drop(op.get_bind(), checkfirst=True)
    op.drop_index("ix_delivery_receipts_company_id", table_name="delivery_receipts")
    op.drop_table("delivery_receipts")
    op.drop_table("companies")
