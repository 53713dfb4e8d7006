"""create ledger tables

Revision ID: 5c1e0b7a9d21
Revises:
Create Date: 2026-10-17 09:12:44.318502

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e0b7a9d21"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create clients, coins and transactions."""
    op.create_table(
        "clients",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("password", sa.Text(), nullable=False),
        sa.Column("phone", sa.Text(), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_table(
        "coins",
        sa.Column("coin_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("client_id", sa.Integer(), nullable=False),
        sa.Column("minted_by", sa.Integer(), nullable=False),
        sa.Column("bit1", sa.Integer(), nullable=False),
        sa.Column("bit2", sa.Integer(), nullable=False),
        sa.Column("bit3", sa.Integer(), nullable=False),
        sa.Column("value", sa.Float(), nullable=False),
        sa.CheckConstraint("value > 0", name="ck_coins_value_positive"),
        sa.ForeignKeyConstraint(["client_id"], ["clients.id"]),
        sa.ForeignKeyConstraint(["minted_by"], ["clients.id"]),
        sa.PrimaryKeyConstraint("coin_id"),
        sa.UniqueConstraint("bit1", "bit2", "bit3", name="uq_coins_bits"),
    )
    op.create_index("ix_coins_client_id", "coins", ["client_id"])
    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("coin_id", sa.Integer(), nullable=False),
        sa.Column("seller_id", sa.Integer(), nullable=True),
        sa.Column("buyer_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("transaction_date", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["buyer_id"], ["clients.id"]),
        sa.ForeignKeyConstraint(["coin_id"], ["coins.coin_id"]),
        sa.ForeignKeyConstraint(["seller_id"], ["clients.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_transactions_coin_date", "transactions", ["coin_id", "transaction_date"]
    )


def downgrade() -> None:
    """Drop the ledger tables."""
    op.drop_index("ix_transactions_coin_date", table_name="transactions")
    op.drop_table("transactions")
    op.drop_index("ix_coins_client_id", table_name="coins")
    op.drop_table("coins")
    op.drop_table("clients")
