# src/bitslow_market/models/transaction.py
"""SQLAlchemy model for the append-only transfer history."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from bitslow_market.db.session import Base
from bitslow_market.db.time import utcnow


class Transaction(Base):
    """One ownership transfer of a coin.

    ``seller_id`` is the previous owner (NULL for coins issued directly from
    the mint) and ``buyer_id`` the new one. Rows are immutable.
    """

    __tablename__ = "transactions"
    __table_args__ = (Index("ix_transactions_coin_date", "coin_id", "transaction_date"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    coin_id: Mapped[int] = mapped_column(Integer, ForeignKey("coins.coin_id"), nullable=False)
    seller_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("clients.id"),
        nullable=True,
    )
    buyer_id: Mapped[int] = mapped_column(Integer, ForeignKey("clients.id"), nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    transaction_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
