# src/bitslow_market/models/coin.py
"""SQLAlchemy model for BitSlow coins."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Float, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from bitslow_market.db.session import Base


class Coin(Base):
    """A tradeable coin whose identity is the ordered (bit1, bit2, bit3) triple.

    The triple is unique across every coin ever minted; the uniqueness
    constraint is what makes minting an atomic insert-if-absent. Coins are
    never deleted and ``owner_id`` is the only column that changes, and only
    through a ledger transfer.
    """

    __tablename__ = "coins"
    __table_args__ = (
        UniqueConstraint("bit1", "bit2", "bit3", name="uq_coins_bits"),
        CheckConstraint("value > 0", name="ck_coins_value_positive"),
    )

    coin_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Column keeps its historical name; the attribute reflects its meaning.
    owner_id: Mapped[int] = mapped_column(
        "client_id",
        Integer,
        ForeignKey("clients.id"),
        nullable=False,
        index=True,
    )
    minted_by: Mapped[int] = mapped_column(Integer, ForeignKey("clients.id"), nullable=False)
    bit1: Mapped[int] = mapped_column(Integer, nullable=False)
    bit2: Mapped[int] = mapped_column(Integer, nullable=False)
    bit3: Mapped[int] = mapped_column(Integer, nullable=False)
    value: Mapped[float] = mapped_column(Float, nullable=False)

    @property
    def bits(self) -> tuple[int, int, int]:
        """Return the identity triple."""
        return (self.bit1, self.bit2, self.bit3)
