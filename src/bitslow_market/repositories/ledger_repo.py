"""Data access helpers for coins, clients and transactions."""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import Select, func, select, update
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased

from bitslow_market.core.errors import DuplicateIdentity
from bitslow_market.models import Client, Coin, Transaction

__all__ = ["LedgerRepository", "TransactionFilter"]


@dataclass(frozen=True)
class TransactionFilter:
    """Optional criteria narrowing a transaction listing."""

    start_date: datetime | None = None
    finish_date: datetime | None = None
    min_value: float | None = None
    max_value: float | None = None
    buyer_name: str | None = None
    seller_name: str | None = None
    seller_id: int | None = None
    buyer_id: int | None = None


class LedgerRepository:
    """Thin wrapper around database access for ledger entities.

    Exposes the two single-row atomic primitives the ledger relies on:
    ``insert_coin`` (insert-if-absent, enforced by the unique bit constraint)
    and ``compare_and_set_owner`` (conditional owner update).
    """

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    # ─── clients ────────────────────────────────────────────────

    def get_client(self, client_id: int) -> Client | None:
        return self.session.get(Client, client_id)

    def get_client_by_email(self, email: str) -> Client | None:
        return self.session.execute(
            select(Client).where(Client.email == email)
        ).scalar_one_or_none()

    def list_clients(self) -> list[Client]:
        return list(self.session.execute(select(Client).order_by(Client.id)).scalars())

    # ─── coins ──────────────────────────────────────────────────

    def get_coin(self, coin_id: int) -> Coin | None:
        """Return a coin with freshly loaded column values."""
        return self.session.execute(
            select(Coin)
            .where(Coin.coin_id == coin_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def list_coins(self) -> list[Coin]:
        return list(self.session.execute(select(Coin).order_by(Coin.coin_id)).scalars())

    def used_triples(self) -> set[tuple[int, int, int]]:
        rows = self.session.execute(select(Coin.bit1, Coin.bit2, Coin.bit3))
        return {(bit1, bit2, bit3) for bit1, bit2, bit3 in rows}

    def insert_coin(
        self,
        *,
        owner_id: int,
        bits: tuple[int, int, int],
        value: float,
    ) -> Coin:
        """Insert a coin, or raise ``DuplicateIdentity`` if its triple exists.

        The check and the insert are one statement; the unique constraint
        decides. On any integrity failure the session is rolled back here;
        failures other than a taken triple propagate unchanged.
        """
        coin = Coin(
            owner_id=owner_id,
            minted_by=owner_id,
            bit1=bits[0],
            bit2=bits[1],
            bit3=bits[2],
            value=value,
        )
        self.session.add(coin)
        try:
            self.session.flush()
        except IntegrityError as err:
            self.session.rollback()
            if self.triple_exists(bits):
                raise DuplicateIdentity(bits) from err
            raise
        return coin

    def triple_exists(self, bits: tuple[int, int, int]) -> bool:
        return (
            self.session.execute(
                select(Coin.coin_id).where(
                    Coin.bit1 == bits[0], Coin.bit2 == bits[1], Coin.bit3 == bits[2]
                )
            ).first()
            is not None
        )

    def compare_and_set_owner(self, coin_id: int, *, expected_owner: int, new_owner: int) -> bool:
        """Move a coin to ``new_owner`` only if it is still held by ``expected_owner``."""
        result = self.session.execute(
            update(Coin)
            .where(Coin.coin_id == coin_id, Coin.owner_id == expected_owner)
            .values(owner_id=new_owner)
        )
        return result.rowcount == 1

    def marketplace_rows(self) -> Sequence[RowMapping]:
        owner = aliased(Client)
        stmt = (
            select(
                Coin.coin_id,
                Coin.owner_id,
                owner.name.label("owner"),
                Coin.bit1,
                Coin.bit2,
                Coin.bit3,
                Coin.value,
            )
            .outerjoin(owner, Coin.owner_id == owner.id)
            .order_by(Coin.coin_id)
        )
        return self.session.execute(stmt).mappings().all()

    # ─── transactions ───────────────────────────────────────────

    def append_transaction(
        self,
        *,
        coin_id: int,
        seller_id: int | None,
        buyer_id: int,
        amount: float,
        transaction_date: datetime,
    ) -> Transaction:
        transaction = Transaction(
            coin_id=coin_id,
            seller_id=seller_id,
            buyer_id=buyer_id,
            amount=amount,
            transaction_date=transaction_date,
        )
        self.session.add(transaction)
        self.session.flush()
        return transaction

    def latest_transaction_date(self, coin_id: int) -> datetime | None:
        return self.session.execute(
            select(func.max(Transaction.transaction_date)).where(Transaction.coin_id == coin_id)
        ).scalar_one_or_none()

    def _enhanced_query(self) -> tuple[Select[Any], Any, Any]:
        seller = aliased(Client)
        buyer = aliased(Client)
        stmt = (
            select(
                Transaction.id,
                Transaction.coin_id,
                Transaction.amount,
                Transaction.transaction_date,
                Transaction.seller_id,
                seller.name.label("seller_name"),
                Transaction.buyer_id,
                buyer.name.label("buyer_name"),
                Coin.bit1,
                Coin.bit2,
                Coin.bit3,
                Coin.value,
            )
            .outerjoin(seller, Transaction.seller_id == seller.id)
            .join(buyer, Transaction.buyer_id == buyer.id)
            .join(Coin, Transaction.coin_id == Coin.coin_id)
        )
        return stmt, seller, buyer

    def transaction_rows(self, criteria: TransactionFilter | None = None) -> Sequence[RowMapping]:
        """Return joined transaction rows, newest first."""
        stmt, seller, buyer = self._enhanced_query()
        criteria = criteria or TransactionFilter()

        if criteria.start_date is not None:
            stmt = stmt.where(Transaction.transaction_date >= criteria.start_date)
        if criteria.finish_date is not None:
            stmt = stmt.where(Transaction.transaction_date <= criteria.finish_date)
        if criteria.min_value is not None:
            stmt = stmt.where(Coin.value >= criteria.min_value)
        if criteria.max_value is not None:
            stmt = stmt.where(Coin.value <= criteria.max_value)
        if criteria.buyer_name:
            stmt = stmt.where(buyer.name.ilike(f"%{criteria.buyer_name}%"))
        if criteria.seller_name:
            stmt = stmt.where(seller.name.ilike(f"%{criteria.seller_name}%"))
        if criteria.seller_id is not None:
            stmt = stmt.where(Transaction.seller_id == criteria.seller_id)
        if criteria.buyer_id is not None:
            stmt = stmt.where(Transaction.buyer_id == criteria.buyer_id)

        stmt = stmt.order_by(Transaction.transaction_date.desc(), Transaction.id.desc())
        return self.session.execute(stmt).mappings().all()

    def previous_owner_names(self, coin_id: int) -> list[str]:
        """Return seller names of a coin's transfers, oldest first."""
        stmt = (
            select(Client.name)
            .join(Transaction, Transaction.seller_id == Client.id)
            .where(Transaction.coin_id == coin_id)
            .order_by(Transaction.transaction_date, Transaction.id)
        )
        return list(self.session.execute(stmt).scalars())

    def distinct_buyer_names(self) -> list[str]:
        stmt = (
            select(Client.name)
            .join(Transaction, Transaction.buyer_id == Client.id)
            .distinct()
            .order_by(Client.name)
        )
        return list(self.session.execute(stmt).scalars())

    def distinct_seller_names(self) -> list[str]:
        stmt = (
            select(Client.name)
            .join(Transaction, Transaction.seller_id == Client.id)
            .distinct()
            .order_by(Client.name)
        )
        return list(self.session.execute(stmt).scalars())

    # ─── aggregates ─────────────────────────────────────────────

    def count_minted_by(self, client_id: int) -> int:
        return self.session.execute(
            select(func.count()).select_from(Coin).where(Coin.minted_by == client_id)
        ).scalar_one()

    def owned_summary(self, client_id: int) -> tuple[int, float]:
        count, total = self.session.execute(
            select(func.count(), func.coalesce(func.sum(Coin.value), 0.0)).where(
                Coin.owner_id == client_id
            )
        ).one()
        return int(count), float(total)

    def count_sent(self, client_id: int) -> int:
        return self.session.execute(
            select(func.count()).select_from(Transaction).where(Transaction.seller_id == client_id)
        ).scalar_one()

    def count_received(self, client_id: int) -> int:
        return self.session.execute(
            select(func.count()).select_from(Transaction).where(Transaction.buyer_id == client_id)
        ).scalar_one()
