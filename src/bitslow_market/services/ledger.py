"""The coin custody ledger.

``Ledger`` owns the coin and transaction lifecycles: minting a coin under a
fresh identity, transferring ownership with an append-only history, and the
read models built on top of that history.

Both mutating operations are closed against concurrent callers by the
storage layer rather than by check-then-act code:

* minting relies on the unique ``(bit1, bit2, bit3)`` constraint, so of two
  racing mints of the same triple exactly one insert succeeds;
* a transfer moves the coin with a conditional update keyed on the owner it
  read, in the same database transaction as the history row, so of two
  racing purchases exactly one commits and the other gets
  ``PurchaseConflict``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from bitslow_market.core.errors import (
    AlreadyOwner,
    ClientNotFound,
    CoinNotFound,
    DuplicateIdentity,
    PurchaseConflict,
    UnknownOwner,
    ValidationError,
)
from bitslow_market.db.time import as_utc, utcnow
from bitslow_market.models import Client, Coin, Transaction
from bitslow_market.repositories.ledger_repo import LedgerRepository, TransactionFilter
from bitslow_market.services.identity import BitTriple, IdentityGenerator, render_identity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientStats:
    """Aggregate figures for one client."""

    coins_minted: int
    coins_owned_now: int
    sent_transactions: int
    received_transactions: int
    total_owned_value: float


@dataclass(frozen=True)
class MarketplaceListing:
    coin_id: int
    owner_id: int
    owner: str | None
    bit1: int
    bit2: int
    bit3: int
    value: float
    hash: str


@dataclass(frozen=True)
class LedgerEntry:
    """A transaction joined with its parties and coin, plus the display hash."""

    id: int
    coin_id: int
    amount: float
    transaction_date: datetime
    seller_id: int | None
    seller_name: str | None
    buyer_id: int
    buyer_name: str
    bit1: int
    bit2: int
    bit3: int
    value: float
    computed_bit_slow: str


class Ledger:
    """Service object wrapping all ledger reads and writes on one session."""

    def __init__(
        self,
        session: Session,
        *,
        identity: IdentityGenerator | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.session = session
        self.repo = LedgerRepository(session)
        self.identity = identity or IdentityGenerator()
        self._clock = clock

    # ─── minting ────────────────────────────────────────────────

    def find_unused_triple(self) -> BitTriple:
        """Return a triple not yet bound to any coin, or raise ``SpaceExhausted``."""
        return self.identity.pick_unused_triple(self.repo.used_triples())

    def mint_coin(self, owner_id: int, bits: BitTriple, value: float) -> Coin:
        """Create a coin owned by ``owner_id``. No transaction row is written.

        Raises:
            ValidationError: Malformed triple, or a value that is not positive and finite.
            UnknownOwner: ``owner_id`` is not a registered client.
            DuplicateIdentity: The triple is already minted.
        """
        bits = self.identity.validate(bits)
        if not math.isfinite(value) or value <= 0:
            raise ValidationError("Coin value must be a positive finite amount")
        if self.repo.get_client(owner_id) is None:
            raise UnknownOwner(owner_id)

        try:
            coin = self.repo.insert_coin(owner_id=owner_id, bits=bits, value=value)
        except DuplicateIdentity:
            logger.info("Rejected duplicate mint of %s", bits)
            raise
        self.session.commit()
        self.session.refresh(coin)
        logger.info(
            "Minted coin %d for client %d", coin.coin_id, owner_id,
            extra={"coin_id": coin.coin_id, "client_id": owner_id},
        )
        return coin

    # ─── transfers ──────────────────────────────────────────────

    def _read_current_owner(self, coin_id: int) -> tuple[int, float]:
        coin = self.repo.get_coin(coin_id)
        if coin is None:
            raise CoinNotFound(coin_id)
        return coin.owner_id, coin.value

    def _next_timestamp(self, coin_id: int) -> datetime:
        # History dates never go backwards for a coin even if the wall clock does.
        now = self._clock()
        latest = self.repo.latest_transaction_date(coin_id)
        if latest is not None and as_utc(latest) > as_utc(now):
            return as_utc(latest)
        return now

    def transfer_ownership(self, coin_id: int, buyer_id: int) -> Transaction:
        """Move a coin to ``buyer_id`` and record the sale.

        Raises:
            CoinNotFound: Unknown ``coin_id``.
            ClientNotFound: Unknown ``buyer_id``.
            AlreadyOwner: The buyer already holds the coin.
            PurchaseConflict: Another transfer committed between the read
                and the write; nothing was applied.
        """
        try:
            seller_id, value = self._read_current_owner(coin_id)
            if self.repo.get_client(buyer_id) is None:
                raise ClientNotFound(buyer_id)
            if seller_id == buyer_id:
                raise AlreadyOwner(coin_id)

            if not self.repo.compare_and_set_owner(
                coin_id, expected_owner=seller_id, new_owner=buyer_id
            ):
                raise PurchaseConflict(coin_id)

            transaction = self.repo.append_transaction(
                coin_id=coin_id,
                seller_id=seller_id,
                buyer_id=buyer_id,
                amount=value,
                transaction_date=self._next_timestamp(coin_id),
            )
        except PurchaseConflict:
            self.session.rollback()
            logger.warning(
                "Lost purchase race for coin %d", coin_id,
                extra={"coin_id": coin_id, "client_id": buyer_id},
            )
            raise
        except Exception:
            self.session.rollback()
            raise

        self.session.commit()
        self.session.refresh(transaction)
        logger.info(
            "Coin %d transferred from client %d to client %d", coin_id, seller_id, buyer_id,
            extra={"coin_id": coin_id, "client_id": buyer_id},
        )
        return transaction

    # ─── reads ──────────────────────────────────────────────────

    def history(self, coin_id: int) -> list[str]:
        """Return names of the coin's previous owners, oldest first."""
        return self.repo.previous_owner_names(coin_id)

    def stats_for_client(self, client_id: int) -> ClientStats:
        coins_owned, total_value = self.repo.owned_summary(client_id)
        return ClientStats(
            coins_minted=self.repo.count_minted_by(client_id),
            coins_owned_now=coins_owned,
            sent_transactions=self.repo.count_sent(client_id),
            received_transactions=self.repo.count_received(client_id),
            total_owned_value=total_value,
        )

    def marketplace(self) -> list[MarketplaceListing]:
        return [
            MarketplaceListing(
                coin_id=row["coin_id"],
                owner_id=row["owner_id"],
                owner=row["owner"],
                bit1=row["bit1"],
                bit2=row["bit2"],
                bit3=row["bit3"],
                value=row["value"],
                hash=render_identity(row["bit1"], row["bit2"], row["bit3"]),
            )
            for row in self.repo.marketplace_rows()
        ]

    def entries(self, criteria: TransactionFilter | None = None) -> list[LedgerEntry]:
        """Return enhanced transactions matching ``criteria``, newest first."""
        return [
            LedgerEntry(
                **row,
                computed_bit_slow=render_identity(row["bit1"], row["bit2"], row["bit3"]),
            )
            for row in self.repo.transaction_rows(criteria)
        ]

    def buyers_and_sellers(self) -> tuple[list[str], list[str]]:
        return self.repo.distinct_buyer_names(), self.repo.distinct_seller_names()

    def get_client(self, client_id: int) -> Client:
        client = self.repo.get_client(client_id)
        if client is None:
            raise ClientNotFound(client_id)
        return client
