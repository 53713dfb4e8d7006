# src/bitslow_market/api/v1/endpoints/transactions.py
"""Read-only ledger endpoints: transaction listings and client summaries."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, HTTPException, status

from bitslow_market.api.v1.dependencies import LedgerDep
from bitslow_market.core.errors import ClientNotFound
from bitslow_market.repositories.ledger_repo import TransactionFilter
from bitslow_market.schemas.client import ClientOut
from bitslow_market.schemas.transaction import (
    BuyersSellersResponse,
    ClientHistoryResponse,
    ClientName,
    ClientStatsOut,
    EnhancedTransaction,
    TransactionFilterRequest,
)
from bitslow_market.services.ledger import Ledger

router = APIRouter(tags=["transactions"])


def _enhanced(ledger: Ledger, criteria: TransactionFilter | None = None) -> list[EnhancedTransaction]:
    return [EnhancedTransaction.model_validate(asdict(entry)) for entry in ledger.entries(criteria)]


@router.get("/transactions", response_model=list[EnhancedTransaction])
def list_transactions(ledger: LedgerDep) -> list[EnhancedTransaction]:
    """Return every transaction, newest first."""
    return _enhanced(ledger)


@router.post("/filtered", response_model=list[EnhancedTransaction])
def filter_transactions(
    payload: TransactionFilterRequest,
    ledger: LedgerDep,
) -> list[EnhancedTransaction]:
    """Return transactions matching the posted criteria, newest first."""
    criteria = TransactionFilter(
        start_date=payload.start_date,
        finish_date=payload.finish_date,
        min_value=payload.min_value,
        max_value=payload.max_value,
        buyer_name=payload.buyer_name,
        seller_name=payload.seller_name,
    )
    return _enhanced(ledger, criteria)


@router.get("/buyerssellers", response_model=BuyersSellersResponse)
def buyers_and_sellers(ledger: LedgerDep) -> BuyersSellersResponse:
    """Return the distinct names that appear as buyers and as sellers."""
    buyers, sellers = ledger.buyers_and_sellers()
    return BuyersSellersResponse(buyers=buyers, sellers=sellers)


@router.get("/client/{client_id}", response_model=ClientHistoryResponse)
def client_summary(client_id: int, ledger: LedgerDep) -> ClientHistoryResponse:
    """Return a client's sales, purchases and holdings."""
    try:
        client = ledger.get_client(client_id)
    except ClientNotFound as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid client id",
        ) from err

    stats = ledger.stats_for_client(client_id)
    return ClientHistoryResponse(
        client=ClientName(name=client.name),
        transactions_made_by=_enhanced(ledger, TransactionFilter(seller_id=client_id)),
        transactions_buyed=_enhanced(ledger, TransactionFilter(buyer_id=client_id)),
        total_bit_slow_currency=stats.coins_owned_now,
        total_monetary_value=stats.total_owned_value,
        stats=ClientStatsOut.model_validate(asdict(stats)),
    )


@router.get("/clients", response_model=list[ClientOut])
def list_clients(ledger: LedgerDep) -> list[ClientOut]:
    """Return all registered clients without credentials."""
    return [ClientOut.model_validate(client) for client in ledger.repo.list_clients()]
