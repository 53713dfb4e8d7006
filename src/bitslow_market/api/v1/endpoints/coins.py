# src/bitslow_market/api/v1/endpoints/coins.py
"""Coin endpoints: marketplace listing, minting and purchases."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Header, Response, status

from bitslow_market.api.v1.dependencies import CurrentClientDep, LedgerDep
from bitslow_market.core.errors import SpaceExhausted
from bitslow_market.schemas.coin import (
    CoinOut,
    FindBitsResponse,
    HistoryResponse,
    MarketplaceCoin,
    MintResponse,
    PurchaseResponse,
)
from bitslow_market.schemas.transaction import TransactionOut
from bitslow_market.services.identity import render_identity

router = APIRouter(tags=["coins"])

# Sent with the 204 answer of /findbits.
NO_VALUES_HEADER = "No-Values"


@router.get("/marketplace", response_model=list[MarketplaceCoin])
def marketplace(ledger: LedgerDep) -> list[MarketplaceCoin]:
    """List every coin with its current owner and rendered identity."""
    return [MarketplaceCoin.model_validate(listing) for listing in ledger.marketplace()]


@router.get("/coins", response_model=list[CoinOut])
def list_coins(ledger: LedgerDep) -> list[CoinOut]:
    """Return raw coin rows."""
    return [CoinOut.model_validate(coin) for coin in ledger.repo.list_coins()]


@router.get("/history/{coin_id}", response_model=HistoryResponse)
def coin_history(coin_id: int, ledger: LedgerDep) -> HistoryResponse:
    """Return names of a coin's previous owners, oldest first."""
    return HistoryResponse(names=ledger.history(coin_id))


@router.post("/buy/{coin_id}", response_model=PurchaseResponse)
def buy_coin(
    coin_id: int,
    current_client: CurrentClientDep,
    ledger: LedgerDep,
) -> PurchaseResponse:
    """Transfer a coin to the authenticated client.

    404 for an unknown coin, 409 when the caller already owns it or another
    purchase of the same coin won the race.
    """
    transaction = ledger.transfer_ownership(coin_id, current_client.id)
    return PurchaseResponse(
        message="The BitSlow coin was purchased successfully!",
        name=current_client.name,
        transaction=TransactionOut.model_validate(transaction),
    )


@router.get(
    "/findbits",
    response_model=FindBitsResponse,
    responses={status.HTTP_204_NO_CONTENT: {"description": "No unused bit combination left"}},
)
def find_bits(ledger: LedgerDep) -> FindBitsResponse | Response:
    """Propose an unused bit-triple for the next mint."""
    try:
        bit1, bit2, bit3 = ledger.find_unused_triple()
    except SpaceExhausted:
        return Response(
            status_code=status.HTTP_204_NO_CONTENT,
            headers={NO_VALUES_HEADER: "true"},
        )
    return FindBitsResponse(
        bit1=bit1,
        bit2=bit2,
        bit3=bit3,
        hash=render_identity(bit1, bit2, bit3),
        no_values=False,
    )


@router.post("/generate", response_model=MintResponse)
def generate_coin(
    current_client: CurrentClientDep,
    ledger: LedgerDep,
    bit1: Annotated[int, Header(alias="Bit1")],
    bit2: Annotated[int, Header(alias="Bit2")],
    bit3: Annotated[int, Header(alias="Bit3")],
    amount: Annotated[float, Header(alias="Amount")],
) -> MintResponse:
    """Mint a coin for the authenticated client from a triple sent as headers.

    400 for a malformed triple or amount, 409 when the triple is taken.
    """
    coin = ledger.mint_coin(current_client.id, (bit1, bit2, bit3), amount)
    return MintResponse(
        message="The BitSlow coin was generated successfully!",
        coin=CoinOut.model_validate(coin),
        hash=render_identity(*coin.bits),
    )
