"""Transaction and ledger read-model Pydantic schemas."""

from __future__ import annotations

import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bitslow_market.db.time import as_utc


class TransactionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    coin_id: int
    seller_id: int | None
    buyer_id: int
    amount: float
    transaction_date: datetime.datetime


class EnhancedTransaction(BaseModel):
    """A transaction joined with party names, coin bits and display hash."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    coin_id: int
    amount: float
    transaction_date: datetime.datetime
    seller_id: int | None = None
    seller_name: str | None = None
    buyer_id: int
    buyer_name: str
    bit1: int
    bit2: int
    bit3: int
    value: float
    computed_bit_slow: str = Field(..., alias="computedBitSlow")


class TransactionFilterRequest(BaseModel):
    """Filter criteria posted by the transactions table."""

    model_config = ConfigDict(populate_by_name=True)

    start_date: datetime.datetime | None = Field(None, alias="startDate")
    finish_date: datetime.datetime | None = Field(None, alias="finishDate")
    min_value: float | None = Field(None, alias="minBitSlowValue")
    max_value: float | None = Field(None, alias="maxBitSlowValue")
    buyer_name: str | None = Field(None, alias="buyerName")
    seller_name: str | None = Field(None, alias="sellerName")

    @field_validator("*", mode="before")
    @classmethod
    def blank_is_absent(cls, v: Any) -> Any:
        """Treat empty form fields as not supplied."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("start_date", "finish_date")
    @classmethod
    def to_utc(cls, v: datetime.datetime | None) -> datetime.datetime | None:
        """Normalise timestamps to UTC; naive values are taken as UTC."""
        return None if v is None else as_utc(v)


class BuyersSellersResponse(BaseModel):
    buyers: list[str]
    sellers: list[str]


class ClientStatsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    coins_minted: int = Field(..., alias="coinsMinted")
    coins_owned_now: int = Field(..., alias="coinsOwnedNow")
    sent_transactions: int = Field(..., alias="sentTransactions")
    received_transactions: int = Field(..., alias="receivedTransactions")
    total_owned_value: float = Field(..., alias="totalOwnedValue")


class ClientName(BaseModel):
    name: str


class ClientHistoryResponse(BaseModel):
    """Per-client transaction history and aggregates."""

    model_config = ConfigDict(populate_by_name=True)

    client: ClientName
    transactions_made_by: list[EnhancedTransaction] = Field(..., alias="transactionsMadeBy")
    transactions_buyed: list[EnhancedTransaction] = Field(..., alias="transactionsBuyed")
    total_bit_slow_currency: int = Field(..., alias="totalBitSlowCurrency")
    total_monetary_value: float = Field(..., alias="totalMonetaryValue")
    stats: ClientStatsOut
