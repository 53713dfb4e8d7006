"""Coin-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field

from .transaction import TransactionOut


class CoinOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    coin_id: int
    owner_id: int
    minted_by: int
    bit1: int
    bit2: int
    bit3: int
    value: float


class MarketplaceCoin(BaseModel):
    """A coin as listed on the marketplace, with its rendered identity."""

    model_config = ConfigDict(from_attributes=True)

    coin_id: int
    owner_id: int
    owner: str | None = None
    bit1: int
    bit2: int
    bit3: int
    value: float
    hash: str


class FindBitsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    bit1: int
    bit2: int
    bit3: int
    hash: str
    no_values: bool = Field(False, alias="noValues")


class MintResponse(BaseModel):
    message: str
    coin: CoinOut
    hash: str


class PurchaseResponse(BaseModel):
    message: str
    name: str
    transaction: TransactionOut


class HistoryResponse(BaseModel):
    names: list[str]
