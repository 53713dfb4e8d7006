"""Pydantic schemas for request and response bodies."""

from .client import (
    AuthResponse,
    ClientOut,
    LoginRequest,
    MessageResponse,
    ProtectedResponse,
    RefreshResponse,
    SignupRequest,
)
from .coin import (
    CoinOut,
    FindBitsResponse,
    HistoryResponse,
    MarketplaceCoin,
    MintResponse,
    PurchaseResponse,
)
from .transaction import (
    BuyersSellersResponse,
    ClientHistoryResponse,
    ClientStatsOut,
    EnhancedTransaction,
    TransactionFilterRequest,
    TransactionOut,
)

__all__ = [
    "AuthResponse",
    "ClientOut",
    "LoginRequest",
    "MessageResponse",
    "ProtectedResponse",
    "RefreshResponse",
    "SignupRequest",
    "CoinOut",
    "FindBitsResponse",
    "HistoryResponse",
    "MarketplaceCoin",
    "MintResponse",
    "PurchaseResponse",
    "BuyersSellersResponse",
    "ClientHistoryResponse",
    "ClientStatsOut",
    "EnhancedTransaction",
    "TransactionFilterRequest",
    "TransactionOut",
]
