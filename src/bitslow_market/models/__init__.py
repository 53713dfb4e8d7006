# src/bitslow_market/models/__init__.py
"""SQLAlchemy models for the BitSlow marketplace."""

from .client import Client
from .coin import Coin
from .transaction import Transaction

__all__ = ["Client", "Coin", "Transaction"]
