# src/bitslow_market/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .coins import router as coins_router
from .transactions import router as transactions_router

__all__ = ["auth_router", "coins_router", "transactions_router"]
