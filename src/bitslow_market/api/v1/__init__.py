# src/bitslow_market/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import auth_router, coins_router, transactions_router

__all__ = ["auth_router", "coins_router", "transactions_router"]
