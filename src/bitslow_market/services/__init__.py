"""Service layer for the BitSlow marketplace."""

from .identity import IdentityGenerator, render_identity
from .ledger import ClientStats, Ledger
from .session_authority import SessionAuthority, TokenKind, get_session_authority

__all__ = [
    "IdentityGenerator",
    "render_identity",
    "Ledger",
    "ClientStats",
    "SessionAuthority",
    "TokenKind",
    "get_session_authority",
]
