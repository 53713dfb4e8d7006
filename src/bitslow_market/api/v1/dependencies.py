"""Shared API dependencies: database session, ledger and the auth gate.

The auth gate runs before any mutating endpoint body. A request without a
token, or whose token fails verification, is rejected with 401 before the
ledger is touched; otherwise the token subject (a client email) is resolved
to a ``Client`` and handed to the endpoint.
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from bitslow_market.core.errors import ClientNotFound, Unauthorized
from bitslow_market.core.security import AUTH_HEADER
from bitslow_market.db.session import get_db
from bitslow_market.models import Client
from bitslow_market.services.identity import IdentityGenerator
from bitslow_market.services.ledger import Ledger
from bitslow_market.services.session_authority import (
    SessionAuthority,
    TokenKind,
    get_session_authority,
)

# Bearer token travels in a custom header instead of ``Authorization``.
token_header = APIKeyHeader(name=AUTH_HEADER, auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_session_authority_dep() -> SessionAuthority:
    """Return the token authority configured from settings."""
    return get_session_authority()


def get_identity_generator() -> IdentityGenerator:
    """Return an identity generator over the configured bit range."""
    return IdentityGenerator()


SessionAuthorityDep = Annotated[SessionAuthority, Depends(get_session_authority_dep)]
IdentityGeneratorDep = Annotated[IdentityGenerator, Depends(get_identity_generator)]


def get_ledger(db: SessionDep, identity: IdentityGeneratorDep) -> Ledger:
    """Return a ledger bound to the request's session."""
    return Ledger(db, identity=identity)


LedgerDep = Annotated[Ledger, Depends(get_ledger)]


def get_current_subject(
    token: Annotated[str | None, Depends(token_header)],
    authority: SessionAuthorityDep,
) -> str:
    """Return the verified token subject.

    Raises:
        Unauthorized: No token was presented.
        TokenExpired: The token has expired.
        TokenInvalid: The token failed verification.
    """
    if not token:
        raise Unauthorized()
    return authority.verify(token, TokenKind.ACCESS)


CurrentSubjectDep = Annotated[str, Depends(get_current_subject)]


def get_current_client(subject: CurrentSubjectDep, db: SessionDep) -> Client:
    """Resolve the authenticated subject to its client row.

    Raises:
        ClientNotFound: The token is valid but names no registered client.
    """
    client = db.query(Client).filter(Client.email == subject).first()
    if client is None:
        raise ClientNotFound(subject)
    return client


# Type alias for current client dependency
CurrentClientDep = Annotated[Client, Depends(get_current_client)]
