"""Registration and credential checks for marketplace clients."""
from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bitslow_market.core import security
from bitslow_market.core.errors import ClientNotFound, EmailTaken, InvalidCredentials
from bitslow_market.models import Client
from bitslow_market.repositories.ledger_repo import LedgerRepository
from bitslow_market.schemas.client import SignupRequest

__all__ = ["register_client", "authenticate_client", "get_client_by_email"]


def get_client_by_email(db: Session, email: str) -> Client | None:
    """Return a single client by email address."""
    return LedgerRepository(db).get_client_by_email(email)


def register_client(db: Session, payload: SignupRequest) -> Client:
    """Persist a new client with a hashed password.

    Raises:
        EmailTaken: The email address is already registered.
    """
    if get_client_by_email(db, payload.email) is not None:
        raise EmailTaken()

    client = Client(
        name=payload.name,
        email=payload.email,
        password=security.hash_password(payload.password),
        phone=payload.phone,
        address=payload.address,
    )
    db.add(client)
    try:
        db.commit()
    except IntegrityError as err:
        # Lost a signup race on the unique email column.
        db.rollback()
        raise EmailTaken() from err
    db.refresh(client)
    return client


def authenticate_client(db: Session, email: str, password: str) -> Client:
    """Return the client owning ``email`` if ``password`` matches.

    Raises:
        ClientNotFound: No client has this email.
        InvalidCredentials: The password does not match.
    """
    client = get_client_by_email(db, email)
    if client is None:
        raise ClientNotFound(email)
    if not security.verify_password(password, client.password):
        raise InvalidCredentials()
    return client
