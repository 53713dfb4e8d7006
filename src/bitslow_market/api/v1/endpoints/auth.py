# src/bitslow_market/api/v1/endpoints/auth.py
"""Authentication endpoints: signup, login, token refresh and logout."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import SQLAlchemyError

from bitslow_market.api.v1.dependencies import (
    CurrentClientDep,
    SessionAuthorityDep,
    SessionDep,
    token_header,
)
from bitslow_market.core.errors import EmailTaken, Unauthorized
from bitslow_market.core.security import AUTH_HEADER
from bitslow_market.models import Client
from bitslow_market.schemas.client import (
    AuthResponse,
    ClientOut,
    LoginRequest,
    MessageResponse,
    ProtectedResponse,
    RefreshResponse,
    SignupRequest,
)
from bitslow_market.services.client_service import authenticate_client, register_client
from bitslow_market.services.session_authority import SessionAuthority

logger = logging.getLogger(__name__)

router = APIRouter(tags=["authentication"])


def _issue_session(
    client: Client,
    authority: SessionAuthority,
    response: Response,
    message: str,
) -> AuthResponse:
    access_token = authority.issue_access(client.email)
    refresh_token = authority.issue_refresh(client.email)
    response.headers[AUTH_HEADER] = access_token
    return AuthResponse(
        message=message,
        id=client.id,
        name=client.name,
        email=client.email,
        phone=client.phone,
        address=client.address,
        access_token=access_token,
        refresh_token=refresh_token,
    )


@router.post(
    "/signup",
    summary="Register a new client",
    status_code=status.HTTP_201_CREATED,
    response_model=AuthResponse,
)
def signup(
    payload: SignupRequest,
    db: SessionDep,
    authority: SessionAuthorityDep,
    response: Response,
) -> AuthResponse:
    """Create a client and open a session for it."""
    try:
        client = register_client(db, payload)
    except EmailTaken as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Email already exists in db",
        ) from err
    except SQLAlchemyError as err:
        logger.error("Signup failed", exc_info=err)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown error",
        ) from err
    return _issue_session(client, authority, response, "registerSuccess")


@router.post(
    "/login",
    summary="Authenticate with email and password",
    response_model=AuthResponse,
)
def login(
    payload: LoginRequest,
    db: SessionDep,
    authority: SessionAuthorityDep,
    response: Response,
) -> AuthResponse:
    """Open a session; 404 for an unknown email, 401 for a bad password."""
    client = authenticate_client(db, payload.email, payload.password)
    return _issue_session(client, authority, response, "loginSuccess")


@router.get("/protected", response_model=ProtectedResponse)
def protected(current_client: CurrentClientDep) -> ProtectedResponse:
    """Return the profile of the authenticated client."""
    return ProtectedResponse(
        message="Welcome to the protected route!",
        user=ClientOut.model_validate(current_client),
    )


@router.get("/refresh", response_model=RefreshResponse)
def refresh(
    token: Annotated[str | None, Depends(token_header)],
    authority: SessionAuthorityDep,
    response: Response,
) -> RefreshResponse:
    """Exchange the refresh token in the ``Authentificate`` header for an access token."""
    if not token:
        raise Unauthorized("Refresh token missing")
    access_token = authority.refresh(token)
    response.headers[AUTH_HEADER] = access_token
    return RefreshResponse(access_token=access_token)


@router.post("/logout", response_model=MessageResponse)
def logout() -> MessageResponse:
    """Sessions are stateless; the caller discards its tokens."""
    return MessageResponse(message="Logout successful")
