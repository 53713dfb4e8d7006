"""Issuing and verifying signed, time-limited session tokens.

Tokens are HS256 JWTs carrying the client email as ``sub`` plus ``iat`` and
``exp``. Verification is a pure function of the token and the current time:
there is no server-side session table, so tokens cannot be revoked before
they expire.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from jose import JWTError, jwt

from bitslow_market.core.errors import TokenExpired, TokenInvalid
from bitslow_market.core.settings import settings
from bitslow_market.db.time import utcnow

logger = logging.getLogger(__name__)


class TokenKind(str, Enum):
    """Caller intent behind a token."""

    ACCESS = "access"
    REFRESH = "refresh"


class SessionAuthority:
    """Signs and checks access and refresh tokens with a shared secret."""

    def __init__(
        self,
        secret_key: str,
        *,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=7),
        enforce_kind: bool = False,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.enforce_kind = enforce_kind
        self._clock = clock

    def issue(
        self,
        subject: str,
        ttl: timedelta,
        kind: TokenKind = TokenKind.ACCESS,
    ) -> str:
        """Return a signed token for ``subject`` expiring ``ttl`` from now."""
        issued_at = self._clock()
        claims: dict[str, Any] = {
            "sub": subject,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + ttl).timestamp()),
            "jti": uuid.uuid4().hex,
            "kind": kind.value,
        }
        token: str = jwt.encode(claims, self._secret_key, algorithm=self._algorithm)
        return token

    def issue_access(self, subject: str) -> str:
        return self.issue(subject, self.access_ttl, TokenKind.ACCESS)

    def issue_refresh(self, subject: str) -> str:
        return self.issue(subject, self.refresh_ttl, TokenKind.REFRESH)

    def verify(self, token: str, kind: TokenKind | None = None) -> str:
        """Return the subject of ``token``.

        Raises:
            TokenExpired: The signature is valid but ``exp`` has passed.
            TokenInvalid: Bad signature, malformed token or missing claims,
                or a token of the wrong kind when kind enforcement is on.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_exp": False, "verify_iat": False},
            )
        except JWTError as err:
            logger.warning("Rejected token: %s", err)
            raise TokenInvalid() from err

        subject = payload.get("sub")
        expires_at = payload.get("exp")
        if not isinstance(subject, str) or not subject or not isinstance(expires_at, int | float):
            raise TokenInvalid()

        if expires_at <= self._clock().timestamp():
            raise TokenExpired()

        if self.enforce_kind and kind is not None and payload.get("kind") != kind.value:
            raise TokenInvalid("Wrong token kind")
        return subject

    def refresh(self, refresh_token: str) -> str:
        """Exchange a refresh token for a new access token for the same subject.

        Nothing is issued when the refresh token fails verification; the
        ``TokenExpired``/``TokenInvalid`` error propagates unchanged.
        """
        subject = self.verify(refresh_token, TokenKind.REFRESH)
        access_token = self.issue_access(subject)
        logger.info("Refreshed access token")
        return access_token


def get_session_authority() -> SessionAuthority:
    """Return a session authority configured from application settings."""
    return SessionAuthority(
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
        access_ttl=timedelta(minutes=settings.access_token_expire_minutes),
        refresh_ttl=timedelta(minutes=settings.refresh_token_expire_minutes),
        enforce_kind=settings.enforce_token_kind,
    )
