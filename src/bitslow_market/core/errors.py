"""Error hierarchy for the marketplace.

Every error carries a stable ``code`` and the HTTP status it maps to. The API
layer renders them through ``to_response()``; services raise them and never
build HTTP responses themselves.
"""

from __future__ import annotations

from typing import Any


class MarketError(Exception):
    """Base exception for all marketplace failures."""

    code = "MARKET_ERROR"
    http_status = 500

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_response(self) -> dict[str, Any]:
        """Convert to the REST error envelope."""
        return {"error": {"code": self.code, "message": self.message}}


# ─── Validation (400) ───────────────────────────────────────────


class ValidationError(MarketError):
    """Malformed or missing fields, out-of-range triple components."""

    code = "VALIDATION_ERROR"
    http_status = 400


# ─── Authentication (401) ───────────────────────────────────────


class AuthError(MarketError):
    """Base class for authentication failures."""

    code = "UNAUTHORIZED"
    http_status = 401


class Unauthorized(AuthError):
    """No credentials were presented."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class TokenExpired(AuthError):
    """Token signature is valid but its expiry is in the past."""

    code = "TOKEN_EXPIRED"

    def __init__(self, message: str = "Token has expired") -> None:
        super().__init__(message)


class TokenInvalid(AuthError):
    """Bad signature, malformed token or missing claims."""

    code = "TOKEN_INVALID"

    def __init__(self, message: str = "Could not validate credentials") -> None:
        super().__init__(message)


class InvalidCredentials(AuthError):
    """Password did not match."""

    code = "INVALID_CREDENTIALS"

    def __init__(self, message: str = "Invalid password") -> None:
        super().__init__(message)


# ─── Not found (404) ────────────────────────────────────────────


class NotFoundError(MarketError):
    code = "NOT_FOUND"
    http_status = 404


class ClientNotFound(NotFoundError):
    code = "CLIENT_NOT_FOUND"

    def __init__(self, client_ref: object) -> None:
        super().__init__(f"Client {client_ref} not found")
        self.client_ref = client_ref


# Minting for an owner that does not exist.
UnknownOwner = ClientNotFound


class CoinNotFound(NotFoundError):
    code = "COIN_NOT_FOUND"

    def __init__(self, coin_id: int) -> None:
        super().__init__(f"Coin {coin_id} not found")
        self.coin_id = coin_id


# ─── Conflicts (409) ────────────────────────────────────────────


class ConflictError(MarketError):
    code = "CONFLICT"
    http_status = 409


class DuplicateIdentity(ConflictError):
    """The bit-triple is already bound to a coin."""

    code = "DUPLICATE_IDENTITY"

    def __init__(self, bits: tuple[int, int, int]) -> None:
        super().__init__(f"Bit combination {bits[0]}-{bits[1]}-{bits[2]} is already minted")
        self.bits = bits


class AlreadyOwner(ConflictError):
    """The buyer already holds the coin."""

    code = "ALREADY_OWNER"

    def __init__(self, coin_id: int) -> None:
        super().__init__(f"Coin {coin_id} is already owned by the buyer")
        self.coin_id = coin_id


class PurchaseConflict(ConflictError):
    """Another transfer of the same coin committed first."""

    code = "PURCHASE_CONFLICT"

    def __init__(self, coin_id: int) -> None:
        super().__init__(f"Coin {coin_id} changed hands while the purchase was in progress")
        self.coin_id = coin_id


class EmailTaken(ConflictError):
    code = "EMAIL_TAKEN"

    def __init__(self) -> None:
        super().__init__("Email already exists in db")


# ─── Capacity / internal ────────────────────────────────────────


class CapacityError(MarketError):
    code = "CAPACITY_EXHAUSTED"
    http_status = 503


class SpaceExhausted(CapacityError):
    """No unused bit-triple remains in the identity space."""

    code = "SPACE_EXHAUSTED"

    def __init__(self) -> None:
        super().__init__("No more unique bit combinations available.")


class InternalError(MarketError):
    code = "INTERNAL_ERROR"
    http_status = 500
