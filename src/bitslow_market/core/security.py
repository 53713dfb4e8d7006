"""Password hashing and wire-level security constants."""
from __future__ import annotations

from nacl import pwhash
from nacl.exceptions import InvalidkeyError

# Header carrying bearer tokens on every authenticated request.
AUTH_HEADER = "Authentificate"


def hash_password(password: str) -> str:
    """Return an argon2id hash string for ``password``."""
    return pwhash.str(password.encode("utf-8")).decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    """Return True if ``password`` matches the stored hash; False otherwise."""
    try:
        return pwhash.verify(password_hash.encode("ascii"), password.encode("utf-8"))
    except InvalidkeyError:
        return False
