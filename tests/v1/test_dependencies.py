# tests/v1/test_dependencies.py
"""Tests for the auth gate dependencies."""

from __future__ import annotations

import pytest

from bitslow_market.api.v1.dependencies import get_current_client, get_current_subject
from bitslow_market.core.errors import ClientNotFound, TokenInvalid, Unauthorized
from bitslow_market.services.session_authority import get_session_authority


def test_missing_token_is_unauthorized() -> None:
    with pytest.raises(Unauthorized):
        get_current_subject(None, get_session_authority())


def test_empty_token_is_unauthorized() -> None:
    with pytest.raises(Unauthorized):
        get_current_subject("", get_session_authority())


def test_bad_token_is_invalid() -> None:
    with pytest.raises(TokenInvalid):
        get_current_subject("abc.def.ghi", get_session_authority())


def test_valid_token_resolves_client(db_session, alice, headers_for) -> None:
    token = next(iter(headers_for(alice).values()))
    subject = get_current_subject(token, get_session_authority())
    assert get_current_client(subject, db_session).id == alice.id


def test_unknown_subject(db_session) -> None:
    with pytest.raises(ClientNotFound):
        get_current_client("ghost@example.com", db_session)
