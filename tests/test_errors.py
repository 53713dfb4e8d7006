# tests/test_errors.py
"""Tests for the error envelope and log formatting."""

from __future__ import annotations

import json
import logging

from bitslow_market.core.errors import (
    DuplicateIdentity,
    MarketError,
    PurchaseConflict,
    SpaceExhausted,
    TokenExpired,
)
from bitslow_market.core.logging import JSONFormatter, setup_logging


def test_error_envelope() -> None:
    err = DuplicateIdentity((2, 5, 9))
    assert err.http_status == 409
    assert err.to_response() == {
        "error": {
            "code": "DUPLICATE_IDENTITY",
            "message": "Bit combination 2-5-9 is already minted",
        }
    }


def test_statuses() -> None:
    assert TokenExpired().http_status == 401
    assert PurchaseConflict(1).http_status == 409
    assert SpaceExhausted().http_status == 503


def test_code_override() -> None:
    assert MarketError("boom", code="CUSTOM").to_response()["error"]["code"] == "CUSTOM"


def test_json_formatter_includes_context() -> None:
    record = logging.LogRecord("bitslow", logging.INFO, __file__, 1, "moved %s", ("coin",), None)
    record.coin_id = 7
    payload = json.loads(JSONFormatter().format(record))
    assert payload["message"] == "moved coin"
    assert payload["coin_id"] == 7
    assert payload["level"] == "INFO"


def test_setup_logging_installs_one_handler() -> None:
    root = logging.getLogger()
    before = len(root.handlers)
    setup_logging("DEBUG", "json")
    setup_logging("WARNING", "text")
    added = [h for h in root.handlers if getattr(h, "_bitslow_handler", False)]
    assert len(added) == 1
    assert len(root.handlers) <= before + 1
    assert root.level == logging.WARNING
