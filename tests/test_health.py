# tests/test_health.py
from typing import Any


def test_root_responds(client: Any) -> None:
    """Verify that the root endpoint describes the service."""
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["docs"] == "/docs"


def test_health(client: Any) -> None:
    r = client.get("/health")
    assert r.json() == {"status": "ok"}
