# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from bitslow_market.core.security import AUTH_HEADER, hash_password
from bitslow_market.db.session import Base, create_tables, enable_sqlite_foreign_keys
from bitslow_market.db.session import get_db as app_get_session
from bitslow_market.main import app as fastapi_app
from bitslow_market.models import Client
from bitslow_market.services.identity import IdentityGenerator
from bitslow_market.services.ledger import Ledger
from bitslow_market.services.session_authority import get_session_authority

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "correct horse battery staple"


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    """A fresh in-memory database per test."""
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    create_tables(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def ledger(db_session: Session) -> Ledger:
    return Ledger(db_session, identity=IdentityGenerator())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(
    app: FastAPI,
    session_factory: sessionmaker[Session],
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_client(db_session: Session) -> Callable[..., Client]:
    """Return a factory persisting clients with a known password."""

    def _make(name: str, email: str | None = None, password: str = TEST_PASSWORD) -> Client:
        row = Client(
            name=name,
            email=email or f"{name.lower().replace(' ', '.')}@example.com",
            password=hash_password(password),
            phone="555-0100",
            address="1 Ledger Lane",
        )
        db_session.add(row)
        db_session.commit()
        db_session.refresh(row)
        return row

    return _make


@pytest.fixture()
def alice(make_client: Callable[..., Client]) -> Client:
    return make_client("Alice")


@pytest.fixture()
def bob(make_client: Callable[..., Client]) -> Client:
    return make_client("Bob")


def auth_headers(client_row: Client) -> dict[str, str]:
    """Return the token header for ``client_row``."""
    return {AUTH_HEADER: get_session_authority().issue_access(client_row.email)}


@pytest.fixture()
def alice_headers(alice: Client) -> dict[str, str]:
    return auth_headers(alice)


@pytest.fixture()
def bob_headers(bob: Client) -> dict[str, str]:
    return auth_headers(bob)


@pytest.fixture()
def headers_for() -> Callable[[Client], dict[str, str]]:
    return auth_headers
