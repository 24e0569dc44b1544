"""
Shared pytest fixtures for the provider backend tests.

This module provides fixtures for:
- An isolated in-memory SQLite database per test
- A FastAPI TestClient wired to that database
- Provider factories and delete tokens
"""

import os

os.environ.setdefault("CSRF_SECRET", "test-secret")
os.environ.setdefault("DEBUG", "false")

from datetime import datetime
from typing import Callable

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import get_settings
from app.database import Base, get_db
from app.main import app
from app.models import Provider
from app.schemas.provider import ProviderCreate
from app.services import provider_service


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Re-read settings from the environment for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def db() -> Session:
    """Session bound to a brand-new in-memory database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False, autocommit=False)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db: Session) -> TestClient:
    """TestClient whose requests share the ``db`` session."""

    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def strict_csrf(monkeypatch):
    monkeypatch.setenv("CSRF_STRICT", "true")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def break_commit(db: Session, monkeypatch) -> Callable[[], None]:
    """Make every later commit on ``db`` fail with an OperationalError."""

    def _commit() -> None:
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    def _break() -> None:
        monkeypatch.setattr(db, "commit", _commit)

    return _break


@pytest.fixture
def frozen_clock(monkeypatch) -> Callable[[datetime], None]:
    """Pin ``provider_service._now`` to the given datetime."""

    def _freeze(moment: datetime) -> None:
        monkeypatch.setattr(provider_service, "_now", lambda: moment)

    return _freeze


@pytest.fixture
def make_provider(db: Session) -> Callable[..., Provider]:
    """Create a provider through the service with sensible defaults."""

    def _make(
        name: str = "Acme",
        email: str = "a@acme.com",
        phone: str = "6123456789",
        type: str | None = "hotel",
    ) -> Provider:
        payload = ProviderCreate(name=name, email=email, phone=phone, type=type)
        return provider_service.create_provider(db, payload)

    return _make
