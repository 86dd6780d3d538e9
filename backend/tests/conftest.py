"""Shared pytest fixtures for backend tests."""

from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from app.api.deps import get_gate
from app.config import DEFAULT_BANNED_TERMS
from app.database import get_db
from app.main import app
from app.models import Base, Message, MessageScope, User, utcnow
from app.services.moderation import LexiconModerationGate


@pytest.fixture()
def test_engine() -> Iterator[Engine]:
    """Provide an in-memory SQLite engine for isolated tests."""

    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )

    @event.listens_for(engine, "connect")
    def enable_foreign_keys(dbapi_connection, _connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture()
def session_factory(test_engine) -> sessionmaker[Session]:
    """Return a session factory bound to the test engine."""

    return sessionmaker(bind=test_engine, future=True)


@pytest.fixture()
def db_session(session_factory) -> Iterator[Session]:
    """Yield a SQLAlchemy session for unit tests."""

    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def gate() -> LexiconModerationGate:
    return LexiconModerationGate(DEFAULT_BANNED_TERMS)


@pytest.fixture()
def client(session_factory, gate) -> Iterator[TestClient]:
    """Yield a FastAPI TestClient with the database and moderation dependencies overridden."""

    def override_get_db() -> Iterator[Session]:
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_gate] = lambda: gate
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db_session) -> Callable[..., User]:
    """Factory persisting campus members with sensible defaults."""

    counter = {"value": 0}

    def factory(name: str | None = None, **fields) -> User:
        counter["value"] += 1
        index = counter["value"]
        user = User(
            external_uid=fields.pop("external_uid", f"uid-{index}"),
            email=fields.pop("email", f"user{index}@campus.test"),
            name=name or f"Student {index}",
            skills=[],
            interests=[],
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return factory


@pytest.fixture()
def make_dm(db_session) -> Callable[..., Message]:
    """Persist a direct message, optionally at an explicit time offset from now."""

    base = utcnow()

    def factory(
        sender: User,
        recipient: User,
        content: str = "hello",
        *,
        seconds: float = 0,
        at: datetime | None = None,
    ) -> Message:
        message = Message(
            content=content,
            sender_id=sender.id,
            sender_name=sender.name,
            scope=MessageScope.DM,
            recipient_id=recipient.id,
            created_at=at or base + timedelta(seconds=seconds),
        )
        db_session.add(message)
        db_session.commit()
        return message

    return factory
