"""Tests for session issuance, expiry and request authentication."""

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from sqlalchemy import delete, select

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from daytracker.crud.users import create_user
from daytracker.db.session import Base, build_engine, build_session_factory
from daytracker.models.user import User, UserSession
from daytracker.services.authn import Identity, RequestAuthenticator
from daytracker.services.sessions import SessionManager


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture()
def db_session():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    session = build_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def clock():
    return FakeClock(datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc))


@pytest.fixture()
def user(db_session):
    return create_user(db_session, "a@x.com", "hash")


def _session_ids(db_session):
    return db_session.execute(select(UserSession.id)).scalars().all()


def test_create_persists_token_with_absolute_expiry(db_session, clock, user):
    manager = SessionManager(db_session, clock=clock)
    issued = manager.create(user.id)

    assert len(issued.id) == 64
    assert issued.expires_at == clock.now + timedelta(days=7)
    assert _session_ids(db_session) == [issued.id]


def test_resolve_returns_live_session_without_extending_it(db_session, clock, user):
    manager = SessionManager(db_session, clock=clock)
    issued = manager.create(user.id, ttl=timedelta(hours=1))

    clock.advance(minutes=59)
    resolved = manager.resolve(issued.id)

    assert resolved is not None
    assert resolved.user_id == user.id
    assert resolved.expires_at == "2024-01-01T10:00:00Z"


def test_expired_session_is_absent_and_deleted(db_session, clock, user):
    manager = SessionManager(db_session, clock=clock)
    issued = manager.create(user.id, ttl=timedelta(hours=1))

    clock.advance(hours=1)

    assert manager.resolve(issued.id) is None
    assert _session_ids(db_session) == []


def test_unknown_or_empty_token_resolves_to_none(db_session, clock):
    manager = SessionManager(db_session, clock=clock)
    assert manager.resolve("nope") is None
    assert manager.resolve("") is None
    assert manager.resolve(None) is None


def test_revoke_is_idempotent(db_session, clock, user):
    manager = SessionManager(db_session, clock=clock)
    issued = manager.create(user.id)

    manager.revoke(issued.id)
    manager.revoke(issued.id)
    manager.revoke("never-existed")

    assert manager.resolve(issued.id) is None


def test_authenticator_attaches_minimal_identity(db_session, clock, user):
    manager = SessionManager(db_session, clock=clock)
    issued = manager.create(user.id)

    identity = RequestAuthenticator(manager).authenticate(issued.id)

    assert identity == Identity(id=user.id, email="a@x.com")


def test_authenticator_treats_orphaned_session_as_anonymous(db_session, clock, user):
    manager = SessionManager(db_session, clock=clock)
    issued = manager.create(user.id)
    db_session.execute(delete(User).where(User.id == user.id))
    db_session.commit()

    assert RequestAuthenticator(manager).authenticate(issued.id) is None


def test_authenticator_rejects_expired_session(db_session, clock, user):
    manager = SessionManager(db_session, clock=clock)
    issued = manager.create(user.id, ttl=timedelta(seconds=30))
    clock.advance(seconds=31)

    assert RequestAuthenticator(manager).authenticate(issued.id) is None
    assert _session_ids(db_session) == []
