"""SQLAlchemy engine and session helpers."""

from __future__ import annotations

from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    """Parent class for every model defined in ``daytracker/models``."""


def build_engine(db_url: str) -> Engine:
    if not db_url.startswith("sqlite"):
        return create_engine(db_url, pool_pre_ping=True)
    # SQLite connections get shared by FastAPI worker threads.
    connect_args = {"check_same_thread": False}
    if db_url in ("sqlite://", "sqlite:///:memory:"):
        # One connection for the whole process, otherwise each checkout sees
        # its own empty in-memory database.
        return create_engine(db_url, connect_args=connect_args, poolclass=StaticPool)
    return create_engine(db_url, connect_args=connect_args)


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def get_db(request: Request) -> Iterator[Session]:
    """FastAPI dependency that yields a session and guarantees cleanup."""

    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
