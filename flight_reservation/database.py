"""Database helpers for the flight reservation store."""
from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Dict, Iterator, Tuple

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base

DEFAULT_DB_URL = os.environ.get("FLIGHT_RESERVATION_DB", "sqlite+pysqlite:///spaazm_flights.db")


def create_session_factory(
    db_url: str = DEFAULT_DB_URL,
    *,
    echo: bool = False,
    connect_args: Dict[str, object] | None = None,
) -> Tuple[Engine, sessionmaker[Session]]:
    """Return an engine/session factory pair configured for SQLite by default."""

    if db_url.startswith("sqlite"):
        final_connect_args = {"check_same_thread": False}
        if connect_args:
            final_connect_args.update(connect_args)
    else:
        final_connect_args = connect_args or {}

    engine_kwargs: Dict[str, object] = {"echo": echo, "future": True, "connect_args": final_connect_args}
    # every connection to ":memory:" is a new empty database unless the pool keeps one
    if db_url.endswith(":memory:"):
        engine_kwargs["poolclass"] = StaticPool
    engine = create_engine(db_url, **engine_kwargs)
    session_factory = sessionmaker(bind=engine, expire_on_commit=False, future=True)
    return engine, session_factory


def ensure_schema(session_factory: sessionmaker[Session]) -> None:
    """Create any missing tables on the engine behind ``session_factory``."""

    with session_factory() as session:
        Base.metadata.create_all(session.get_bind())


@contextmanager
def session_scope(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""

    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
