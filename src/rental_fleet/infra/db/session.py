from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from rental_fleet.infra.config import database_url

# Created on first use so importing the app never needs DATABASE_URL
_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def get_engine() -> Engine:
    """
    Get or create the database engine.

    The catalog is admin-managed and read-mostly, so a small pool suffices:
    5 pooled connections plus 10 overflow, health-checked on checkout and
    recycled every 30 minutes (hosted Postgres poolers drop idle
    connections).
    """
    global _engine
    if _engine is None:
        _engine = create_engine(
            database_url(),
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(
            bind=get_engine(),
            class_=Session,
            expire_on_commit=False,
        )
    return _session_factory


@contextmanager
def get_session() -> Iterator[Session]:
    """
    Session spanning one unit of work: committed on success, rolled back on
    any exception.

    The store adapters wrap each write in a SAVEPOINT, so the multi-step
    car writes stay individually recoverable while the outer transaction
    still makes a failed request leave no trace.
    """
    session = get_session_factory()()

    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
