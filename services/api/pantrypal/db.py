"""Database engine and session plumbing.

The engine is created lazily so tests (and the batch scripts) can point the
app at a different database before the first query.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker, DeclarativeBase

from .settings import settings


class Base(DeclarativeBase):
    pass


_engine = None
_session_factory = None


def init_engine(database_url: str | None = None):
    global _engine, _session_factory
    url = database_url or settings.database_url
    _engine = create_engine(url, pool_pre_ping=True)
    _session_factory = sessionmaker(autocommit=False, autoflush=False, bind=_engine)
    return _engine


def get_sessionmaker() -> sessionmaker:
    if _session_factory is None:
        init_engine()
    return _session_factory


def get_db() -> Iterator[Session]:
    db = get_sessionmaker()()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Iterator[Session]:
    """Session for scripts: commit on success, rollback on error."""
    db = get_sessionmaker()()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
