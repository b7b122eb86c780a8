"""Engine/session helpers for the SQL backend."""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from intake.core.config import get_settings

Base = declarative_base()


@lru_cache
def get_engine(url: Optional[str] = None):
    """Engine for ``url``, or for DATABASE_URL from the settings when omitted. Cached per URL."""
    url = (url or get_settings().database_url or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL must be configured to use the SQL backend.")
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite" and parsed.database and parsed.database != ":memory:":
        Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, future=True, pool_pre_ping=True)


@lru_cache
def _get_sessionmaker(url: Optional[str] = None):
    return sessionmaker(bind=get_engine(url), autoflush=False, autocommit=False, expire_on_commit=False, future=True)


@contextmanager
def get_session(url: Optional[str] = None) -> Session:
    session: Session = _get_sessionmaker(url)()
    try:
        yield session
    finally:
        session.close()
