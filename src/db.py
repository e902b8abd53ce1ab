"""Database engine/session helpers for the ladder store."""

from __future__ import annotations

from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from models import Base

DEFAULT_DB_URL = f"sqlite:///{Path.cwd() / 'ladder.db'}"


def create_db_engine(db_url: str = DEFAULT_DB_URL) -> Engine:
    """Create an engine; a file-backed SQLite URL gets its directory created first."""
    url = make_url(db_url)
    if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
        return create_engine(url)
    return create_engine(url, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def ensure_schema(engine: Engine) -> None:
    """Create the ladder tables that do not exist yet."""
    Base.metadata.create_all(bind=engine, checkfirst=True)
