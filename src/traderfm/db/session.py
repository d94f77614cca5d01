"""Database session configuration."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from traderfm.core.settings import settings


# Largest value a 64-bit signed INTEGER column can hold.
MAX_INTEGER_ID = 2**63 - 1


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def configure_engine(target: Engine) -> Engine:
    """Apply per-dialect connection settings to ``target``."""
    if target.dialect.name == "sqlite":
        event.listen(target, "connect", _enable_sqlite_foreign_keys)
    return target


def _engine_kwargs(url: str) -> dict[str, Any]:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


# Ensure model modules are imported so that metadata is populated when create_all runs.
import traderfm.models  # noqa: E402,F401

engine = configure_engine(
    create_engine(
        settings.effective_database_url,
        echo=settings.sql_debug,
        **_engine_kwargs(settings.effective_database_url),
    )
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=engine)


def drop_tables() -> None:
    """Drop all database tables."""
    Base.metadata.drop_all(bind=engine)
