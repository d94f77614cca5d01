# src/traderfm/db/__init__.py
"""Database configuration and utilities."""

from .session import (
    MAX_INTEGER_ID,
    Base,
    SessionLocal,
    create_tables,
    drop_tables,
    engine,
    get_db,
)

__all__ = ["MAX_INTEGER_ID", "Base", "SessionLocal", "create_tables", "drop_tables", "engine", "get_db"]
