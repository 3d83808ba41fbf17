"""Database session helpers."""

from salesnet.db.session import (
    AsyncSessionLocal,
    engine,
    get_db,
    get_db_context,
    get_remote_sessionmaker,
)

__all__ = [
    "AsyncSessionLocal",
    "engine",
    "get_db",
    "get_db_context",
    "get_remote_sessionmaker",
]
