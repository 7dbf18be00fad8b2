"""Core database modules."""

from blog_api.db.database import (
    async_session_maker,
    atomic,
    close_db,
    engine,
    get_session,
    init_db,
)

__all__ = [
    "async_session_maker",
    "atomic",
    "close_db",
    "engine",
    "get_session",
    "init_db",
]
