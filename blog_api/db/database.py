"""Async engine, request sessions and the transaction boundary."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from logging import getLogger
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from blog_api.configs import file_logger, settings
from blog_api.errors.database import (
    DatabaseError,
    DatabaseInitializationError,
    RecordNotFoundError,
    TransactionError,
)

logger = file_logger(getLogger(__name__))

STATEMENT_TIMEOUT_MS = 30_000


def _engine_options(url: str) -> dict[str, Any]:
    """Pool sizing and server-side timeouts; only PostgreSQL takes them."""
    if make_url(url).get_backend_name() != "postgresql":
        return {}
    timeout = str(STATEMENT_TIMEOUT_MS)
    return {
        "pool_size": settings.POOL_SIZE,
        "max_overflow": settings.MAX_OVERFLOW,
        "pool_timeout": settings.POOL_TIMEOUT,
        "pool_recycle": settings.POOL_RECYCLE,
        "pool_pre_ping": True,
        "connect_args": {
            "command_timeout": STATEMENT_TIMEOUT_MS / 1000,
            "server_settings": {"statement_timeout": timeout, "lock_timeout": timeout},
        },
    }


engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    **_engine_options(settings.DATABASE_URL),
)

async_session_maker: async_sessionmaker[SQLModelAsyncSession] = async_sessionmaker(
    engine,
    class_=SQLModelAsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_session() -> AsyncGenerator[AsyncSession]:
    """
    Request-scoped session dependency.

    Nothing is committed here; services open their own ``atomic`` blocks and
    whatever is left uncommitted is rolled back when the session closes.
    """
    async with async_session_maker() as session:
        yield session


@asynccontextmanager
async def atomic(session: AsyncSession, action: str) -> AsyncGenerator[AsyncSession]:
    """
    Commit the enclosed statements together or not at all.

    Not-found errors are re-raised as they are; storage failures become
    ``TransactionError("Failed to <action>")``. Either way the session is
    rolled back first.

    Example:
        ```python
        async with atomic(session, "create post"):
            post = await posts.create(data)
            await logs.create(ActivityLogCreate(action="new_post", post_id=post.id))
        ```
    """
    try:
        yield session
        await session.commit()
    except RecordNotFoundError:
        await session.rollback()
        raise
    except (SQLAlchemyError, DatabaseError) as e:
        await session.rollback()
        logger.exception(f"Rolled back: {action}")
        raise TransactionError(detail=f"Failed to {action}") from e
    except Exception:
        await session.rollback()
        raise


async def init_db(bind: AsyncEngine | None = None) -> None:
    """
    Create the ``posts`` and ``activity_logs`` tables if they are missing.

    Args:
        bind: Engine to use instead of the application engine.

    Raises:
        DatabaseInitializationError: The database is unreachable or rejected the DDL.
    """
    # Registers the tables on SQLModel.metadata
    from blog_api.models import ActivityLogDB, PostDB  # noqa: F401, PLC0415

    try:
        async with (bind or engine).begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
    except (SQLAlchemyError, OSError) as e:
        raise DatabaseInitializationError from e
    logger.info("Database tables ready")


async def close_db() -> None:
    await engine.dispose()
    logger.info("Database connections closed")
