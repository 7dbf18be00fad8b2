# tests/conftest.py
"""Shared fixtures: an in-memory SQLite store, the in-memory cache and a fake search index."""

import os

os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_TO_FILE"] = "false"
os.environ["REDIS_ENABLED"] = "false"

from collections.abc import AsyncGenerator, Sequence

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel.ext.asyncio.session import AsyncSession

from blog_api.db import get_session, init_db
from blog_api.errors import SearchIndexError
from blog_api.main import app
from blog_api.managers.cache_manager import CacheManager
from blog_api.managers.task_queue import InlineTaskQueue
from blog_api.schemas import PostSearchDocument, SearchResponse
from blog_api.services import PostService


class FakeSearchIndex:
    """
    In-process stand-in for SearchClient.

    Keeps indexed documents in a dict, ranks related posts by tag overlap and
    matches full-text queries by case-insensitive substring.
    """

    index = "posts-test"

    def __init__(self) -> None:
        self.documents: dict[int, PostSearchDocument] = {}
        self.deleted: list[int] = []
        self.fail = False
        self.available = True

    def _check(self) -> None:
        if self.fail:
            mssg = "Search index unreachable"
            raise SearchIndexError(mssg)

    async def index_post(self, document: PostSearchDocument) -> None:
        self._check()
        self.documents[document.id] = document

    async def delete_post(self, post_id: int) -> None:
        self._check()
        self.documents.pop(post_id, None)
        self.deleted.append(post_id)

    async def multi_match(self, query: str, size: int) -> SearchResponse:
        self._check()
        needle = query.lower()
        hits = [
            doc
            for doc in self.documents.values()
            if needle in doc.title.lower() or needle in doc.content.lower()
        ]
        return SearchResponse(posts=hits[:size], total=len(hits), took=1)

    async def related_by_tags(self, tags: Sequence[str], exclude_id: int, size: int) -> list[int]:
        self._check()
        wanted = set(tags)
        scored = [
            (len(wanted & set(doc.tags)), doc.id)
            for doc in self.documents.values()
            if doc.id != exclude_id and wanted & set(doc.tags)
        ]
        scored.sort(key=lambda item: (-item[0], item[1]))
        return [post_id for _, post_id in scored[:size]]

    async def ping(self) -> bool:
        return self.available


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Single-connection in-memory SQLite engine with all tables created."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(bind=test_engine)
    try:
        yield test_engine
    finally:
        await test_engine.dispose()


@pytest.fixture
def session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    async with session_maker() as db_session:
        yield db_session


@pytest.fixture
async def cache_manager() -> AsyncGenerator[CacheManager]:
    """CacheManager backed by the in-memory client."""
    manager = CacheManager(redis_enabled=False)
    await manager.initialize()
    try:
        yield manager
    finally:
        await manager.shutdown()


@pytest.fixture
def search_index() -> FakeSearchIndex:
    return FakeSearchIndex()


@pytest.fixture
def task_queue() -> InlineTaskQueue:
    return InlineTaskQueue()


@pytest.fixture
def post_service(
    session: AsyncSession,
    cache_manager: CacheManager,
    search_index: FakeSearchIndex,
    task_queue: InlineTaskQueue,
) -> PostService:
    return PostService(session, cache_manager, search_index, task_queue)


@pytest.fixture
async def client(
    session_maker: async_sessionmaker[AsyncSession],
    cache_manager: CacheManager,
    search_index: FakeSearchIndex,
    task_queue: InlineTaskQueue,
) -> AsyncGenerator[AsyncClient]:
    """
    HTTP client against the app without running its lifespan.

    The shared stores are placed on ``app.state`` and every request gets a
    session from the SQLite engine.
    """

    async def override_get_session() -> AsyncGenerator[AsyncSession]:
        async with session_maker() as db_session:
            yield db_session

    app.state.cache_manager = cache_manager
    app.state.search_client = search_index
    app.state.task_queue = task_queue
    app.dependency_overrides[get_session] = override_get_session
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
