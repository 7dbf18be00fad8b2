"""
HTTP middleware and the application lifespan.

The lifespan opens PostgreSQL, the cache and the search index in that order
and closes them in reverse once pending index jobs have drained.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from logging import getLogger
from time import perf_counter
from uuid import uuid4

from elasticsearch import ConnectionError as SearchConnectionError
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from blog_api.clients.search_client import SearchClient
from blog_api.configs import file_logger, settings
from blog_api.db import close_db, init_db
from blog_api.errors import SearchIndexError
from blog_api.managers.cache_manager import CacheManager
from blog_api.managers.task_queue import BackgroundTaskQueue
from blog_api.monitoring import bind_request_id, clear_context, configure_logging, get_logger
from blog_api.utils.helpers import get_summary, host

logger = file_logger(getLogger(__name__))
access_log = get_logger("blog_api.requests")
file_logger(getLogger("blog_api.requests"))

SHUTDOWN_JOIN_TIMEOUT = 10.0

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
}


async def _open_search_index() -> SearchClient:
    """Connect and create the index; an unreachable cluster only disables search."""
    client = SearchClient()
    try:
        await client.connect()
        await client.ensure_index()
    except (ConnectionError, SearchConnectionError, SearchIndexError) as e:
        logger.warning(f"Search index {client.index!r} unavailable at startup: {e}")
    return client


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    configure_logging()
    logger.info(f"Starting {app.title} {app.version} ({settings.ENVIRONMENT})")

    try:
        await init_db()
        cache_manager = CacheManager()
        await cache_manager.initialize()
        search_client = await _open_search_index()
    except Exception:
        logger.exception("Startup aborted")
        raise

    task_queue = BackgroundTaskQueue()
    app.state.cache_manager = cache_manager
    app.state.search_client = search_client
    app.state.task_queue = task_queue
    logger.info(
        f"Ready on port {settings.PORT}: "
        f"cache={cache_manager.backend} api={settings.API_PREFIX} docs=/docs",
    )

    yield

    logger.info(f"Stopping {app.title}, {task_queue.pending} index job(s) pending")
    try:
        await task_queue.join(timeout=SHUTDOWN_JOIN_TIMEOUT)
        await search_client.close()
        await cache_manager.shutdown()
        await close_db()
    except Exception:
        logger.exception("Shutdown did not complete cleanly")


def configure_cors(app: FastAPI) -> None:
    origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
    if settings.PRODUCTION_FRONTEND_URL:
        origins.append(settings.PRODUCTION_FRONTEND_URL)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    """One access line per request, tagged with ``X-Request-ID``."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        clear_context()
        bind_request_id(request_id)
        started = perf_counter()
        try:
            response = await call_next(request)
            access_log.info(
                get_summary(request) or "Unmatched route",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                ip=host(request),
                duration_ms=round((perf_counter() - started) * 1000, 2),
            )
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_context()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        return response
