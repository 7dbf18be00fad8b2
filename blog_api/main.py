"""Blog Content API - posts and activity logs over PostgreSQL, Redis and Elasticsearch."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse

from blog_api.configs import settings
from blog_api.errors import (
    CacheExceptionError,
    DatabaseError,
    SearchIndexError,
    ValidationError,
    app_validation_exception_handler,
    cache_exception_handler,
    database_exception_handler,
    search_exception_handler,
    validation_exception_handler,
)
from blog_api.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from blog_api.routes import activity_logs_router, posts_router
from blog_api.schemas import CacheHealthResponse, HealthCheckResponse, SearchHealthResponse
from blog_api.utils.helpers import today_str

app = FastAPI(
    title=settings.APP_NAME,
    description="Blog posts and activity logs with cache-aside reads and search indexing",
    version=settings.APP_VERSION,
    lifespan=lifespan,
    swagger_ui_parameters={
        "docExpansion": "none",
        "operationsSorter": "method",
    },
)

configure_cors(app)

app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)

routes = [posts_router, activity_logs_router]

_ = [app.include_router(router, prefix=settings.API_PREFIX) for router in routes]

errors = [
    (ValidationError, app_validation_exception_handler),
    (DatabaseError, database_exception_handler),
    (SearchIndexError, search_exception_handler),
    (CacheExceptionError, cache_exception_handler),
    (RequestValidationError, validation_exception_handler),
]

_ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]


@app.get(
    "/health",
    tags=["🩺 Health"],
    summary="Health check endpoint",
    response_model=HealthCheckResponse,
    response_class=ORJSONResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "status": "OK",
                        "message": "Blog API is running",
                        "version": "1.0.0",
                        "timestamp": "2025-01-01 10:00:00",
                        "cache": {"backend": "redis", "status": "healthy"},
                        "search": {"status": "healthy", "index": "posts", "pending_jobs": 0},
                    },
                },
            },
        },
    },
    operation_id="health_check",
)
async def health_check(request: Request) -> HealthCheckResponse:
    """
    Report the cache backend with its counters and whether the search index answers.

    Always 200; a degraded dependency shows up in the body only.
    """
    state = request.app.state
    cache_health = CacheHealthResponse(**await state.cache_manager.health_check())
    search_health = SearchHealthResponse(
        status="healthy" if await state.search_client.ping() else "unhealthy",
        index=state.search_client.index,
        pending_jobs=state.task_queue.pending,
    )
    return HealthCheckResponse(
        status="OK",
        message="Blog API is running",
        version=app.version,
        timestamp=today_str(),
        cache=cache_health,
        search=search_health,
    )
