from typing import Any

from pydantic import BaseModel, Field


class CacheStatistics(BaseModel):
    """Cache counters since process start or the last reset."""

    hits: int
    misses: int
    sets: int
    deletes: int
    errors: int
    total_requests: int
    hit_rate: str = Field(examples=["87.50%"])
    since: str


class CacheHealthResponse(BaseModel):
    """Cache backend state, nested in ``HealthCheckResponse``."""

    backend: str = Field(examples=["redis"])
    status: str = Field(examples=["healthy"])
    statistics: CacheStatistics
    # Only reported by Redis
    latency_ms: float | None = None
    redis_version: str | None = None
    used_memory_human: str | None = None
    # Only reported by the in-memory cache
    info: dict[str, Any] | None = None
    error: str | None = None


class SearchHealthResponse(BaseModel):
    """Search index reachability."""

    status: str
    index: str
    pending_jobs: int = Field(default=0, description="Index jobs not yet finished")


class HealthCheckResponse(BaseModel):
    """Health check response model."""

    status: str = Field(description="Overall health status", examples=["OK"])
    message: str = Field(examples=["Blog API is running"])
    version: str = Field(description="API version")
    timestamp: str = Field(description="Current timestamp")
    cache: CacheHealthResponse | None = None
    search: SearchHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Error payload shared by every failing endpoint."""

    detail: str = Field(examples=["Invalid input"])
