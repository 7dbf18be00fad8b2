"""
Environment-driven settings for the blog content API.

Values come from the process environment or a ``.env`` file at the project
root. Paging and field-length limits shared by schemas and services live
here as module constants.
"""

from logging import Logger
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pythonjsonlogger.json import JsonFormatter

ENV_FILE = Path(__file__).parent.parent.parent / ".env"

# --- Constants ---
MAX_TITLE_LENGTH = 255
MAX_ACTION_LENGTH = 100
MAX_PAGE_SIZE = 100
DEFAULT_POSTS_PAGE_SIZE = 10
DEFAULT_LOGS_PAGE_SIZE = 20


class Settings(BaseSettings):
    """Process-wide settings; every field can be overridden by an environment variable."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Blog Content API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    PORT: int = 8080
    API_PREFIX: str = "/api/v1"

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = True
    LOG_FILE: str = "logs/blog_api.log"
    PRODUCTION_FRONTEND_URL: str | None = None

    # Database Configuration
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "blog_user"
    DB_PASSWORD: str = "blog_password"
    DB_NAME: str = "blog_db"
    DATABASE_URL: str = ""
    DATABASE_ECHO: bool = False
    POOL_SIZE: int = 10
    MAX_OVERFLOW: int = 20
    POOL_TIMEOUT: int = 30
    POOL_RECYCLE: int = 1800

    # Redis Configuration (optional)
    REDIS_ENABLED: bool = True
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: str | None = None

    # Elasticsearch Configuration
    ES_HOST: str = "localhost"
    ES_PORT: int = 9200
    ES_INDEX: str = "posts"
    ES_REQUEST_TIMEOUT: float = 10.0

    # Read/write policy
    POST_CACHE_TTL: int = 300  # 5 minutes
    RELATED_POSTS_LIMIT: int = 5
    SEARCH_RESULTS_LIMIT: int = 50
    TAG_SEARCH_WARN_THRESHOLD: int = 1000

    @model_validator(mode="after")
    def build_database_url(self) -> "Settings":
        """Assemble DATABASE_URL from the DB_* parts when it is not set explicitly."""
        if not self.DATABASE_URL:
            self.DATABASE_URL = (
                f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASSWORD}"
                f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            )
        return self

    @property
    def ES_URL(self) -> str:  # noqa: N802
        return f"http://{self.ES_HOST}:{self.ES_PORT}"


settings = Settings()


class RedisCacheConfig(BaseSettings):
    """Connection pool options passed straight to ``redis.asyncio.Redis``."""

    model_config = SettingsConfigDict(env_prefix="REDIS_", case_sensitive=False)

    host: str = settings.REDIS_HOST
    port: int = settings.REDIS_PORT
    db: int = settings.REDIS_DB
    password: str | None = settings.REDIS_PASSWORD
    socket_timeout: float = 5.0
    socket_connect_timeout: float = 5.0
    socket_keepalive: bool = True
    health_check_interval: int = 30
    max_connections: int = 50
    decode_responses: bool = True
    encoding: str = "utf-8"


class CacheConfig(BaseSettings):
    """Cache-aside behaviour shared by the Redis and in-memory backends."""

    model_config = SettingsConfigDict(env_prefix="CACHE_", case_sensitive=False)

    default_ttl: int = 3600  # 1 hour
    max_ttl: int = 86400  # 24 hours
    key_prefix: str = ""  # stored keys are "{prefix}:{namespace}:{key}" when set
    compression_enabled: bool = False
    compression_threshold: int = 1024  # bytes
    cleanup_interval: int = 60  # in-memory expiry sweep, seconds


pool_kwargs: dict[str, Any] = RedisCacheConfig().model_dump()


def file_logger(logger: Logger) -> Logger:
    """
    Attach the shared rotating JSON file handler to a logger.

    Does nothing when ``LOG_TO_FILE`` is disabled or the logger already
    carries a file handler.

    Args:
        logger: Logger to decorate.

    Returns:
        The same logger, for chaining at module level.
    """
    if not settings.LOG_TO_FILE:
        return logger
    if any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        return logger

    log_file = Path(settings.LOG_FILE)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=5)
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return logger
