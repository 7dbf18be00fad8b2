from collections.abc import Awaitable, Callable
from logging import getLogger
from typing import ParamSpec, TypeVar

from elasticsearch import ConnectionError as SearchConnectionError
from elasticsearch import ConnectionTimeout
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from blog_api.configs import file_logger

logger = file_logger(getLogger(__name__))

P = ParamSpec("P")
T = TypeVar("T")

RETRIABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    RedisConnectionError,
    RedisTimeoutError,
    SearchConnectionError,
    ConnectionTimeout,
    ConnectionError,
    TimeoutError,
)


def _warn_before_retry(attempts: int) -> Callable[[RetryCallState], None]:
    def warn(state: RetryCallState) -> None:
        error = state.outcome.exception() if state.outcome else None
        delay = state.next_action.sleep if state.next_action else 0.0
        name = getattr(state.fn, "__qualname__", "call")
        logger.warning(
            "%s failed (attempt %d/%d), retrying in %.2fs: %s",
            name,
            state.attempt_number,
            attempts,
            delay,
            error,
        )

    return warn


def with_retry(
    max_retries: int = 3,
    base_delay: float = 0.1,
    max_delay: float = 2.0,
    exec_retry: tuple[type[Exception], ...] = RETRIABLE_EXCEPTIONS,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """
    Retry an async call with exponential backoff (tenacity).

    Meant for connecting to Redis and Elasticsearch at startup; request
    handling never retries. The last error is re-raised unchanged.

    Args:
        max_retries: Total attempts, the first one included.
        base_delay: First backoff in seconds.
        max_delay: Backoff ceiling in seconds.
        exec_retry: Exception types that trigger another attempt.
    """
    return retry(
        stop=stop_after_attempt(max_retries),
        wait=wait_exponential(multiplier=base_delay, min=base_delay, max=max_delay),
        retry=retry_if_exception_type(exec_retry),
        before_sleep=_warn_before_retry(max_retries),
        reraise=True,
    )
