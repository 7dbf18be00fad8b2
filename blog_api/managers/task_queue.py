"""
Background job submission for non-authoritative side effects.

Search index projections are pushed through a task queue so that request
handlers return as soon as the relational write has committed.
"""

from asyncio import Task, create_task, gather, wait_for
from collections.abc import Awaitable, Callable
from logging import getLogger
from typing import Protocol, TypeAlias, runtime_checkable

from blog_api.configs import file_logger

logger = file_logger(getLogger(__name__))

Job: TypeAlias = Callable[..., Awaitable[object]]


@runtime_checkable
class TaskQueueProtocol(Protocol):
    """Accepts fire-and-forget jobs; failures are logged, never raised."""

    async def submit(self, name: str, job: Job, *args: object) -> None: ...


async def _run(name: str, job: Job, *args: object) -> None:
    try:
        await job(*args)
    except Exception:
        logger.exception(f"Background job '{name}' failed")
    else:
        logger.debug(f"Background job '{name}' finished")


class BackgroundTaskQueue:
    """
    Runs each job as its own asyncio task on the running loop.

    Tasks are referenced until they finish so the loop cannot drop them.
    ``join`` waits for everything still pending, used on shutdown.
    """

    def __init__(self) -> None:
        self._tasks: set[Task[None]] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def submit(self, name: str, job: Job, *args: object) -> None:
        task = create_task(_run(name, job, *args), name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def join(self, timeout: float | None = None) -> None:
        """
        Wait for pending jobs.

        Args:
            timeout: Seconds to wait before giving up; ``None`` waits forever.
        """
        if not self._tasks:
            return
        logger.info(f"Waiting for {len(self._tasks)} background job(s)")
        try:
            await wait_for(gather(*self._tasks), timeout=timeout)
        except TimeoutError:
            logger.warning(f"{len(self._tasks)} background job(s) still running after {timeout}s")


class InlineTaskQueue:
    """Runs jobs immediately inside ``submit``; for tests and scripts."""

    pending = 0

    async def submit(self, name: str, job: Job, *args: object) -> None:
        await _run(name, job, *args)

    async def join(self, timeout: float | None = None) -> None:
        return None
