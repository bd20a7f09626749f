"""Bounded fan-out for page tasks."""

import asyncio
import logging
from collections import deque
from typing import Any, Awaitable, Callable, List, Optional, Sequence

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 3

TaskFactory = Callable[[], Awaitable[Any]]


async def run_bounded(tasks: Sequence[TaskFactory], limit: int = DEFAULT_CONCURRENCY) -> List[Any]:
    """Run *tasks* with at most *limit* of them in flight.

    Each task is a zero-argument callable returning an awaitable; it is only
    called once a slot is free, so tasks start in list order.  Every task is
    run even when an earlier one fails.  Once all have settled, the first
    failure (in completion order) is raised; otherwise the results are
    returned in the same order as *tasks*.
    """
    if limit < 1:
        raise ValueError("limit must be at least 1")

    queue: deque = deque(enumerate(tasks))
    results: List[Any] = [None] * len(tasks)
    failures: List[BaseException] = []

    async def worker() -> None:
        while queue:
            index, factory = queue.popleft()
            try:
                results[index] = await factory()
            except Exception as exc:
                logger.debug("Limiter: task %d failed – %s", index, exc)
                failures.append(exc)

    workers = [asyncio.create_task(worker()) for _ in range(min(limit, len(tasks)))]
    await asyncio.gather(*workers)

    first: Optional[BaseException] = failures[0] if failures else None
    if first is not None:
        raise first
    return results
