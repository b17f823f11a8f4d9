"""Fire-and-forget background work."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

_logger = logging.getLogger(__name__)


class TaskScheduler(Protocol):
    """Runs work after the response without a channel back to the request."""

    def submit(self, description: str, func: Callable[..., object], *args) -> None:
        """Schedule `func(*args)`; failures are only logged."""


@dataclass
class AsyncioTaskScheduler(TaskScheduler):
    """Runs blocking callables in worker threads tracked as asyncio tasks."""

    _tasks: set[asyncio.Task] = field(default_factory=set)

    def submit(self, description: str, func: Callable[..., object], *args) -> None:
        """Start the task on the running loop and return immediately."""
        task = asyncio.get_running_loop().create_task(
            self._run(description, func, *args)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def shutdown(self, timeout: float = 5) -> None:
        """Give in-flight tasks `timeout` seconds, then cancel the rest."""
        tasks = list(self._tasks)
        if not tasks:
            return
        _, still_pending = await asyncio.wait(tasks, timeout=timeout)
        for task in still_pending:
            task.cancel()
        await asyncio.gather(*still_pending, return_exceptions=True)

    async def _run(self, description: str, func: Callable[..., object], *args) -> None:
        try:
            await asyncio.to_thread(func, *args)
        except asyncio.CancelledError:
            _logger.warning("Background task cancelled: %s", description)
            raise
        except Exception:
            _logger.exception("Background task failed: %s", description)
