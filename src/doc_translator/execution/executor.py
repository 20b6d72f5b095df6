"""Bounded-concurrency execution of asynchronous tasks."""

import asyncio
import logging
from functools import partial
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Set, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

TaskFactory = Callable[[], Awaitable[T]]

DEFAULT_CONCURRENCY = 20


async def _invoke(factory: TaskFactory) -> Any:
    return await factory()


class _PoolRun:
    """State of one ``BoundedExecutor.run`` call."""

    def __init__(
        self,
        factories: Sequence[TaskFactory],
        concurrency: int,
        background: Set["asyncio.Future[Any]"],
    ):
        self.factories = factories
        self.concurrency = concurrency
        self.background = background
        self.results: List[Any] = [None] * len(factories)
        self.next_index = 0
        self.completed = 0
        self.in_flight: Set["asyncio.Future[Any]"] = set()
        self.outcome: "asyncio.Future[List[Any]]" = asyncio.get_running_loop().create_future()

    def launch(self) -> None:
        while (
            not self.outcome.done()
            and len(self.in_flight) < self.concurrency
            and self.next_index < len(self.factories)
        ):
            index = self.next_index
            self.next_index += 1
            task = asyncio.ensure_future(_invoke(self.factories[index]))
            self.in_flight.add(task)
            self.background.add(task)
            task.add_done_callback(partial(self._on_done, index))

    def _on_done(self, index: int, task: "asyncio.Future[Any]") -> None:
        self.in_flight.discard(task)
        self.background.discard(task)

        # Always retrieve the outcome so late failures are not reported as unhandled
        error: Optional[BaseException]
        if task.cancelled():
            error = asyncio.CancelledError()
        else:
            error = task.exception()

        if self.outcome.done():
            if error is not None:
                logger.debug(f"Discarding late failure of task {index}: {error!r}")
            return

        if error is not None:
            logger.debug(
                f"Task {index} failed; rejecting run with {len(self.in_flight)} task(s) still in flight"
            )
            self.outcome.set_exception(error)
            return

        self.results[index] = task.result()
        self.completed += 1
        if self.completed == len(self.factories):
            self.outcome.set_result(self.results)
        else:
            self.launch()


class BoundedExecutor:
    """
    Runs task factories with at most ``concurrency`` tasks in flight.

    Results are returned in input order regardless of completion order. The
    first failure rejects the whole run immediately: tasks already running
    are left to finish in the background and their outcomes are discarded,
    and no further task is started.
    """

    def __init__(self, concurrency: int = DEFAULT_CONCURRENCY):
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.concurrency = concurrency
        self._background: Set["asyncio.Future[Any]"] = set()

    @property
    def pending(self) -> int:
        """Number of tasks started by this executor that have not finished."""
        return len(self._background)

    async def run(self, factories: Sequence[TaskFactory]) -> List[Any]:
        """
        Execute all factories and collect their results.

        Args:
            factories: Zero-argument callables returning awaitables.

        Returns:
            Results in the same order as ``factories``.

        Raises:
            Exception: The first error raised by any task.
        """
        if not factories:
            return []
        pool = _PoolRun(factories, self.concurrency, self._background)
        pool.launch()
        return await pool.outcome
