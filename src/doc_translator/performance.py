"""Timing of translation pipeline stages.

Stages are tracked with ``PerformanceMonitor.start_operation`` /
``end_operation`` pairs; per-stage statistics are attached to the pipeline
result. ``timed_operation`` logs the duration of a single function or
coroutine.
"""

import functools
import inspect
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_SLOW_STAGE_SECONDS = 300.0


@dataclass
class PerformanceMetrics:
    """Timing record of one stage run."""

    operation_name: str
    start_time: float = field(default_factory=time.monotonic)
    end_time: Optional[float] = None
    duration: Optional[float] = None
    success: bool = True
    error: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def finish(self, success: bool = True, error: Optional[str] = None) -> None:
        self.end_time = time.monotonic()
        self.duration = self.end_time - self.start_time
        self.success = success
        self.error = error


class PerformanceMonitor:
    """
    Collects stage timings for one pipeline instance.

    Stages that run longer than ``slow_stage_seconds`` are logged as
    warnings.
    """

    def __init__(self, slow_stage_seconds: float = DEFAULT_SLOW_STAGE_SECONDS):
        """
        Initialize the monitor.

        Args:
            slow_stage_seconds: Duration above which a finished stage is
                reported as slow.
        """
        self.slow_stage_seconds = slow_stage_seconds
        self.metrics: Dict[str, List[PerformanceMetrics]] = {}
        self._open: List[PerformanceMetrics] = []

    def start_operation(self, operation_name: str, **metadata) -> PerformanceMetrics:
        """
        Start timing a stage.

        Args:
            operation_name: Stage name, used as the statistics key.
            **metadata: Extra values stored with the record.

        Returns:
            The open record, to be passed to ``end_operation``.
        """
        metric = PerformanceMetrics(operation_name=operation_name, metadata=metadata)
        self._open.append(metric)
        return metric

    def end_operation(
        self,
        metric: Optional[PerformanceMetrics] = None,
        success: bool = True,
        error: Optional[str] = None
    ) -> None:
        """
        Stop timing a stage.

        Args:
            metric: Record returned by ``start_operation``; the most recently
                started open record if None.
            success: Whether the stage succeeded.
            error: Error message for failed stages.
        """
        if metric is None:
            if not self._open:
                return
            metric = self._open.pop()
        elif metric in self._open:
            self._open.remove(metric)
        else:
            # Already finished
            return

        metric.finish(success=success, error=error)
        self.metrics.setdefault(metric.operation_name, []).append(metric)

        if metric.duration is not None and metric.duration > self.slow_stage_seconds:
            logger.warning(
                f"Stage '{metric.operation_name}' took {metric.duration:.2f}s "
                f"(> {self.slow_stage_seconds}s)"
            )

    @contextmanager
    def track(self, operation_name: str, **metadata) -> Iterator[PerformanceMetrics]:
        """Time the enclosed block; the record is marked failed if it raises."""
        metric = self.start_operation(operation_name, **metadata)
        try:
            yield metric
        except BaseException as e:
            self.end_operation(metric, success=False, error=f"{type(e).__name__}: {e}")
            raise
        self.end_operation(metric)

    def get_operation_stats(self, operation_name: str) -> Dict[str, Any]:
        """
        Statistics for one stage.

        Returns:
            ``count``, ``average``, ``min``, ``max``, ``total`` and
            ``success_rate``; empty if the stage never finished.
        """
        records = self.metrics.get(operation_name, [])
        durations = [m.duration for m in records if m.duration is not None]
        if not durations:
            return {}

        return {
            "count": len(durations),
            "average": sum(durations) / len(durations),
            "min": min(durations),
            "max": max(durations),
            "total": sum(durations),
            "success_rate": sum(1 for m in records if m.success) / len(records),
        }

    def get_all_stats(self) -> Dict[str, Dict[str, Any]]:
        return {name: self.get_operation_stats(name) for name in self.metrics}

    def reset(self) -> None:
        self.metrics.clear()
        self._open.clear()


def timed_operation(operation_name: str):
    """
    Decorator logging how long a function or coroutine function takes.

    Args:
        operation_name: Name used in the log messages.

    Example:
        @timed_operation("summarize")
        async def summarize(text):
            ...
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                start = time.monotonic()
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    logger.error(f"{operation_name} failed after {time.monotonic() - start:.2f}s: {e}")
                    raise
                logger.debug(f"{operation_name} completed in {time.monotonic() - start:.2f}s")
                return result
            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            start = time.monotonic()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(f"{operation_name} failed after {time.monotonic() - start:.2f}s: {e}")
                raise
            logger.debug(f"{operation_name} completed in {time.monotonic() - start:.2f}s")
            return result
        return wrapper
    return decorator
