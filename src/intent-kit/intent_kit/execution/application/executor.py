"""IntentExecutor — runs one operation under a deadline, with optional retries."""

import asyncio
import functools
import time
from collections.abc import Awaitable, Callable
from typing import Any

from intent_kit.core.errors import describe_error
from intent_kit.execution.application.metrics import MetricsStore
from intent_kit.execution.domain.config import ExecutionConfig
from intent_kit.execution.domain.errors import ExecutionFailedError
from intent_kit.execution.domain.observer import ExecutionObserver

type Operation[T] = Callable[[], Awaitable[T]]

_DEFAULT_CONFIG = ExecutionConfig()


class _DeadlineExceeded(TimeoutError):
    """The deadline fired before the operation finished."""


def operation_type_name(operation: Callable[..., Any]) -> str:
    """Derive the metrics key for an operation.

    Bound methods are keyed by their owner's class, callable objects by their
    class, and plain functions by their qualified name.
    """
    if isinstance(operation, functools.partial):
        return operation_type_name(operation.func)
    owner = getattr(operation, "__self__", None)
    if owner is not None:
        return owner.__name__ if isinstance(owner, type) else type(owner).__name__
    qualname = getattr(operation, "__qualname__", None)
    if qualname is not None:
        return str(qualname)
    return type(operation).__name__


class IntentExecutor:
    """Races operations against a deadline and records their outcomes.

    The executor owns no global state: the MetricsStore and observer are
    supplied by the caller so that several executors can share one store.
    """

    def __init__(self, metrics: MetricsStore, observer: ExecutionObserver) -> None:
        self._metrics = metrics
        self._observer = observer
        # Timed-out tasks that are still running; held so they are not
        # garbage-collected mid-flight.
        self._abandoned: set[asyncio.Future[Any]] = set()

    @property
    def metrics(self) -> MetricsStore:
        return self._metrics

    async def execute[T](
        self,
        operation: Operation[T],
        config: ExecutionConfig = _DEFAULT_CONFIG,
        name: str | None = None,
    ) -> T:
        """Run operation once, bounded by config.timeout_seconds.

        Exactly one ExecutionRecord is written per call when
        config.record_metrics is set, whether the call succeeds or not.

        Raises:
            ExecutionFailedError: if the operation raises or the deadline fires
                first. The original error is chained as __cause__.
        """
        type_name = name or operation_type_name(operation)
        self._observer.execution_started(
            name=type_name, timeout_seconds=config.timeout_seconds
        )
        started_at = time.monotonic()

        try:
            result = await self._race_deadline(operation=operation, config=config)
        except Exception as exc:
            duration = time.monotonic() - started_at
            if config.record_metrics:
                self._metrics.record(type_name, duration, success=False)
            if isinstance(exc, _DeadlineExceeded):
                self._observer.execution_timed_out(
                    name=type_name, timeout_seconds=config.timeout_seconds
                )
            reason = describe_error(exc)
            self._observer.execution_failed(
                name=type_name, duration_seconds=duration, reason=reason
            )
            raise ExecutionFailedError(reason) from exc

        duration = time.monotonic() - started_at
        if config.record_metrics:
            self._metrics.record(type_name, duration, success=True)
        self._observer.execution_succeeded(name=type_name, duration_seconds=duration)
        return result

    async def execute_with_retry[T](
        self,
        operation: Operation[T],
        config: ExecutionConfig = _DEFAULT_CONFIG,
        name: str | None = None,
    ) -> T:
        """Call execute() up to config.retry_count times, returning the first success.

        A constant config.retry_delay_seconds is slept between attempts. A
        retry_count of 0 still makes one attempt.

        Raises:
            ExecutionFailedError: the error from the last attempt once all
                attempts have failed.
        """
        type_name = name or operation_type_name(operation)
        max_attempts = max(1, config.retry_count)

        for attempt in range(1, max_attempts + 1):
            try:
                return await self.execute(operation, config=config, name=type_name)
            except ExecutionFailedError as exc:
                if attempt == max_attempts:
                    raise
                self._observer.execution_retry(
                    name=type_name,
                    attempt=attempt,
                    max_attempts=max_attempts,
                    reason=exc.reason,
                    delay_seconds=config.retry_delay_seconds,
                )
            await asyncio.sleep(config.retry_delay_seconds)

        raise AssertionError("unreachable: retry loop always returns or raises")

    async def _race_deadline[T](
        self, operation: Operation[T], config: ExecutionConfig
    ) -> T:
        task = asyncio.ensure_future(operation())
        try:
            done, _ = await asyncio.wait({task}, timeout=config.timeout_seconds)
        except asyncio.CancelledError:
            task.cancel()
            raise

        if task in done:
            return task.result()

        self._abandoned.add(task)
        task.add_done_callback(self._release_abandoned)
        if config.cancel_on_timeout:
            task.cancel()
        raise _DeadlineExceeded(
            f"operation timed out after {config.timeout_seconds}s"
        )

    def _release_abandoned(self, task: asyncio.Future[Any]) -> None:
        self._abandoned.discard(task)
        # Late results are discarded; retrieving the exception keeps asyncio
        # from reporting it as never retrieved.
        if not task.cancelled():
            task.exception()
