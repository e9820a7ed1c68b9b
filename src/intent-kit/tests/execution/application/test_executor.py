"""Tests for IntentExecutor deadline, metrics, and retry behaviour."""

import asyncio
import functools
import time

import pytest

from intent_kit.execution.application.executor import (
    IntentExecutor,
    operation_type_name,
)
from intent_kit.execution.application.metrics import MetricsStore
from intent_kit.execution.domain.config import ExecutionConfig
from intent_kit.execution.domain.errors import ExecutionFailedError
from tests.execution.fake_observer import FakeExecutionObserver
from tests.execution.fake_operation import FakeOperation


def _make_executor() -> tuple[IntentExecutor, MetricsStore, FakeExecutionObserver]:
    metrics = MetricsStore()
    observer = FakeExecutionObserver()
    return IntentExecutor(metrics=metrics, observer=observer), metrics, observer


def _config(**overrides: object) -> ExecutionConfig:
    values: dict[str, object] = {
        "timeout_seconds": 1.0,
        "retry_count": 3,
        "retry_delay_seconds": 0.0,
    }
    values.update(overrides)
    return ExecutionConfig.model_validate(values)


class SendMessageIntent:
    def __init__(self, fail: bool = False) -> None:
        self._fail = fail

    async def perform(self) -> str:
        if self._fail:
            raise ValueError("recipient unknown")
        return "sent"


class TestExecuteSuccess:
    """An operation finishing before the deadline returns its result."""

    async def test_returns_operation_result(self) -> None:
        executor, _, _ = _make_executor()

        result = await executor.execute(FakeOperation(result=42), config=_config())

        assert result == 42

    async def test_records_exactly_one_success(self) -> None:
        executor, metrics, _ = _make_executor()

        await executor.execute(FakeOperation(), config=_config(), name="play")

        records = metrics.records("play")
        assert len(records) == 1
        assert records[0].success is True
        assert metrics.success_rate("play") == 1.0

    async def test_records_wall_time_duration(self) -> None:
        executor, metrics, _ = _make_executor()

        await executor.execute(
            FakeOperation(delay_seconds=0.05), config=_config(), name="slowish"
        )

        assert metrics.records("slowish")[0].duration_seconds >= 0.04

    async def test_record_metrics_false_records_nothing(self) -> None:
        executor, metrics, _ = _make_executor()

        await executor.execute(
            FakeOperation(), config=_config(record_metrics=False), name="quiet"
        )

        assert metrics.records("quiet") == ()
        assert metrics.average_execution_time("quiet") is None

    async def test_emits_started_and_succeeded_events(self) -> None:
        executor, _, observer = _make_executor()

        await executor.execute(FakeOperation(), config=_config(), name="play")

        assert [e.name for e in observer.started] == ["play"]
        assert [e.name for e in observer.succeeded] == ["play"]
        assert observer.failed == []


class TestExecuteFailure:
    """A raising operation surfaces as ExecutionFailedError and records a failure."""

    async def test_wraps_error_in_execution_failed(self) -> None:
        executor, _, _ = _make_executor()
        operation = FakeOperation(side_effects=[ValueError("bad input")])

        with pytest.raises(ExecutionFailedError) as exc_info:
            await executor.execute(operation, config=_config())

        assert "bad input" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, ValueError)

    async def test_message_starts_with_failed(self) -> None:
        executor, _, _ = _make_executor()
        operation = FakeOperation(side_effects=[ValueError("bad input")])

        with pytest.raises(ExecutionFailedError) as exc_info:
            await executor.execute(operation, config=_config())

        assert str(exc_info.value).startswith("Failed to ")

    async def test_records_exactly_one_failure(self) -> None:
        executor, metrics, _ = _make_executor()
        operation = FakeOperation(side_effects=[ValueError("bad input")])

        with pytest.raises(ExecutionFailedError):
            await executor.execute(operation, config=_config(), name="op")

        records = metrics.records("op")
        assert len(records) == 1
        assert records[0].success is False
        assert metrics.success_rate("op") == 0.0

    async def test_error_without_message_uses_type_name(self) -> None:
        executor, _, observer = _make_executor()
        operation = FakeOperation(side_effects=[KeyError()])

        with pytest.raises(ExecutionFailedError) as exc_info:
            await executor.execute(operation, config=_config())

        assert exc_info.value.reason == "KeyError"
        assert observer.failed[0].reason == "KeyError"


class TestExecuteTimeout:
    """The deadline wins when the operation is slower than timeout_seconds."""

    async def test_raises_timed_out(self) -> None:
        executor, _, _ = _make_executor()
        operation = FakeOperation(delay_seconds=1.0)

        with pytest.raises(ExecutionFailedError) as exc_info:
            await executor.execute(
                operation, config=_config(timeout_seconds=0.05, cancel_on_timeout=True)
            )

        assert "timed out" in str(exc_info.value)

    async def test_returns_at_the_deadline_not_at_completion(self) -> None:
        executor, _, _ = _make_executor()
        operation = FakeOperation(delay_seconds=1.0)
        started_at = time.monotonic()

        with pytest.raises(ExecutionFailedError):
            await executor.execute(
                operation, config=_config(timeout_seconds=0.05, cancel_on_timeout=True)
            )

        assert time.monotonic() - started_at < 0.5

    async def test_records_exactly_one_failure(self) -> None:
        executor, metrics, _ = _make_executor()

        with pytest.raises(ExecutionFailedError):
            await executor.execute(
                FakeOperation(delay_seconds=1.0),
                config=_config(timeout_seconds=0.05, cancel_on_timeout=True),
                name="slow",
            )

        records = metrics.records("slow")
        assert len(records) == 1
        assert records[0].success is False

    async def test_emits_timed_out_event(self) -> None:
        executor, _, observer = _make_executor()

        with pytest.raises(ExecutionFailedError):
            await executor.execute(
                FakeOperation(delay_seconds=1.0),
                config=_config(timeout_seconds=0.05, cancel_on_timeout=True),
                name="slow",
            )

        assert len(observer.timed_out) == 1
        assert observer.timed_out[0].timeout_seconds == 0.05

    async def test_abandoned_operation_keeps_running(self) -> None:
        executor, metrics, _ = _make_executor()
        operation = FakeOperation(delay_seconds=0.1)

        with pytest.raises(ExecutionFailedError):
            await executor.execute(
                operation, config=_config(timeout_seconds=0.02), name="late"
            )
        assert operation.finished == 0

        await asyncio.sleep(0.2)

        assert operation.finished == 1
        # The late completion is discarded, not recorded.
        assert len(metrics.records("late")) == 1

    async def test_cancel_on_timeout_stops_the_operation(self) -> None:
        executor, _, _ = _make_executor()
        operation = FakeOperation(delay_seconds=0.1)

        with pytest.raises(ExecutionFailedError):
            await executor.execute(
                operation,
                config=_config(timeout_seconds=0.02, cancel_on_timeout=True),
            )
        await asyncio.sleep(0.2)

        assert operation.finished == 0


class TestExecuteWithRetry:
    """execute_with_retry attempts up to retry_count times with a constant delay."""

    async def test_returns_first_success(self) -> None:
        executor, _, _ = _make_executor()
        operation = FakeOperation(
            result="ok", side_effects=[ValueError("flaky"), ValueError("flaky")]
        )

        result = await executor.execute_with_retry(operation, config=_config())

        assert result == "ok"
        assert operation.calls == 3

    async def test_always_failing_makes_exactly_retry_count_attempts(self) -> None:
        executor, metrics, _ = _make_executor()
        operation = FakeOperation(
            side_effects=[ValueError(f"failure {i}") for i in range(1, 5)]
        )

        with pytest.raises(ExecutionFailedError):
            await executor.execute_with_retry(
                operation, config=_config(retry_count=4), name="op"
            )

        assert operation.calls == 4
        assert len(metrics.records("op")) == 4

    async def test_raises_error_from_last_attempt(self) -> None:
        executor, _, _ = _make_executor()
        operation = FakeOperation(
            side_effects=[ValueError("first"), ValueError("second"), ValueError("third")]
        )

        with pytest.raises(ExecutionFailedError) as exc_info:
            await executor.execute_with_retry(operation, config=_config(retry_count=3))

        assert "third" in str(exc_info.value)
        assert "first" not in str(exc_info.value)

    async def test_waits_retry_delay_between_attempts(self) -> None:
        executor, _, _ = _make_executor()
        operation = FakeOperation(
            side_effects=[ValueError("a"), ValueError("b"), ValueError("c")]
        )
        started_at = time.monotonic()

        with pytest.raises(ExecutionFailedError):
            await executor.execute_with_retry(
                operation, config=_config(retry_count=3, retry_delay_seconds=0.05)
            )

        # Two gaps between three attempts, none after the last.
        elapsed = time.monotonic() - started_at
        assert elapsed >= 0.09
        assert elapsed < 0.5

    async def test_emits_retry_event_per_gap(self) -> None:
        executor, _, observer = _make_executor()
        operation = FakeOperation(
            side_effects=[ValueError("a"), ValueError("b"), ValueError("c")]
        )

        with pytest.raises(ExecutionFailedError):
            await executor.execute_with_retry(
                operation,
                config=_config(retry_count=3, retry_delay_seconds=0.01),
                name="op",
            )

        assert [e.attempt for e in observer.retried] == [1, 2]
        assert all(e.delay_seconds == 0.01 for e in observer.retried)
        assert all(e.max_attempts == 3 for e in observer.retried)

    async def test_retry_count_zero_still_attempts_once(self) -> None:
        executor, _, _ = _make_executor()
        operation = FakeOperation(result="once")

        result = await executor.execute_with_retry(
            operation, config=_config(retry_count=0)
        )

        assert result == "once"
        assert operation.calls == 1

    async def test_timeouts_are_retried(self) -> None:
        executor, _, _ = _make_executor()
        operation = FakeOperation(delay_seconds=1.0)

        with pytest.raises(ExecutionFailedError) as exc_info:
            await executor.execute_with_retry(
                operation,
                config=_config(
                    timeout_seconds=0.02, retry_count=2, cancel_on_timeout=True
                ),
            )

        assert operation.calls == 2
        assert "timed out" in str(exc_info.value)


class TestOperationTypeName:
    """Metrics keys are derived from the operation when no name is given."""

    def test_bound_method_uses_owner_class(self) -> None:
        assert operation_type_name(SendMessageIntent().perform) == "SendMessageIntent"

    def test_callable_object_uses_its_class(self) -> None:
        assert operation_type_name(FakeOperation()) == "FakeOperation"

    def test_plain_function_uses_qualname(self) -> None:
        async def set_timer() -> None:
            return None

        assert operation_type_name(set_timer).endswith("set_timer")

    def test_partial_unwraps_to_function(self) -> None:
        partial = functools.partial(SendMessageIntent().perform)
        assert operation_type_name(partial) == "SendMessageIntent"

    async def test_execute_keys_metrics_by_derived_name(self) -> None:
        executor, metrics, _ = _make_executor()

        await executor.execute(SendMessageIntent().perform, config=_config())
        with pytest.raises(ExecutionFailedError):
            await executor.execute(SendMessageIntent(fail=True).perform, config=_config())

        assert metrics.success_rate("SendMessageIntent") == 0.5
