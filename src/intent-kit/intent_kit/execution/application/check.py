"""IntentCheck — runs an operation once and reports expectations without raising."""

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from intent_kit.core.errors import describe_error
from intent_kit.execution.application.executor import Operation
from intent_kit.execution.domain.config import ExecutionConfig

type Expectation = Callable[[Any], None]


class CheckExecutor(Protocol):
    """Anything that runs an operation the way IntentExecutor.execute() does."""

    async def execute(
        self, operation: Operation[Any], config: ExecutionConfig, name: str | None = None
    ) -> Any: ...


@dataclass(frozen=True)
class CheckResult:
    success: bool
    execution_seconds: float
    failure_reason: str | None


class IntentCheck:
    """Executes an operation and verifies its result against expectations.

    Each expectation receives the operation's result and signals a mismatch by
    raising (a plain ``assert`` is enough). Any failure, whether from the
    operation or an expectation, is folded into the returned CheckResult.
    """

    def __init__(
        self,
        operation: Operation[Any],
        executor: CheckExecutor,
        expectations: Sequence[Expectation] = (),
        config: ExecutionConfig | None = None,
    ) -> None:
        self._operation = operation
        self._executor = executor
        self._expectations = list(expectations)
        self._config = config or ExecutionConfig()

    async def run(self) -> CheckResult:
        started_at = time.monotonic()
        try:
            result = await self._executor.execute(self._operation, config=self._config)
            for expectation in self._expectations:
                expectation(result)
        except Exception as exc:
            return CheckResult(
                success=False,
                execution_seconds=time.monotonic() - started_at,
                failure_reason=describe_error(exc),
            )

        return CheckResult(
            success=True,
            execution_seconds=time.monotonic() - started_at,
            failure_reason=None,
        )
