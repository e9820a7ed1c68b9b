"""Observer port for the execution domain — defines events in domain language."""

from typing import Protocol


class ExecutionObserver(Protocol):
    """Observer port emitting structured events around each execute() call."""

    def execution_started(self, name: str, timeout_seconds: float) -> None: ...

    def execution_succeeded(self, name: str, duration_seconds: float) -> None: ...

    def execution_failed(
        self, name: str, duration_seconds: float, reason: str
    ) -> None: ...

    def execution_timed_out(self, name: str, timeout_seconds: float) -> None: ...

    def execution_retry(
        self,
        name: str,
        attempt: int,
        max_attempts: int,
        reason: str,
        delay_seconds: float,
    ) -> None: ...
