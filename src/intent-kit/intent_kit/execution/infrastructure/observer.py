"""StructlogExecutionObserver — production observer that delegates to structlog."""

import structlog


class StructlogExecutionObserver:
    """Logs execution domain events to structlog.

    Does NOT inherit from ExecutionObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def execution_started(self, name: str, timeout_seconds: float) -> None:
        self._log.debug(
            "execution.started",
            name=name,
            timeout_seconds=timeout_seconds,
        )

    def execution_succeeded(self, name: str, duration_seconds: float) -> None:
        self._log.info(
            "execution.succeeded",
            name=name,
            duration_seconds=round(duration_seconds, 4),
        )

    def execution_failed(self, name: str, duration_seconds: float, reason: str) -> None:
        self._log.error(
            "execution.failed",
            name=name,
            duration_seconds=round(duration_seconds, 4),
            reason=reason,
        )

    def execution_timed_out(self, name: str, timeout_seconds: float) -> None:
        self._log.warning(
            "execution.timed_out",
            name=name,
            timeout_seconds=timeout_seconds,
        )

    def execution_retry(
        self,
        name: str,
        attempt: int,
        max_attempts: int,
        reason: str,
        delay_seconds: float,
    ) -> None:
        self._log.warning(
            "execution.retry",
            name=name,
            attempt=attempt,
            max_attempts=max_attempts,
            reason=reason,
            delay_seconds=delay_seconds,
        )
