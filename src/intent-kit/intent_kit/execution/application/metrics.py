"""MetricsStore — thread-safe aggregation of execution outcomes per operation type."""

import threading
from datetime import datetime, timezone

from intent_kit.execution.domain.record import ExecutionRecord


class MetricsStore:
    """Collects ExecutionRecords keyed by operation type name.

    Every read and write holds the same lock. Appends go to a per-type list in
    place; readers get a tuple snapshot taken under the lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, list[ExecutionRecord]] = {}

    def record(self, type_name: str, duration_seconds: float, success: bool) -> None:
        """Append one outcome for type_name, preserving completion order."""
        record = ExecutionRecord(
            timestamp=datetime.now(timezone.utc),
            duration_seconds=duration_seconds,
            success=success,
        )
        with self._lock:
            self._records.setdefault(type_name, []).append(record)

    def records(self, type_name: str) -> tuple[ExecutionRecord, ...]:
        with self._lock:
            return tuple(self._records.get(type_name, ()))

    def type_names(self) -> list[str]:
        with self._lock:
            return list(self._records)

    def average_execution_time(self, type_name: str) -> float | None:
        """Mean duration in seconds, or None when nothing was recorded."""
        records = self.records(type_name)
        if not records:
            return None
        return sum(r.duration_seconds for r in records) / len(records)

    def success_rate(self, type_name: str) -> float | None:
        """Fraction of successful records in [0, 1], or None when nothing was recorded."""
        records = self.records(type_name)
        if not records:
            return None
        successes = sum(1 for r in records if r.success)
        return successes / len(records)

    def reset(self) -> None:
        """Drop every record for every type name."""
        with self._lock:
            self._records.clear()
