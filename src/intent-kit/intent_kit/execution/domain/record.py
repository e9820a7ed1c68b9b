"""ExecutionRecord — one completed execute() call."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ExecutionRecord:
    timestamp: datetime
    duration_seconds: float
    success: bool
