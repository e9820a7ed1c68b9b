"""Execution configuration model."""

from pydantic import BaseModel, Field


class ExecutionConfig(BaseModel, frozen=True):
    """Per-invocation limits for running an intent operation.

    cancel_on_timeout is off by default: a timed-out operation keeps running
    in the background and its late result is discarded.
    """

    timeout_seconds: float = Field(default=30.0, gt=0)
    retry_count: int = Field(default=3, ge=0)
    retry_delay_seconds: float = Field(default=1.0, ge=0)
    record_metrics: bool = True
    cancel_on_timeout: bool = False
