"""Donation configuration model."""

from pydantic import BaseModel, Field


class DonationConfig(BaseModel, frozen=True):
    is_enabled: bool = True
    batch_size: int = Field(default=10, ge=1)
    delay_between_batches_seconds: float = Field(default=0.1, ge=0)
    retry_count: int = Field(default=3, ge=0)
