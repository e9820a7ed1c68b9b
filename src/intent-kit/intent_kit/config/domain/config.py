"""Top-level IntentKitConfig aggregate — the root configuration object."""

from pydantic import BaseModel, Field

from intent_kit.donation.domain.config import DonationConfig
from intent_kit.execution.domain.config import ExecutionConfig


class IntentKitConfig(BaseModel, frozen=True):
    """Root configuration aggregate for an intent-kit runtime."""

    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)
    donation: DonationConfig = Field(default_factory=DonationConfig)
