"""Error types raised while executing intent operations."""

from intent_kit.core.errors import IntentKitError


class ExecutionFailedError(IntentKitError):
    """Raised when an operation fails, times out, or exhausts its retries."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to execute intent: {reason}")
