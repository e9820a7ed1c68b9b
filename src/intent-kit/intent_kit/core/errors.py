"""Base exception class for all intent-kit errors."""


class IntentKitError(Exception):
    """Base class for all intent-kit errors."""


class InvalidConfigurationError(IntentKitError):
    """Raised when a runtime setting has an unsupported value."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to apply configuration: {reason}")


def describe_error(error: BaseException) -> str:
    """Return a human-readable description of *error*, never empty."""
    return str(error) or type(error).__name__
