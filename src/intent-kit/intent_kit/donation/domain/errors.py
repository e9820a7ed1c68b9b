"""Error types raised while building and donating items."""

from collections.abc import Sequence

from intent_kit.core.errors import IntentKitError, describe_error


class DonationFailedError(IntentKitError):
    """Raised when the sink rejects one item, or several items of a batch.

    ``failures`` holds the underlying sink errors, one per failed item.
    """

    def __init__(self, message: str, failures: Sequence[BaseException] = ()) -> None:
        self.failures = list(failures)
        super().__init__(message)

    @classmethod
    def for_item(cls, error: BaseException) -> "DonationFailedError":
        return cls(
            f"Failed to donate intent: {describe_error(error)}", failures=[error]
        )

    @classmethod
    def for_batch(cls, errors: Sequence[BaseException]) -> "DonationFailedError":
        descriptions = ", ".join(describe_error(error) for error in errors)
        return cls(
            f"Failed to donate {len(errors)} intents: {descriptions}", failures=errors
        )


class MissingParameterError(IntentKitError):
    """Raised when a required item field is unset at build time."""

    def __init__(self, parameter: str) -> None:
        self.parameter = parameter
        super().__init__(
            f"Failed to build donation: missing required parameter: {parameter}"
        )


class ValidationFailedError(IntentKitError):
    """Raised when an item field cannot be assigned."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to validate donation: {reason}")
