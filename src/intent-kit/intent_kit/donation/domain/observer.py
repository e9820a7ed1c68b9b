"""Observer ports for the donation domain — define events in domain language."""

from typing import Any, Protocol


class DonationObserver(Protocol):
    """Lifecycle listener notified around every single-item donation.

    Registered with a DonationObserverRegistry, which holds it weakly. Classes
    that define __slots__ must include '__weakref__' to be registered.
    """

    def will_donate(self, item: Any) -> None: ...

    def did_donate(self, item: Any) -> None: ...

    def donation_failed(self, item: Any, error: BaseException) -> None: ...


class DispatcherObserver(Protocol):
    """Observer port for queue and batch events emitted by DonationDispatcher."""

    def batch_started(self, batch_index: int, total_batches: int, size: int) -> None: ...

    def batch_completed(
        self, batch_index: int, total_batches: int, failed: int
    ) -> None: ...

    def queue_flushed(self, count: int) -> None: ...

    def queue_cleared(self, count: int) -> None: ...

    def donation_disabled(self, count: int) -> None: ...
