"""DonationObserverRegistry — weak fan-out of donation lifecycle events."""

import threading
import weakref
from dataclasses import dataclass
from typing import Any

from intent_kit.core.errors import InvalidConfigurationError
from intent_kit.donation.domain.observer import DonationObserver


@dataclass(frozen=True)
class _Registration:
    """Non-owning handle to an observer; resolves to None once it is gone."""

    ref: weakref.ref[DonationObserver]

    def resolve(self) -> DonationObserver | None:
        return self.ref()


class DonationObserverRegistry:
    """Broadcasts will/did/failed events to registered observers.

    The registry never extends an observer's lifetime. Registrations whose
    observer has been garbage-collected are skipped and pruned on the next
    notification. Events are delivered in registration order.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._registrations: list[_Registration] = []

    def __len__(self) -> int:
        return len(self._live_observers())

    def register(self, observer: DonationObserver) -> None:
        """Register observer; registering the same object twice is a no-op.

        Raises:
            InvalidConfigurationError: if observer cannot be weakly referenced.
        """
        try:
            ref = weakref.ref(observer)
        except TypeError as exc:
            raise InvalidConfigurationError(
                f"observer {type(observer).__name__} cannot be weakly referenced;"
                " add '__weakref__' to its __slots__"
            ) from exc
        with self._lock:
            if any(r.resolve() is observer for r in self._registrations):
                return
            self._registrations.append(_Registration(ref=ref))

    def unregister(self, observer: DonationObserver) -> None:
        with self._lock:
            self._registrations = [
                r for r in self._registrations if _is_live_other(r, observer)
            ]

    def notify_will_donate(self, item: Any) -> None:
        for observer in self._live_observers():
            observer.will_donate(item)

    def notify_did_donate(self, item: Any) -> None:
        for observer in self._live_observers():
            observer.did_donate(item)

    def notify_donation_failed(self, item: Any, error: BaseException) -> None:
        for observer in self._live_observers():
            observer.donation_failed(item, error)

    def _live_observers(self) -> list[DonationObserver]:
        """Snapshot live observers (as strong refs) and prune dead registrations.

        Callbacks run on the snapshot outside the lock, so an observer may
        register or unregister from inside a callback.
        """
        with self._lock:
            live: list[DonationObserver] = []
            kept: list[_Registration] = []
            for registration in self._registrations:
                observer = registration.resolve()
                if observer is None:
                    continue
                live.append(observer)
                kept.append(registration)
            self._registrations = kept
        return live


def _is_live_other(registration: _Registration, observer: DonationObserver) -> bool:
    resolved = registration.resolve()
    return resolved is not None and resolved is not observer
