"""DonationDispatcher — batched, observable hand-off of items to a donation sink."""

import asyncio
import itertools
import threading
from collections.abc import Callable, Sequence
from typing import Any

from intent_kit.donation.application.registry import DonationObserverRegistry
from intent_kit.donation.domain.config import DonationConfig
from intent_kit.donation.domain.errors import DonationFailedError
from intent_kit.donation.domain.observer import DispatcherObserver
from intent_kit.donation.domain.sink import DonationSink


class DonationDispatcher:
    """Sends items to the sink one at a time, in concurrent batches, or via a queue.

    Failure policy differs by entry point. donate_batch() collects every
    per-item failure and keeps going; flush_donation_queue() stops at the first
    failure and the rest of that flush is dropped.
    """

    def __init__(
        self,
        sink: DonationSink,
        registry: DonationObserverRegistry,
        observer: DispatcherObserver,
        config: DonationConfig | None = None,
    ) -> None:
        self._sink = sink
        self._registry = registry
        self._observer = observer
        self._config = config or DonationConfig()
        self._pending: list[Any] = []
        self._pending_lock = threading.Lock()

    @property
    def config(self) -> DonationConfig:
        return self._config

    @property
    def pending_count(self) -> int:
        with self._pending_lock:
            return len(self._pending)

    async def donate(self, item: Any) -> None:
        """Donate a single item.

        Raises:
            DonationFailedError: if the sink or a registered observer raises.
        """
        if not self._config.is_enabled:
            self._observer.donation_disabled(count=1)
            return
        await self._donate_one(item)

    async def donate_batch(self, items: Sequence[Any]) -> None:
        """Donate items in consecutive waves of config.batch_size.

        Items within a wave run concurrently; the next wave starts only once
        every item of the current one has finished. A failing item never stops
        its siblings or later waves.

        Raises:
            DonationFailedError: after all waves, if any item failed. Its
                ``failures`` list holds every sink or observer error.
        """
        if not items:
            return
        if not self._config.is_enabled:
            self._observer.donation_disabled(count=len(items))
            return

        batches = list(itertools.batched(items, self._config.batch_size))
        errors: list[BaseException] = []

        for batch_index, batch in enumerate(batches):
            if batch_index > 0 and self._config.delay_between_batches_seconds > 0:
                await asyncio.sleep(self._config.delay_between_batches_seconds)

            self._observer.batch_started(
                batch_index=batch_index, total_batches=len(batches), size=len(batch)
            )
            async with asyncio.TaskGroup() as tg:
                tasks = [tg.create_task(self._try_donate(item)) for item in batch]

            batch_errors = [
                error for task in tasks if (error := task.result()) is not None
            ]
            self._observer.batch_completed(
                batch_index=batch_index,
                total_batches=len(batches),
                failed=len(batch_errors),
            )
            errors.extend(batch_errors)

        if errors:
            raise DonationFailedError.for_batch(errors)

    def queue_donation(self, item: Any) -> None:
        """Append item to the pending queue without dispatching it."""
        with self._pending_lock:
            self._pending.append(item)

    async def flush_donation_queue(self) -> None:
        """Drain the pending queue and donate each item in enqueue order.

        Raises:
            DonationFailedError: on the first failing item. Items after it in
                this flush are dropped, not re-queued.
        """
        with self._pending_lock:
            drained = self._pending
            self._pending = []

        self._observer.queue_flushed(count=len(drained))
        if not drained:
            return
        if not self._config.is_enabled:
            self._observer.donation_disabled(count=len(drained))
            return

        for item in drained:
            await self._donate_one(item)

    def clear_donation_queue(self) -> None:
        """Discard every pending item without dispatching."""
        with self._pending_lock:
            count = len(self._pending)
            self._pending = []
        self._observer.queue_cleared(count=count)

    async def _donate_one(self, item: Any) -> None:
        self._notify(self._registry.notify_will_donate, item)
        try:
            await self._sink(item)
        except Exception as exc:
            self._notify(self._registry.notify_donation_failed, item, exc)
            raise DonationFailedError.for_item(exc) from exc
        self._notify(self._registry.notify_did_donate, item)

    @staticmethod
    def _notify(notify: Callable[..., None], *args: Any) -> None:
        """Run a registry notification; an observer error fails the donation."""
        try:
            notify(*args)
        except Exception as exc:
            raise DonationFailedError.for_item(exc) from exc

    async def _try_donate(self, item: Any) -> BaseException | None:
        """Donate item, returning the sink or observer error instead of raising it."""
        try:
            await self._donate_one(item)
        except DonationFailedError as exc:
            return exc.failures[0]
        return None
