"""Structlog implementations of the donation observer ports."""

from typing import Any

import structlog

from intent_kit.core.errors import describe_error


class StructlogDonationObserver:
    """Logs per-item donation lifecycle events to structlog.

    Satisfies the DonationObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def will_donate(self, item: Any) -> None:
        self._log.debug("donation.will_donate", item_type=type(item).__name__)

    def did_donate(self, item: Any) -> None:
        self._log.info("donation.did_donate", item_type=type(item).__name__)

    def donation_failed(self, item: Any, error: BaseException) -> None:
        self._log.error(
            "donation.failed",
            item_type=type(item).__name__,
            reason=describe_error(error),
        )


class StructlogDispatcherObserver:
    """Logs queue and batch events to structlog.

    Satisfies the DispatcherObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def batch_started(self, batch_index: int, total_batches: int, size: int) -> None:
        self._log.debug(
            "donation.batch.started",
            batch_index=batch_index,
            total_batches=total_batches,
            size=size,
        )

    def batch_completed(self, batch_index: int, total_batches: int, failed: int) -> None:
        log = self._log.warning if failed else self._log.info
        log(
            "donation.batch.completed",
            batch_index=batch_index,
            total_batches=total_batches,
            failed=failed,
        )

    def queue_flushed(self, count: int) -> None:
        self._log.info("donation.queue.flushed", count=count)

    def queue_cleared(self, count: int) -> None:
        self._log.info("donation.queue.cleared", count=count)

    def donation_disabled(self, count: int) -> None:
        self._log.warning(
            "donation.disabled",
            count=count,
            message="Donation is disabled; items were not sent to the sink",
        )
