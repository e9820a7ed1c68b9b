"""Structlog implementation of the ConfigObserver port."""

import structlog


class StructlogConfigObserver:
    """Delegates config domain events to structlog.

    Satisfies the ConfigObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def config_loaded(self, path: str) -> None:
        self._log.info("config.loaded", path=path)

    def config_donation_disabled_warning(self) -> None:
        self._log.warning(
            "config.donation_disabled_warning",
            message="Donation is disabled; donated items will not reach the sink",
        )
