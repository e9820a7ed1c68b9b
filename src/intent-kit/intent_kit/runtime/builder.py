"""Composition root — wires metrics, executor, registry and dispatcher together."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from intent_kit.config.domain.config import IntentKitConfig
from intent_kit.donation.application.dispatcher import DonationDispatcher
from intent_kit.donation.application.registry import DonationObserverRegistry
from intent_kit.donation.domain.observer import DispatcherObserver, DonationObserver
from intent_kit.donation.domain.sink import DonationSink
from intent_kit.donation.infrastructure.observer import (
    StructlogDispatcherObserver,
    StructlogDonationObserver,
)
from intent_kit.execution.application.executor import IntentExecutor, Operation
from intent_kit.execution.application.metrics import MetricsStore
from intent_kit.execution.domain.observer import ExecutionObserver
from intent_kit.execution.infrastructure.observer import StructlogExecutionObserver


@dataclass
class IntentKitRuntime:
    """One fully-wired set of engine components.

    ``observers`` keeps strong references to the observers registered at
    build time; the registry itself only holds them weakly.
    """

    config: IntentKitConfig
    metrics: MetricsStore
    executor: IntentExecutor
    registry: DonationObserverRegistry
    dispatcher: DonationDispatcher
    observers: list[DonationObserver] = field(default_factory=list)

    async def execute[T](self, operation: Operation[T], name: str | None = None) -> T:
        return await self.executor.execute(
            operation, config=self.config.execution, name=name
        )

    async def execute_with_retry[T](
        self, operation: Operation[T], name: str | None = None
    ) -> T:
        return await self.executor.execute_with_retry(
            operation, config=self.config.execution, name=name
        )


def build_runtime(
    config: IntentKitConfig,
    sink: DonationSink,
    observers: Sequence[DonationObserver] = (),
    execution_observer: ExecutionObserver | None = None,
    dispatcher_observer: DispatcherObserver | None = None,
) -> IntentKitRuntime:
    """Build a runtime logging through structlog unless observers are supplied."""
    metrics = MetricsStore()
    executor = IntentExecutor(
        metrics=metrics,
        observer=execution_observer or StructlogExecutionObserver(),
    )

    registry = DonationObserverRegistry()
    held: list[DonationObserver] = [StructlogDonationObserver(), *observers]
    for observer in held:
        registry.register(observer)

    dispatcher = DonationDispatcher(
        sink=sink,
        registry=registry,
        observer=dispatcher_observer or StructlogDispatcherObserver(),
        config=config.donation,
    )

    return IntentKitRuntime(
        config=config,
        metrics=metrics,
        executor=executor,
        registry=registry,
        dispatcher=dispatcher,
        observers=held,
    )
