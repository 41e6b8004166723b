"""Post-commit event publication

Settlement side effects (receipt rendering, customer notification) are
subscribers to events published after the settlement commits. A failing
subscriber is logged and reported, never raised.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Sequence

from src.domain.distribution import Distribution, DistributionItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DistributionCompleted:
    """A settlement committed; its packages are now DELIVERED"""

    distribution: Distribution
    items: Sequence[DistributionItem] = field(default_factory=tuple)
    package_ids: Sequence[int] = field(default_factory=tuple)


class EventHandler(ABC):
    """Subscriber to DistributionCompleted events"""

    name: str = "handler"

    @abstractmethod
    async def handle(self, event: DistributionCompleted) -> None:
        pass


class EventPublisher:
    """
    Delivers events to subscribers in registration order

    Each subscriber runs even if an earlier one failed.
    """

    def __init__(self, handlers: Sequence[EventHandler] = ()):
        self.handlers: List[EventHandler] = list(handlers)

    def subscribe(self, handler: EventHandler) -> None:
        self.handlers.append(handler)

    async def publish(self, event: DistributionCompleted) -> List[str]:
        """
        Publish an event to every subscriber

        Returns:
            Names of subscribers that failed
        """
        failures: List[str] = []
        for handler in self.handlers:
            try:
                await handler.handle(event)
            except Exception as e:
                logger.warning(
                    f"Post-commit handler {handler.name} failed for distribution "
                    f"{event.distribution.id} ({event.distribution.receipt_number}): {e}"
                )
                failures.append(handler.name)
        return failures
