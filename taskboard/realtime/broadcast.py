import asyncio
import logging
from typing import Any, Sequence

from taskboard.common.exceptions import DeliveryError
from taskboard.realtime.observers import Observer, ObserverRegistry
from taskboard.realtime.schemas import Snapshot

logger = logging.getLogger(__name__)


class BroadcastChannel:
    """Sole write path to observers. Owns the observer registry."""

    def __init__(self, *, delivery_timeout: float = 5.0) -> None:
        self.registry = ObserverRegistry()
        self.delivery_timeout = delivery_timeout

    async def broadcast(
        self, snapshot: Snapshot, targets: Sequence[Observer] | None = None
    ) -> int:
        """Deliver `snapshot` to every registered observer, or only to `targets`.

        Returns the number of observers that received it.
        """
        if targets is None:
            observers = self.registry.active_observers()
        else:
            observers = [observer for observer in targets if observer in self.registry]

        if not observers:
            return 0

        event = snapshot.to_event()
        results = await asyncio.gather(
            *(self._deliver(observer, snapshot, event) for observer in observers)
        )
        return sum(results)

    async def _deliver(
        self, observer: Observer, snapshot: Snapshot, event: dict[str, Any]
    ) -> bool:
        try:
            return await observer.deliver(snapshot, event, self.delivery_timeout)
        except DeliveryError as e:
            logger.warning(e)
            self.registry.leave(observer)
            await observer.close(self.delivery_timeout)
            return False
