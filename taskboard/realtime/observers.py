import asyncio
from enum import Enum
import logging
import threading
from typing import Any, Callable
from uuid import uuid4
from fastapi import WebSocket, status

from taskboard.common.exceptions import DeliveryError
from taskboard.realtime.schemas import Snapshot

logger = logging.getLogger(__name__)


class ObserverState(str, Enum):
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


class Observer:
    """A live WebSocket connection subscribed to task snapshots."""

    def __init__(self, websocket: WebSocket) -> None:
        self.id = str(uuid4())
        self.websocket = websocket
        self.state = ObserverState.CONNECTING
        self.last_sequence = 0

    async def deliver(
        self, snapshot: Snapshot, event: dict[str, Any], timeout: float
    ) -> bool:
        """Send `event` unless the observer is gone or already saw a newer snapshot.

        Raises DeliveryError when the send fails or times out.
        """
        if self.state != ObserverState.CONNECTED:
            return False

        if snapshot.sequence <= self.last_sequence:
            logger.debug(
                f"Dropping stale snapshot {snapshot.sequence} for observer '{self.id}' "
                f"(last delivered {self.last_sequence})"
            )
            return False

        try:
            await asyncio.wait_for(self.websocket.send_json(event), timeout)
        except Exception as e:
            raise DeliveryError(self.id, str(e) or type(e).__name__) from e

        self.last_sequence = snapshot.sequence
        return True

    async def close(self, timeout: float) -> None:
        """Close the peer so its receive loop ends. Errors from a dead socket are ignored."""
        try:
            await asyncio.wait_for(
                self.websocket.close(code=status.WS_1011_INTERNAL_ERROR), timeout
            )
        except Exception as e:
            logger.debug(f"Closing observer '{self.id}' failed: {e}")


JoinListener = Callable[[Observer], None]


class ObserverRegistry:
    def __init__(self) -> None:
        self._observers: dict[str, Observer] = {}
        self._lock = threading.Lock()
        self._join_listeners: list[JoinListener] = []

    def add_join_listener(self, listener: JoinListener) -> None:
        self._join_listeners.append(listener)

    def join(self, observer: Observer) -> None:
        with self._lock:
            if observer.state == ObserverState.DISCONNECTED:
                raise ValueError(f"Observer '{observer.id}' has already disconnected")

            observer.state = ObserverState.CONNECTED
            self._observers[observer.id] = observer
            active = len(self._observers)

        logger.info(f"Observer '{observer.id}' connected ({active} active)")

        for listener in self._join_listeners:
            listener(observer)

    def leave(self, observer: Observer) -> bool:
        with self._lock:
            observer.state = ObserverState.DISCONNECTED
            removed = self._observers.pop(observer.id, None) is not None
            active = len(self._observers)

        if removed:
            logger.info(f"Observer '{observer.id}' disconnected ({active} active)")

        return removed

    def active_observers(self) -> list[Observer]:
        with self._lock:
            return list(self._observers.values())

    def __contains__(self, observer: object) -> bool:
        with self._lock:
            return isinstance(observer, Observer) and observer.id in self._observers

    def __len__(self) -> int:
        with self._lock:
            return len(self._observers)
