import asyncio
import itertools
import logging
import threading
from starlette.concurrency import run_in_threadpool

from taskboard.common.exceptions import StorageError
from taskboard.realtime.broadcast import BroadcastChannel
from taskboard.realtime.observers import Observer
from taskboard.realtime.schemas import Snapshot
from taskboard.tasks.store.base import TaskStore

logger = logging.getLogger(__name__)


class SnapshotPublisher:
    """Reads the full task collection and broadcasts it after every mutation.

    Triggers are numbered in the order they arrive and published one at a
    time in that order, so an observer never receives an older snapshot
    after a newer one. `trigger` may be called from worker threads; the
    publish itself runs on the event loop bound by `start`.
    """

    def __init__(self, *, task_store: TaskStore, channel: BroadcastChannel) -> None:
        self.task_store = task_store
        self.channel = channel
        self._sequence = itertools.count(1)
        self._sequence_lock = threading.Lock()
        self._publish_lock = asyncio.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._pending: set[asyncio.Task[Snapshot | None]] = set()

        channel.registry.add_join_listener(self.trigger)

    def start(self) -> None:
        self._loop = asyncio.get_running_loop()
        logger.info("Snapshot publisher started")

    async def stop(self, timeout: float = 5.0) -> None:
        with self._sequence_lock:
            self._loop = None

        try:
            await asyncio.wait_for(self.wait_until_idle(), timeout)
        except asyncio.TimeoutError:
            logger.warning("Cancelled pending snapshot publishes on shutdown")

        logger.info("Snapshot publisher stopped")

    async def wait_until_idle(self) -> None:
        # Let callbacks scheduled by `trigger` spawn their tasks first
        await asyncio.sleep(0)
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def trigger(self, observer: Observer | None = None) -> None:
        """Schedule a publish to all observers, or only to `observer`. Never raises."""
        with self._sequence_lock:
            if self._loop is None:
                logger.error("Snapshot publisher is not running, dropping trigger")
                return

            sequence = next(self._sequence)
            try:
                self._loop.call_soon_threadsafe(self._spawn, sequence, observer)
            except RuntimeError as e:
                logger.error(f"Failed to schedule snapshot {sequence}: {e}")

    def _spawn(self, sequence: int, observer: Observer | None) -> None:
        if self._loop is None:
            return

        task = asyncio.create_task(self._publish_safely(sequence, observer))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _publish_safely(
        self, sequence: int, observer: Observer | None
    ) -> Snapshot | None:
        try:
            return await self.publish(sequence=sequence, observer=observer)
        except Exception:
            logger.exception(f"Snapshot {sequence} failed")
            return None

    async def publish(
        self, *, sequence: int | None = None, observer: Observer | None = None
    ) -> Snapshot | None:
        if sequence is None:
            with self._sequence_lock:
                sequence = next(self._sequence)

        async with self._publish_lock:
            try:
                tasks = await run_in_threadpool(self.task_store.list_tasks)
            except StorageError as e:
                logger.error(f"Abandoning snapshot {sequence}: {e}")
                return None

            snapshot = Snapshot(sequence=sequence, tasks=tuple(tasks))
            targets = [observer] if observer else None
            delivered = await self.channel.broadcast(snapshot, targets)

        logger.info(
            f"Published snapshot {sequence} with {len(snapshot.tasks)} tasks "
            f"to {delivered} observers"
        )
        return snapshot
