import logging
from unittest.mock import AsyncMock, Mock
import pytest
from pytest_mock import MockerFixture

from taskboard.common.exceptions import StorageError
from taskboard.realtime.broadcast import BroadcastChannel
from taskboard.realtime.observers import Observer
from taskboard.realtime.publisher import SnapshotPublisher
from taskboard.tasks.schemas import Task
from taskboard.tasks.store.base import TaskStore

TASK_ID = "12345678-1234-5678-1234-567812345678"


@pytest.fixture
def mock_task_store(mocker: MockerFixture) -> Mock:
    task_store = mocker.Mock(spec=TaskStore)
    task_store.list_tasks.return_value = []
    return task_store


@pytest.fixture
def channel() -> BroadcastChannel:
    return BroadcastChannel(delivery_timeout=1)


@pytest.fixture
def publisher(mock_task_store: Mock, channel: BroadcastChannel) -> SnapshotPublisher:
    return SnapshotPublisher(task_store=mock_task_store, channel=channel)


def connect(channel: BroadcastChannel, mocker: MockerFixture) -> Observer:
    observer = Observer(mocker.AsyncMock())
    channel.registry.join(observer)
    return observer


def sent_events(observer: Observer) -> list[dict]:
    websocket: AsyncMock = observer.websocket  # type: ignore[assignment]
    return [call.args[0] for call in websocket.send_json.await_args_list]


async def test_publish_empty_collection(
    publisher: SnapshotPublisher, channel: BroadcastChannel, mocker: MockerFixture
) -> None:
    observer = connect(channel, mocker)

    snapshot = await publisher.publish()

    assert snapshot is not None
    assert snapshot.tasks == ()
    assert sent_events(observer) == [
        {"event": "TASK_UPDATED", "sequence": snapshot.sequence, "data": []}
    ]


async def test_publish_reads_full_collection(
    publisher: SnapshotPublisher,
    channel: BroadcastChannel,
    mock_task_store: Mock,
    mocker: MockerFixture,
) -> None:
    mock_task_store.list_tasks.return_value = [
        Task(id=TASK_ID, title="A", description="d", email="x@y.com", status="todo")
    ]
    observer = connect(channel, mocker)

    await publisher.publish()

    mock_task_store.list_tasks.assert_called_once_with()
    [event] = sent_events(observer)
    assert event["data"] == [
        {
            "id": TASK_ID,
            "title": "A",
            "description": "d",
            "email": "x@y.com",
            "status": "todo",
        }
    ]


async def test_publish_abandoned_on_storage_error(
    publisher: SnapshotPublisher,
    channel: BroadcastChannel,
    mock_task_store: Mock,
    mocker: MockerFixture,
) -> None:
    mock_task_store.list_tasks.side_effect = StorageError("Failed to fetch tasks: down")
    observer = connect(channel, mocker)

    assert await publisher.publish() is None

    assert sent_events(observer) == []
    assert observer in channel.registry


async def test_observer_never_receives_older_snapshot(
    publisher: SnapshotPublisher, channel: BroadcastChannel, mocker: MockerFixture
) -> None:
    observer = connect(channel, mocker)

    await publisher.publish(sequence=5)
    await publisher.publish(sequence=3)

    assert [event["sequence"] for event in sent_events(observer)] == [5]


def test_trigger_before_start_does_not_raise(
    publisher: SnapshotPublisher, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.ERROR):
        publisher.trigger()

    assert "not running" in caplog.text


async def test_join_delivers_targeted_snapshot(
    publisher: SnapshotPublisher, channel: BroadcastChannel, mocker: MockerFixture
) -> None:
    publisher.start()
    existing = Observer(mocker.AsyncMock())
    channel.registry.join(existing)
    await publisher.wait_until_idle()

    newcomer = connect(channel, mocker)
    await publisher.wait_until_idle()

    assert len(sent_events(existing)) == 1
    assert len(sent_events(newcomer)) == 1
    assert sent_events(newcomer)[0]["data"] == []

    await publisher.stop()


async def test_triggers_are_published_in_order(
    publisher: SnapshotPublisher,
    channel: BroadcastChannel,
    mock_task_store: Mock,
    mocker: MockerFixture,
) -> None:
    publisher.start()
    observer = connect(channel, mocker)

    publisher.trigger()
    publisher.trigger()
    await publisher.wait_until_idle()

    assert [event["sequence"] for event in sent_events(observer)] == [1, 2, 3]
    assert mock_task_store.list_tasks.call_count == 3

    await publisher.stop()


async def test_failing_observer_is_removed(
    publisher: SnapshotPublisher, channel: BroadcastChannel, mocker: MockerFixture
) -> None:
    publisher.start()
    healthy = connect(channel, mocker)
    broken = connect(channel, mocker)
    await publisher.wait_until_idle()
    broken_websocket: AsyncMock = broken.websocket  # type: ignore[assignment]
    broken_websocket.send_json.side_effect = RuntimeError("closed")

    publisher.trigger()
    await publisher.wait_until_idle()

    assert broken not in channel.registry
    assert [event["sequence"] for event in sent_events(healthy)] == [1, 3]
    broken_websocket.close.assert_awaited_once_with(code=1011)

    await publisher.stop()


async def test_trigger_after_stop_is_dropped(
    publisher: SnapshotPublisher,
    channel: BroadcastChannel,
    mock_task_store: Mock,
    mocker: MockerFixture,
) -> None:
    publisher.start()
    await publisher.stop()

    publisher.trigger()
    connect(channel, mocker)

    mock_task_store.list_tasks.assert_not_called()
