from starlette.requests import HTTPConnection

from taskboard.realtime.broadcast import BroadcastChannel
from taskboard.realtime.publisher import SnapshotPublisher


def get_broadcast_channel(connection: HTTPConnection) -> BroadcastChannel:
    return connection.app.state.broadcast_channel


def get_snapshot_publisher(connection: HTTPConnection) -> SnapshotPublisher:
    return connection.app.state.snapshot_publisher
