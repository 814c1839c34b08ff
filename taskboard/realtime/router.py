from fastapi import APIRouter, Depends, WebSocket

from taskboard.realtime.broadcast import BroadcastChannel
from taskboard.realtime.dependencies import get_broadcast_channel
from taskboard.realtime.observers import Observer


router = APIRouter(tags=["Realtime"])


@router.websocket("/ws")
async def task_updates(
    websocket: WebSocket,
    channel: BroadcastChannel = Depends(get_broadcast_channel),
):
    """Pushes a TASK_UPDATED snapshot on connect and after every task mutation."""
    observer = Observer(websocket)
    await websocket.accept()
    channel.registry.join(observer)

    try:
        # Inbound messages are ignored; keep reading until the peer goes away
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    finally:
        channel.registry.leave(observer)
