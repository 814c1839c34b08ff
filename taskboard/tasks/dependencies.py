from fastapi import Depends, Request

from taskboard.realtime.dependencies import get_snapshot_publisher
from taskboard.realtime.publisher import SnapshotPublisher
from taskboard.tasks.service import TaskService
from taskboard.tasks.store.base import TaskStore


def get_task_store(request: Request) -> TaskStore:
    return request.app.state.task_store


def get_task_service(
    task_store: TaskStore = Depends(get_task_store),
    publisher: SnapshotPublisher = Depends(get_snapshot_publisher),
) -> TaskService:
    return TaskService(task_store=task_store, publisher=publisher)
