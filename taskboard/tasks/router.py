from typing import Any
from fastapi import APIRouter, Body, Depends, status

from taskboard.common.exceptions import (
    ResourceType,
    not_found_response,
    validation_error_response,
)
from taskboard.tasks.dependencies import get_task_service
from taskboard.tasks.schemas import (
    Task,
    TaskDeleteResult,
    TaskInsertResult,
    TaskUpdateResult,
)
from taskboard.tasks.service import TaskService


router = APIRouter(
    prefix="/tasks",
    tags=["Tasks"],
)


@router.get(
    "",
    responses={
        **validation_error_response("Email is required"),
        **not_found_response(ResourceType.TASK),
    },
)
def list_tasks(
    email: str | None = None,
    task_service: TaskService = Depends(get_task_service),
) -> list[Task]:
    return task_service.list_tasks(email)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses={
        **validation_error_response(
            "Title, description, email, and status are required"
        )
    },
)
def create_task(
    task: dict[str, Any] = Body(...),
    task_service: TaskService = Depends(get_task_service),
) -> TaskInsertResult:
    return task_service.create_task(task)


@router.put(
    "/{task_id}",
    responses={
        **validation_error_response("Invalid task ID 'example'"),
        **not_found_response(ResourceType.TASK),
    },
)
def replace_task(
    task_id: str,
    task: dict[str, Any] = Body(...),
    task_service: TaskService = Depends(get_task_service),
) -> TaskUpdateResult:
    return task_service.replace_task(task_id, task)


@router.patch(
    "/{task_id}",
    responses={
        **validation_error_response("Invalid task ID 'example'"),
        **not_found_response(ResourceType.TASK),
    },
)
def update_task(
    task_id: str,
    updates: dict[str, Any] = Body(...),
    task_service: TaskService = Depends(get_task_service),
) -> TaskUpdateResult:
    return task_service.update_task(task_id, updates)


@router.delete(
    "/{task_id}",
    responses={
        **validation_error_response("Invalid task ID 'example'"),
        **not_found_response(ResourceType.TASK),
    },
)
def delete_task(
    task_id: str, task_service: TaskService = Depends(get_task_service)
) -> TaskDeleteResult:
    return task_service.delete_task(task_id)
