import logging
from typing import Any

from taskboard.common.current_datetime import get_current_datetime
from taskboard.common.exceptions import NotFoundError, ResourceType, ValidationError
from taskboard.common.identifiers import (
    generate_id,
    strip_identifier_fields,
    validate_id,
)
from taskboard.realtime.publisher import SnapshotPublisher
from taskboard.tasks.schemas import (
    Task,
    TaskDeleteResult,
    TaskInsertResult,
    TaskUpdateResult,
)
from taskboard.tasks.store.base import TaskStore

logger = logging.getLogger(__name__)

REQUIRED_TASK_FIELDS = ("title", "description", "email", "status")


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


class TaskService:
    def __init__(self, *, task_store: TaskStore, publisher: SnapshotPublisher):
        self.task_store = task_store
        self.publisher = publisher

    def _require_fields(self, fields: dict[str, Any]) -> None:
        missing = [name for name in REQUIRED_TASK_FIELDS if _is_blank(fields.get(name))]
        if missing:
            raise ValidationError(
                f"Title, description, email, and status are required (missing: {', '.join(missing)})"
            )

    def _reject_blank_fields(self, fields: dict[str, Any]) -> None:
        blank = [
            name
            for name in REQUIRED_TASK_FIELDS
            if name in fields and _is_blank(fields[name])
        ]
        if blank:
            raise ValidationError(f"Fields cannot be empty: {', '.join(blank)}")

    def list_tasks(self, email: str | None) -> list[Task]:
        if not email or not email.strip():
            raise ValidationError("Email is required")

        tasks = self.task_store.list_tasks(email=email)
        if not tasks:
            raise NotFoundError(
                ResourceType.TASK, email, message="No tasks found for this email"
            )

        return tasks

    def create_task(self, payload: dict[str, Any]) -> TaskInsertResult:
        fields = strip_identifier_fields(payload)
        self._require_fields(fields)

        task_id = generate_id()
        self.task_store.insert_task(task_id, fields, get_current_datetime())
        logger.info(f"Created task '{task_id}'")

        self.publisher.trigger()

        return TaskInsertResult(inserted_id=task_id)

    def replace_task(self, task_id: str, payload: dict[str, Any]) -> TaskUpdateResult:
        validate_id(ResourceType.TASK, task_id)
        fields = strip_identifier_fields(payload)
        self._require_fields(fields)

        result = self.task_store.replace_task(task_id, fields, get_current_datetime())
        if result.matched_count == 0:
            raise NotFoundError(ResourceType.TASK, task_id)

        self.publisher.trigger()

        return result

    def update_task(self, task_id: str, payload: dict[str, Any]) -> TaskUpdateResult:
        validate_id(ResourceType.TASK, task_id)
        fields = strip_identifier_fields(payload)
        if not fields:
            raise ValidationError("No fields to update")
        self._reject_blank_fields(fields)

        result = self.task_store.update_task(task_id, fields, get_current_datetime())
        if result.matched_count == 0:
            raise NotFoundError(ResourceType.TASK, task_id)

        self.publisher.trigger()

        return result

    def delete_task(self, task_id: str) -> TaskDeleteResult:
        validate_id(ResourceType.TASK, task_id)

        if self.task_store.delete_task(task_id) == 0:
            raise NotFoundError(ResourceType.TASK, task_id)

        logger.info(f"Deleted task '{task_id}'")
        self.publisher.trigger()

        return TaskDeleteResult(message="Task deleted successfully", deleted_id=task_id)
