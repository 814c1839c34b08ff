from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from taskboard.tasks.schemas import Task, TaskUpdateResult


class TaskStore(ABC):
    @abstractmethod
    def insert_task(
        self, task_id: str, fields: dict[str, Any], timestamp: datetime
    ) -> Task:
        pass

    @abstractmethod
    def list_tasks(self, email: str | None = None) -> list[Task]:
        """Tasks in creation order, optionally only those owned by `email`."""
        pass

    @abstractmethod
    def replace_task(
        self, task_id: str, fields: dict[str, Any], timestamp: datetime
    ) -> TaskUpdateResult:
        pass

    @abstractmethod
    def update_task(
        self, task_id: str, fields: dict[str, Any], timestamp: datetime
    ) -> TaskUpdateResult:
        pass

    @abstractmethod
    def delete_task(self, task_id: str) -> int:
        pass

    @abstractmethod
    def ping(self) -> None:
        pass
