from typing import Any
from pydantic import BaseModel, ConfigDict


class Task(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    title: str
    description: str
    email: str
    status: str


class TaskInsertResult(BaseModel):
    acknowledged: bool = True
    inserted_id: str


class TaskUpdateResult(BaseModel):
    acknowledged: bool = True
    matched_count: int
    modified_count: int


class TaskDeleteResult(BaseModel):
    message: str
    deleted_id: str


def map_task(task_id: str, document: dict[str, Any]) -> Task:
    return Task(**{**document, "id": task_id})
