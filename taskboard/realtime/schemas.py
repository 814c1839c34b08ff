from typing import Any
from pydantic import BaseModel, ConfigDict

from taskboard.tasks.schemas import Task

SNAPSHOT_EVENT = "TASK_UPDATED"


class Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    sequence: int
    tasks: tuple[Task, ...]

    def to_event(self) -> dict[str, Any]:
        return {
            "event": SNAPSHOT_EVENT,
            "sequence": self.sequence,
            "data": [task.model_dump(mode="json") for task in self.tasks],
        }
