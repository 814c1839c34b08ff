import json
from datetime import datetime
from typing import Any
from redis.exceptions import RedisError

from taskboard.common.decorators import raise_storage_error
from taskboard.common.redis import RedisClient
from taskboard.tasks.schemas import Task, TaskUpdateResult, map_task
from taskboard.tasks.store.base import TaskStore


class RedisTaskStore(TaskStore):
    """Tasks are JSON documents; sorted sets scored by creation time keep them ordered."""

    def __init__(self, *, redis_client: RedisClient, key_prefix: str):
        self.client = redis_client
        self.key_prefix = key_prefix
        self.index_key = f"{key_prefix}:index"

    def _get_task_key(self, task_id: str) -> str:
        return f"{self.key_prefix}:{task_id}"

    def _get_email_index_key(self, email: str) -> str:
        return f"{self.key_prefix}:email:{email}"

    def _get_document(self, task_id: str) -> dict[str, Any] | None:
        raw_document = self.client.get(self._get_task_key(task_id))
        if raw_document is None:
            return None
        return json.loads(raw_document)

    def _write_document(
        self,
        task_id: str,
        current: dict[str, Any],
        document: dict[str, Any],
        timestamp: datetime,
    ) -> TaskUpdateResult:
        if document == current:
            return TaskUpdateResult(matched_count=1, modified_count=0)

        pipeline = self.client.pipeline()
        pipeline.set(self._get_task_key(task_id), json.dumps(document))

        old_email = current.get("email")
        new_email = document.get("email")
        if old_email != new_email:
            score = self.client.zscore(self.index_key, task_id) or timestamp.timestamp()
            if old_email:
                pipeline.zrem(self._get_email_index_key(old_email), task_id)
            if new_email:
                pipeline.zadd(self._get_email_index_key(new_email), {task_id: score})

        pipeline.execute()

        return TaskUpdateResult(matched_count=1, modified_count=1)

    @raise_storage_error("insert task", RedisError)
    def insert_task(
        self, task_id: str, fields: dict[str, Any], timestamp: datetime
    ) -> Task:
        score = timestamp.timestamp()

        pipeline = self.client.pipeline()
        pipeline.set(self._get_task_key(task_id), json.dumps(fields))
        pipeline.zadd(self.index_key, {task_id: score})
        pipeline.zadd(self._get_email_index_key(fields["email"]), {task_id: score})
        pipeline.execute()

        return map_task(task_id, fields)

    @raise_storage_error("fetch tasks", RedisError)
    def list_tasks(self, email: str | None = None) -> list[Task]:
        index_key = self._get_email_index_key(email) if email else self.index_key
        task_ids: list[str] = self.client.zrange(index_key, 0, -1)
        if not task_ids:
            return []

        documents = self.client.mget([self._get_task_key(task_id) for task_id in task_ids])

        # Skips ids whose document was deleted between the two reads
        return [
            map_task(task_id, json.loads(document))
            for task_id, document in zip(task_ids, documents)
            if document is not None
        ]

    @raise_storage_error("replace task", RedisError)
    def replace_task(
        self, task_id: str, fields: dict[str, Any], timestamp: datetime
    ) -> TaskUpdateResult:
        current = self._get_document(task_id)
        if current is None:
            return TaskUpdateResult(matched_count=0, modified_count=0)

        return self._write_document(task_id, current, dict(fields), timestamp)

    @raise_storage_error("update task", RedisError)
    def update_task(
        self, task_id: str, fields: dict[str, Any], timestamp: datetime
    ) -> TaskUpdateResult:
        current = self._get_document(task_id)
        if current is None:
            return TaskUpdateResult(matched_count=0, modified_count=0)

        return self._write_document(task_id, current, {**current, **fields}, timestamp)

    @raise_storage_error("delete task", RedisError)
    def delete_task(self, task_id: str) -> int:
        current = self._get_document(task_id)
        if current is None:
            return 0

        pipeline = self.client.pipeline()
        pipeline.delete(self._get_task_key(task_id))
        pipeline.zrem(self.index_key, task_id)
        if current.get("email"):
            pipeline.zrem(self._get_email_index_key(current["email"]), task_id)
        deleted, *_ = pipeline.execute()

        return deleted

    @raise_storage_error("reach Redis", RedisError)
    def ping(self) -> None:
        self.client.ping()
