from taskboard.common.redis import RedisClient
from taskboard.config import Settings
from taskboard.tasks.store.base import TaskStore
from taskboard.tasks.store.postgres.store import PostgresTaskStore
from taskboard.tasks.store.redis.store import RedisTaskStore


def get_task_store_backend(
    redis_client: RedisClient | None,
    settings: Settings,
) -> TaskStore:
    if settings.STORE_BACKEND == "postgres":
        return PostgresTaskStore(database_url=settings.DATABASE_URL)  # type: ignore[arg-type]
    elif settings.STORE_BACKEND == "redis":
        if redis_client is None:
            raise ValueError("The redis store backend requires a Redis client")
        return RedisTaskStore(
            redis_client=redis_client,
            key_prefix=settings.TASK_STORE_NAMESPACE,
        )
    else:
        raise ValueError(f"Unsupported store backend: {settings.STORE_BACKEND}")
