from taskboard.common.redis import RedisClient
from taskboard.config import Settings
from taskboard.users.store.base import UserStore
from taskboard.users.store.postgres.store import PostgresUserStore
from taskboard.users.store.redis.store import RedisUserStore


def get_user_store_backend(
    redis_client: RedisClient | None,
    settings: Settings,
) -> UserStore:
    if settings.STORE_BACKEND == "postgres":
        return PostgresUserStore(database_url=settings.DATABASE_URL)  # type: ignore[arg-type]
    elif settings.STORE_BACKEND == "redis":
        if redis_client is None:
            raise ValueError("The redis store backend requires a Redis client")
        return RedisUserStore(
            redis_client=redis_client,
            key_prefix=settings.USER_STORE_NAMESPACE,
        )
    else:
        raise ValueError(f"Unsupported store backend: {settings.STORE_BACKEND}")
