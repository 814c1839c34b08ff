from redis import Redis
from redis.exceptions import RedisError
from typing import TYPE_CHECKING

from taskboard.common.exceptions import StorageError


RedisClient = Redis
if TYPE_CHECKING:
    RedisClient = Redis[str]  # type: ignore


def create_redis_client(
    database_url: str, *, health_check_interval: int = 30
) -> RedisClient:
    """Connect to the task database and fail fast when it is unreachable."""
    redis_client = Redis.from_url(
        database_url,
        decode_responses=True,
        health_check_interval=health_check_interval,
    )

    try:
        redis_client.ping()
    except RedisError as e:
        redis_client.close()
        raise StorageError(f"Failed to connect to the task database: {e}") from e

    return redis_client
