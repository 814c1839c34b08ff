import json
from datetime import datetime
from typing import Any
from redis.exceptions import RedisError

from taskboard.common.decorators import raise_storage_error
from taskboard.common.exceptions import ConflictError, ResourceType
from taskboard.common.redis import RedisClient
from taskboard.users.schemas import User, map_user
from taskboard.users.store.base import UserStore


class RedisUserStore(UserStore):
    def __init__(self, *, redis_client: RedisClient, key_prefix: str):
        self.client = redis_client
        self.key_prefix = key_prefix

    def _get_user_key(self, user_id: str) -> str:
        return f"{self.key_prefix}:{user_id}"

    def _get_email_key(self, email: str) -> str:
        return f"{self.key_prefix}:email:{email}"

    @raise_storage_error("fetch user", RedisError)
    def get_user_by_email(self, email: str) -> User | None:
        user_id = self.client.get(self._get_email_key(email))
        if user_id is None:
            return None

        document = self.client.get(self._get_user_key(user_id))
        if document is None:
            return None

        return map_user(user_id, json.loads(document))

    @raise_storage_error("create user", RedisError)
    def create_user(
        self, user_id: str, fields: dict[str, Any], timestamp: datetime
    ) -> User:
        # The email key is claimed first so concurrent creates cannot both succeed
        claimed = self.client.set(self._get_email_key(fields["email"]), user_id, nx=True)
        if not claimed:
            raise ConflictError(ResourceType.USER, fields["email"])

        self.client.set(self._get_user_key(user_id), json.dumps(fields))

        return map_user(user_id, fields)
