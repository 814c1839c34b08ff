import logging
from typing import Any

from taskboard.common.current_datetime import get_current_datetime
from taskboard.common.exceptions import ConflictError, ResourceType, ValidationError
from taskboard.common.identifiers import generate_id, strip_identifier_fields
from taskboard.users.schemas import UserInsertResult
from taskboard.users.store.base import UserStore

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, *, user_store: UserStore):
        self.user_store = user_store

    def create_user(self, payload: dict[str, Any]) -> UserInsertResult:
        fields = strip_identifier_fields(payload)

        email, name = fields.get("email"), fields.get("name")
        if not isinstance(email, str) or not email.strip():
            raise ValidationError("Email and name are required")
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Email and name are required")

        if self.user_store.get_user_by_email(email) is not None:
            raise ConflictError(ResourceType.USER, email)

        user_id = generate_id()
        self.user_store.create_user(user_id, fields, get_current_datetime())
        logger.info(f"Created user '{user_id}'")

        return UserInsertResult(inserted_id=user_id)
