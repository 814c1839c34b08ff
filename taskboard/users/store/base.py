from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from taskboard.users.schemas import User


class UserStore(ABC):
    @abstractmethod
    def get_user_by_email(self, email: str) -> User | None:
        pass

    @abstractmethod
    def create_user(
        self, user_id: str, fields: dict[str, Any], timestamp: datetime
    ) -> User:
        """Raises ConflictError if the email is already taken."""
        pass
