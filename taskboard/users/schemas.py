from typing import Any
from pydantic import BaseModel, ConfigDict


class User(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    email: str
    name: str


class UserInsertResult(BaseModel):
    acknowledged: bool = True
    inserted_id: str


def map_user(user_id: str, document: dict[str, Any]) -> User:
    return User(**{**document, "id": user_id})
