from typing import Any
from fastapi import APIRouter, Body, Depends, status

from taskboard.common.exceptions import (
    ResourceType,
    conflict_response,
    validation_error_response,
)
from taskboard.users.dependencies import get_user_service
from taskboard.users.schemas import UserInsertResult
from taskboard.users.service import UserService


router = APIRouter(
    prefix="/user",
    tags=["Users"],
)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses={
        **validation_error_response("Email and name are required"),
        **conflict_response(ResourceType.USER),
    },
)
def create_user(
    user: dict[str, Any] = Body(...),
    user_service: UserService = Depends(get_user_service),
) -> UserInsertResult:
    return user_service.create_user(user)
