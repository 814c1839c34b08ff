from fastapi import Depends, Request

from taskboard.users.service import UserService
from taskboard.users.store.base import UserStore


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store


def get_user_service(
    user_store: UserStore = Depends(get_user_store),
) -> UserService:
    return UserService(user_store=user_store)
