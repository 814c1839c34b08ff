from functools import wraps
from typing import Any, Callable, TypeVar

from taskboard.common.exceptions import StorageError

F = TypeVar("F", bound=Callable[..., Any])


def raise_storage_error(action: str, *errors: type[Exception]):
    """Re-raise store client errors as StorageError with a readable message."""

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            try:
                return func(*args, **kwargs)
            except errors as e:
                raise StorageError(f"Failed to {action}: {e}") from e

        return wrapper  # type: ignore

    return decorator
