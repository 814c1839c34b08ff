from enum import Enum
import logging
from typing import Any
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ResourceType(str, Enum):
    TASK = "Task"
    USER = "User"


# Exceptions
class ValidationError(Exception):
    """A request body or query parameter failed a business rule."""


class InvalidIdentifierError(Exception):
    def __init__(self, resource_type: ResourceType, identifier: str):
        self.resource_type = resource_type.value
        self.identifier = identifier
        super().__init__(f"Invalid {self.resource_type.lower()} ID '{identifier}'")


class NotFoundError(Exception):
    def __init__(
        self, resource_type: ResourceType, identifier: str, message: str | None = None
    ):
        self.resource_type = resource_type.value
        self.identifier = identifier
        super().__init__(message or f"{self.resource_type} '{identifier}' not found")


class ConflictError(Exception):
    def __init__(self, resource_type: ResourceType, identifier: str):
        self.resource_type = resource_type.value
        self.identifier = identifier
        super().__init__(f"{self.resource_type} '{identifier}' already exists")


class StorageError(Exception):
    """The task database could not complete a read or write."""


class DeliveryError(Exception):
    def __init__(self, observer_id: str, reason: str):
        self.observer_id = observer_id
        self.reason = reason
        super().__init__(f"Failed to deliver snapshot to observer '{observer_id}': {reason}")


ERROR_STATUS_CODES: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    InvalidIdentifierError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


# Exception handlers
def domain_error_handler(request: Request, exc: Exception) -> JSONResponse:
    status_code = next(
        code for cls, code in ERROR_STATUS_CODES.items() if isinstance(exc, cls)
    )
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc}")

    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def unexpected_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred"},
    )


def _format_location(loc: tuple[Any, ...]) -> str:
    """("body", "tags", 0) -> "body.tags[0]" """
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {**error, "loc": _format_location(tuple(error["loc"]))} for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": "Validation error", "errors": errors},
    )


# Response definitions for OpenAPI documentation
ResponseDict = dict[int | str, dict[str, Any]]


def response_example(status_code: int, description: str, example: Any) -> ResponseDict:
    return {
        status_code: {
            "description": description,
            "content": {"application/json": {"example": example}},
        }
    }


def validation_error_response(example: str) -> ResponseDict:
    return response_example(400, "Invalid request", {"detail": example})


def not_found_response(resource_type: ResourceType) -> ResponseDict:
    name = resource_type.value
    return response_example(
        404, f"{name} not found", {"detail": f"{name} 'example' not found"}
    )


def conflict_response(resource_type: ResourceType) -> ResponseDict:
    name = resource_type.value
    return response_example(
        409, f"{name} already exists", {"detail": f"{name} 'example' already exists"}
    )


internal_error_response = response_example(
    500, "Internal server error", {"detail": "An unexpected error occurred"}
)

request_validation_error_response = response_example(
    422,
    "Validation error",
    {
        "detail": "Validation error",
        "errors": [
            {"type": "dict_type", "loc": "body", "msg": "Input should be a valid dictionary"}
        ],
    },
)
