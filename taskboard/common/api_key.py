import logging
import secrets
from fastapi import Depends, HTTPException, Security, status
from fastapi.security.api_key import APIKeyHeader

from taskboard.config import Settings, get_settings

logger = logging.getLogger(__name__)

api_key_header = APIKeyHeader(name="x-api-key", auto_error=False)


def _reject(detail: str) -> HTTPException:
    logger.warning(f"Rejected request: {detail}")
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def require_api_key(
    api_key: str | None = Security(api_key_header),
    settings: Settings = Depends(get_settings),
) -> None:
    """Guards the task and user routes when TASKBOARD_API_KEY is set. Open otherwise."""
    expected = settings.TASKBOARD_API_KEY
    if not expected:
        return

    if not api_key:
        raise _reject("API key is missing")

    if not secrets.compare_digest(api_key.encode(), expected.encode()):
        raise _reject("API key is invalid")
