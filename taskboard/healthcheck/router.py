import logging
from typing import Any
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from taskboard.common.exceptions import response_example
from taskboard.config import Settings, get_settings
from taskboard.realtime.broadcast import BroadcastChannel
from taskboard.realtime.dependencies import get_broadcast_channel
from taskboard.tasks.dependencies import get_task_store
from taskboard.tasks.store.base import TaskStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Healthcheck"])

SERVER_MESSAGE = "Task Management server is running"


def check_store(task_store: TaskStore, backend: str) -> dict[str, Any]:
    try:
        task_store.ping()
    except Exception as e:
        logger.warning(f"Store healthcheck failed: {e}")
        return {"status": "error", "backend": backend, "message": str(e)}

    return {"status": "ok", "backend": backend}


@router.get(
    "/",
    responses=response_example(
        200,
        "Server status",
        {"message": SERVER_MESSAGE, "status": "OK", "version": "1.0.0"},
    ),
)
def root(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    return {
        "message": SERVER_MESSAGE,
        "status": "OK",
        "version": settings.TASKBOARD_VERSION,
    }


@router.get(
    "/healthcheck",
    responses=response_example(
        503,
        "Task store unreachable",
        {
            "api": {"status": "ok"},
            "store": {
                "status": "error",
                "backend": "postgres",
                "message": "Failed to reach the database: connection refused",
            },
            "realtime": {"status": "ok", "observers": 0},
        },
    ),
)
def healthcheck(
    settings: Settings = Depends(get_settings),
    task_store: TaskStore = Depends(get_task_store),
    channel: BroadcastChannel = Depends(get_broadcast_channel),
) -> JSONResponse:
    store_status = check_store(task_store, settings.STORE_BACKEND)
    status_code = (
        status.HTTP_200_OK
        if store_status["status"] == "ok"
        else status.HTTP_503_SERVICE_UNAVAILABLE
    )

    return JSONResponse(
        status_code=status_code,
        content={
            "api": {"status": "ok"},
            "store": store_status,
            "realtime": {"status": "ok", "observers": len(channel.registry)},
        },
    )
