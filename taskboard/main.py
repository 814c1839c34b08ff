import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from taskboard.common.api_key import require_api_key
from taskboard.common.exceptions import (
    ERROR_STATUS_CODES,
    domain_error_handler,
    internal_error_response,
    request_validation_error_response,
    request_validation_exception_handler,
    unexpected_exception_handler,
)
from taskboard.common.opentelemetry import setup_opentelemetry
from taskboard.common.redis import create_redis_client
from taskboard.config import get_settings
from taskboard.healthcheck.router import router as health_router
from taskboard.realtime.broadcast import BroadcastChannel
from taskboard.realtime.publisher import SnapshotPublisher
from taskboard.realtime.router import router as realtime_router
from taskboard.tasks.router import router as tasks_router
from taskboard.tasks.store.backend import get_task_store_backend
from taskboard.users.router import router as users_router
from taskboard.users.store.backend import get_user_store_backend

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    redis_client = (
        create_redis_client(settings.DATABASE_URL)  # type: ignore[arg-type]
        if settings.STORE_BACKEND == "redis"
        else None
    )
    app.state.task_store = get_task_store_backend(redis_client, settings)
    app.state.user_store = get_user_store_backend(redis_client, settings)
    logger.info(f"Connected to the {settings.STORE_BACKEND} store")

    app.state.broadcast_channel = BroadcastChannel(
        delivery_timeout=settings.DELIVERY_TIMEOUT_SECONDS
    )
    app.state.snapshot_publisher = SnapshotPublisher(
        task_store=app.state.task_store,
        channel=app.state.broadcast_channel,
    )
    app.state.snapshot_publisher.start()

    yield

    await app.state.snapshot_publisher.stop()
    if redis_client:
        redis_client.close()


app = FastAPI(
    title=settings.API_NAME,
    summary=settings.API_SUMMARY,
    lifespan=lifespan,
    responses={
        **internal_error_response,
        **request_validation_error_response,
    },
    version=settings.TASKBOARD_VERSION,
)

if settings.OTEL_ENABLED:
    setup_opentelemetry(settings, app)

if settings.CORS_ENABLED:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["*"],
    )

app.add_exception_handler(RequestValidationError, request_validation_exception_handler)  # type: ignore[arg-type]
for exc_class in ERROR_STATUS_CODES:
    app.add_exception_handler(exc_class, domain_error_handler)
app.add_exception_handler(Exception, unexpected_exception_handler)


app.include_router(health_router)
app.include_router(tasks_router, dependencies=[Depends(require_api_key)])
app.include_router(users_router, dependencies=[Depends(require_api_key)])
app.include_router(realtime_router)
