import logging
from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource, SERVICE_NAME, SERVICE_VERSION
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor  # type: ignore
from opentelemetry.instrumentation.redis import RedisInstrumentor  # type: ignore
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor  # type: ignore

from taskboard.config import Settings

logger = logging.getLogger(__name__)


def setup_opentelemetry(settings: Settings, app: FastAPI) -> None:
    """Export traces over OTLP/HTTP for the API and the configured store backend."""
    resource = Resource(
        attributes={
            SERVICE_NAME: settings.OTEL_SERVICE_NAME,
            SERVICE_VERSION: settings.TASKBOARD_VERSION,
        }
    )
    trace_provider = TracerProvider(resource=resource)
    trace_provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter()))
    trace.set_tracer_provider(trace_provider)

    # Healthcheck polling is kept out of traces
    FastAPIInstrumentor.instrument_app(app, excluded_urls="healthcheck")  # type: ignore

    if settings.STORE_BACKEND == "redis":
        RedisInstrumentor().instrument()
    else:
        SQLAlchemyInstrumentor().instrument()

    logger.info(
        f"Tracing enabled for '{settings.OTEL_SERVICE_NAME}' "
        f"({settings.STORE_BACKEND} store)"
    )
