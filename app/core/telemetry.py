import os
from fastapi import FastAPI
from opentelemetry import trace, metrics
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.instrumentation.psycopg2 import Psycopg2Instrumentor
from loguru import logger

from app.core.config import get_settings

# Probes and the realtime socket stay out of request tracing
EXCLUDED_URLS = "/health,/messages/ws/.*"


def _uses_postgres(database_url: str) -> bool:
    return database_url.startswith(("postgresql", "postgres"))


def setup_telemetry(app: FastAPI):
    """
    Initialize OpenTelemetry tracing and metrics when an OTLP endpoint is configured.

    Uses OTEL_EXPORTER_OTLP_ENDPOINT, OTEL_SERVICE_NAME and OTEL_EXPORTER_OTLP_INSECURE from
    the environment and the ENVIRONMENT setting. The FastAPI app and SQLAlchemy are
    instrumented once; the psycopg2 driver only when the database is PostgreSQL.
    Without an endpoint telemetry stays disabled; setup failures are logged, not raised.

    Parameters:
        app (FastAPI): FastAPI application to instrument.
    """
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if not endpoint:
        logger.warning("No endpoint configured. Telemetry disabled.")
        return

    settings = get_settings()
    try:
        resource = Resource.create(
            {
                "service.name": os.getenv("OTEL_SERVICE_NAME", "volunteer-connect-api"),
                "deployment.environment": settings.ENVIRONMENT,
            }
        )

        insecure = os.getenv("OTEL_EXPORTER_OTLP_INSECURE", "false").lower() == "true"

        tracer_provider = TracerProvider(resource=resource)
        span_exporter = OTLPSpanExporter(endpoint=endpoint, insecure=insecure)
        tracer_provider.add_span_processor(BatchSpanProcessor(span_exporter))
        trace.set_tracer_provider(tracer_provider)

        metric_reader = PeriodicExportingMetricReader(
            OTLPMetricExporter(endpoint=endpoint, insecure=insecure)
        )
        metrics.set_meter_provider(
            MeterProvider(resource=resource, metric_readers=[metric_reader])
        )

        if not hasattr(setup_telemetry, "_instrumented"):
            FastAPIInstrumentor.instrument_app(app, excluded_urls=EXCLUDED_URLS)
            SQLAlchemyInstrumentor().instrument(enable_commenter=True)  # type: ignore
            if _uses_postgres(settings.DATABASE_URL):
                Psycopg2Instrumentor().instrument(  # type: ignore
                    enable_commenter=True, skip_dep_check=True
                )
            setup_telemetry._instrumented = True  # type: ignore

        logger.info("Traces & Metrics Active.")

    except Exception as e:
        logger.error(f"Traces & Metrics Setup Failed: {e}")
