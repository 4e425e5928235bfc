import pytest
from unittest.mock import MagicMock, patch
from fastapi import FastAPI

from app.core.telemetry import setup_telemetry

OTEL_ENV = {"OTEL_EXPORTER_OTLP_ENDPOINT": "http://localhost:4317"}


@pytest.fixture(autouse=True)
def reset_instrumentation_flag():
    """setup_telemetry remembers that it instrumented once; forget it between tests."""
    if hasattr(setup_telemetry, "_instrumented"):
        del setup_telemetry._instrumented
    yield
    if hasattr(setup_telemetry, "_instrumented"):
        del setup_telemetry._instrumented


def _settings(database_url: str, environment: str = "staging"):
    settings = MagicMock()
    settings.DATABASE_URL = database_url
    settings.ENVIRONMENT = environment
    return settings


class TestSetupTelemetry:
    """Test the setup_telemetry function."""

    @patch.dict("os.environ", {}, clear=True)
    @patch("app.core.telemetry.logger")
    def test_no_endpoint(self, mock_logger):
        """Telemetry stays disabled without an OTLP endpoint."""
        setup_telemetry(FastAPI())

        mock_logger.warning.assert_called_once()
        assert "No endpoint configured" in str(mock_logger.warning.call_args)

    @patch.dict("os.environ", {**OTEL_ENV, "OTEL_SERVICE_NAME": "test-service"})
    @patch("app.core.telemetry.get_settings")
    @patch("app.core.telemetry.logger")
    @patch("app.core.telemetry.Resource")
    @patch("app.core.telemetry.TracerProvider")
    @patch("app.core.telemetry.OTLPSpanExporter")
    @patch("app.core.telemetry.OTLPMetricExporter")
    @patch("app.core.telemetry.PeriodicExportingMetricReader")
    @patch("app.core.telemetry.MeterProvider")
    @patch("app.core.telemetry.trace")
    @patch("app.core.telemetry.metrics")
    @patch("app.core.telemetry.FastAPIInstrumentor")
    @patch("app.core.telemetry.SQLAlchemyInstrumentor")
    @patch("app.core.telemetry.Psycopg2Instrumentor")
    def test_postgres_deployment_instrumented_once(
        self,
        mock_psycopg2,
        mock_sqlalchemy,
        mock_fastapi,
        mock_metrics,
        mock_trace,
        mock_meter_provider,
        mock_reader,
        mock_metric_exporter,
        mock_span_exporter,
        mock_tracer_provider,
        mock_resource,
        mock_logger,
        mock_get_settings,
    ):
        mock_get_settings.return_value = _settings("postgresql://db/app")
        app = FastAPI()

        setup_telemetry(app)
        setup_telemetry(app)

        attributes = mock_resource.create.call_args[0][0]
        assert attributes["service.name"] == "test-service"
        assert attributes["deployment.environment"] == "staging"
        mock_fastapi.instrument_app.assert_called_once()
        mock_sqlalchemy.return_value.instrument.assert_called_once()
        mock_psycopg2.return_value.instrument.assert_called_once()

    @patch.dict("os.environ", OTEL_ENV)
    @patch("app.core.telemetry.get_settings")
    @patch("app.core.telemetry.logger")
    @patch("app.core.telemetry.Resource")
    @patch("app.core.telemetry.TracerProvider")
    @patch("app.core.telemetry.OTLPSpanExporter")
    @patch("app.core.telemetry.OTLPMetricExporter")
    @patch("app.core.telemetry.PeriodicExportingMetricReader")
    @patch("app.core.telemetry.MeterProvider")
    @patch("app.core.telemetry.trace")
    @patch("app.core.telemetry.metrics")
    @patch("app.core.telemetry.FastAPIInstrumentor")
    @patch("app.core.telemetry.SQLAlchemyInstrumentor")
    @patch("app.core.telemetry.Psycopg2Instrumentor")
    def test_sqlite_skips_psycopg2(
        self,
        mock_psycopg2,
        mock_sqlalchemy,
        mock_fastapi,
        mock_metrics,
        mock_trace,
        mock_meter_provider,
        mock_reader,
        mock_metric_exporter,
        mock_span_exporter,
        mock_tracer_provider,
        mock_resource,
        mock_logger,
        mock_get_settings,
    ):
        mock_get_settings.return_value = _settings("sqlite:///./local.db")

        setup_telemetry(FastAPI())

        mock_psycopg2.return_value.instrument.assert_not_called()
        mock_sqlalchemy.return_value.instrument.assert_called_once()

    @patch.dict("os.environ", OTEL_ENV)
    @patch("app.core.telemetry.logger")
    @patch("app.core.telemetry.Resource")
    def test_setup_failure_is_logged(self, mock_resource, mock_logger):
        mock_resource.create.side_effect = RuntimeError("collector down")

        setup_telemetry(FastAPI())

        mock_logger.error.assert_called_once()
        assert "collector down" in str(mock_logger.error.call_args)
