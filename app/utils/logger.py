import logging
import sys
import os
from types import FrameType
from loguru import logger
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry._logs import set_logger_provider

# Standard-library loggers whose handlers are replaced by the Loguru bridge
HIJACKED_LOGGERS = (
    "uvicorn",
    "uvicorn.error",
    "uvicorn.access",
    "gunicorn.error",
    "gunicorn.access",
    "fastapi",
    "sqlalchemy.engine",
)

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> <level>{level}</level>: "
    "<cyan>[{name}:{line}]</cyan> - <level>{message}</level>"
)


class InterceptHandler(logging.Handler):
    """
    Redirects standard logging to Loguru.
    Skips OpenTelemetry's own records so the OTel sink cannot feed itself.
    """

    def emit(self, record: logging.LogRecord) -> None:
        if record.name.startswith("opentelemetry"):
            return

        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame: FrameType | None = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def _setup_otel_sink(endpoint: str) -> None:
    resource = Resource.create(
        {
            "service.name": os.getenv("OTEL_SERVICE_NAME", "volunteer-connect-api"),
            "deployment.environment": os.getenv("DEPLOYMENT_ENV", "production"),
        }
    )

    logger_provider = LoggerProvider(resource=resource)
    set_logger_provider(logger_provider)

    insecure = os.getenv("OTEL_EXPORTER_OTLP_INSECURE", "false").lower() == "true"
    exporter = OTLPLogExporter(endpoint=endpoint, insecure=insecure)
    logger_provider.add_log_record_processor(BatchLogRecordProcessor(exporter))

    otel_handler = LoggingHandler(level=logging.INFO, logger_provider=logger_provider)
    logger.add(otel_handler, level="INFO", serialize=True)


def setup_logging(level: str = "INFO"):
    """
    Route all logging through Loguru.

    Standard-library handlers of the web server, FastAPI and SQLAlchemy are replaced by
    `InterceptHandler`, a colored stderr sink is installed, and when
    OTEL_EXPORTER_OTLP_ENDPOINT is set records are also exported over OTLP. An OTLP
    setup failure is printed to stderr and never stops the application.

    Returns:
        The configured Loguru logger.
    """
    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(level)

    for name in HIJACKED_LOGGERS:
        log = logging.getLogger(name)
        log.handlers = []
        log.propagate = False
        log.addHandler(InterceptHandler())

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format=CONSOLE_FORMAT,
        colorize=True,
        enqueue=True,  # Async safety
    )

    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if endpoint:
        try:
            _setup_otel_sink(endpoint)
            logger.info("Logging (Loguru Sink) Active.")
        except Exception as e:
            print(f"Log Setup Failed: {e}", file=sys.stderr)

    return logger
