"""OpenTelemetry and logging configuration."""

import logging
import os
from typing import Any

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.botocore import BotocoreInstrumentor
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from pythonjsonlogger import jsonlogger

logger = logging.getLogger(__name__)


def get_service_resource() -> Resource:
    """Create OpenTelemetry resource with service identification.

    Returns:
        Resource with service name and environment attributes
    """
    service_name = os.getenv("OTEL_SERVICE_NAME", "order-svc")
    environment = os.getenv("ENVIRONMENT", "development")

    return Resource.create(
        {
            "service.name": service_name,
            "deployment.environment": environment,
        }
    )


def setup_tracing(resource: Resource, otlp_endpoint: str) -> None:
    """Configure OpenTelemetry tracing with an OTLP exporter.

    Args:
        resource: Service resource for trace identification
        otlp_endpoint: Collector base URL
    """
    # Create OTLP exporter
    exporter = OTLPSpanExporter(endpoint=f"{otlp_endpoint}/v1/traces")

    # Create tracer provider with batch processor
    provider = TracerProvider(resource=resource)
    processor = BatchSpanProcessor(exporter)
    provider.add_span_processor(processor)

    # Set as global tracer provider
    trace.set_tracer_provider(provider)

    logger.info(f"OpenTelemetry tracing configured with endpoint: {otlp_endpoint}")


def setup_metrics(resource: Resource, otlp_endpoint: str) -> None:
    """Configure OpenTelemetry metrics with a periodic OTLP exporter.

    Args:
        resource: Service resource for metric identification
        otlp_endpoint: Collector base URL
    """
    # Create OTLP metric exporter
    exporter = OTLPMetricExporter(endpoint=f"{otlp_endpoint}/v1/metrics")

    # Create meter provider with periodic reader
    reader = PeriodicExportingMetricReader(exporter, export_interval_millis=60000)
    provider = MeterProvider(resource=resource, metric_readers=[reader])

    # Set as global meter provider
    metrics.set_meter_provider(provider)

    logger.info(f"OpenTelemetry metrics configured with endpoint: {otlp_endpoint}")


def setup_observability(app: Any = None, enable_exporters: bool = True) -> None:
    """Initialize OpenTelemetry tracing, metrics and auto-instrumentation.

    Args:
        app: Optional FastAPI application to instrument
        enable_exporters: Whether to enable OTLP exporters (forced off when ENVIRONMENT=test)
    """
    # Exporters stay off in test environments
    if os.getenv("ENVIRONMENT", "development") == "test":
        enable_exporters = False

    # Create service resource
    resource = get_service_resource()

    if enable_exporters:
        otlp_endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4318")
        setup_tracing(resource, otlp_endpoint)
        setup_metrics(resource, otlp_endpoint)
    else:
        # Providers without exporters so spans and instruments are still valid
        trace.set_tracer_provider(TracerProvider(resource=resource))
        metrics.set_meter_provider(MeterProvider(resource=resource))

    # DynamoDB calls go through botocore
    BotocoreInstrumentor().instrument()

    # Instrument FastAPI if provided
    if app is not None:
        FastAPIInstrumentor.instrument_app(app)
        logger.info("FastAPI application instrumented")

    logger.info("OpenTelemetry observability fully configured")


def configure_logging(log_level: str = "INFO") -> None:
    """Configure structured JSON logging on the root logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    # Get log level from environment or use provided default
    level_str = os.getenv("LOG_LEVEL", log_level).upper()
    level = getattr(logging, level_str, logging.INFO)

    # Create JSON formatter
    formatter = jsonlogger.JsonFormatter(
        "%(asctime)s %(name)s %(levelname)s %(message)s",
        timestamp=True,
    )

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Add console handler with JSON formatting
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logger.info(f"Structured JSON logging configured at {level_str} level")
