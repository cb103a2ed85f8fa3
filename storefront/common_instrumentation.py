"""
OpenTelemetry tracing for the storefront API

Services open their own spans through ``trace.get_tracer(__name__)``; this
module only wires the provider, the exporter and the library instrumentors.
"""
from typing import Optional

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource, SERVICE_NAME, DEPLOYMENT_ENVIRONMENT
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
import logging

logger = logging.getLogger(__name__)

_provider: Optional[TracerProvider] = None


def setup_opentelemetry(service_name: str, otlp_endpoint: str, environment: str = "dev") -> TracerProvider:
    """
    Install a global tracer provider exporting spans over OTLP/gRPC

    Calling it twice returns the provider created the first time.
    """
    global _provider
    if _provider is not None:
        return _provider

    resource = Resource(attributes={
        SERVICE_NAME: service_name,
        DEPLOYMENT_ENVIRONMENT: environment,
    })
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
    )
    trace.set_tracer_provider(provider)
    _provider = provider

    logger.info(f"OpenTelemetry initialized for {service_name}, exporting to {otlp_endpoint}")
    return provider


def instrument_fastapi(app):
    """Instrument FastAPI application, skipping probe endpoints"""
    FastAPIInstrumentor.instrument_app(app, excluded_urls="health,ready")
    logger.info("FastAPI instrumented with OpenTelemetry")


def instrument_sqlalchemy(engine):
    """Instrument SQLAlchemy engine"""
    SQLAlchemyInstrumentor().instrument(engine=engine)
    logger.info("SQLAlchemy instrumented with OpenTelemetry")


def shutdown_opentelemetry():
    """Flush pending spans on shutdown"""
    global _provider
    if _provider is None:
        return
    _provider.shutdown()
    _provider = None
    logger.info("OpenTelemetry shut down")
