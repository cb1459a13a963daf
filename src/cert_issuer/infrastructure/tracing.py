"""OpenTelemetry tracing for issuance runs.

Spans are exported over OTLP gRPC only when an endpoint is configured; a
one-shot run must call ``shutdown_tracing`` so batched spans are flushed.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Status, StatusCode

from cert_issuer.domain.errors import IssuanceError

_tracer: trace.Tracer | None = None
_provider: TracerProvider | None = None


def setup_tracing(service_name: str = "cert_issuer", otlp_endpoint: str | None = None) -> trace.Tracer:
    """Install a tracer provider for this process."""
    global _tracer, _provider
    _provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    if otlp_endpoint:
        _provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True)))

    trace.set_tracer_provider(_provider)
    _tracer = _provider.get_tracer(service_name)
    return _tracer


def shutdown_tracing() -> None:
    """Flush pending spans before the process exits."""
    if _provider is not None:
        _provider.shutdown()


def get_tracer() -> trace.Tracer:
    return _tracer or trace.get_tracer("cert_issuer")


@contextmanager
def trace_span(name: str, attributes: dict[str, Any] | None = None) -> Generator[trace.Span, None, None]:
    """Run a block inside a span, tagging issuance failures with their code."""
    with get_tracer().start_as_current_span(name, attributes=attributes) as span:
        try:
            yield span
        except IssuanceError as e:
            span.set_attribute("cert.error_code", e.code)
            span.set_status(Status(StatusCode.ERROR, e.message))
            raise
