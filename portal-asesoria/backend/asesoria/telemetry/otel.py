"""
OpenTelemetry (opcional):
- Si TELEMETRY_ENABLED=true y OTEL_EXPORTER_OTLP_ENDPOINT está definido,
  se inicializa la traza básica.
- No se envían respuestas ni datos del cliente; solo atributos genéricos.
"""
import logging
import os

log = logging.getLogger("asesoria.telemetry")


def setup_otel() -> bool:
    enabled = os.getenv("TELEMETRY_ENABLED", "false").lower() == "true"
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "")
    if not enabled or not endpoint:
        return False

    try:
        from opentelemetry import trace
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor

        resource = Resource.create({"service.name": "portal-asesoria-api"})
        provider = TracerProvider(resource=resource)
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
        trace.set_tracer_provider(provider)
    except Exception as e:
        # No romper la app si falla OTEL
        log.warning("OpenTelemetry no inicializado: %s", e)
        return False
    log.info("OpenTelemetry activo → %s", endpoint)
    return True
