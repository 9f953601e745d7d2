"""
Trace and metric start-up.

Installs the global tracer and meter providers, attaches the client library
instrumentations (outbound httpx, SQLAlchemy engine, process/runtime metrics)
and records the startup counter used to validate the metrics pipeline. Never
raises: a broken exporter configuration costs the signal, not the process.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from opentelemetry import metrics, trace
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.instrumentation.system_metrics import SystemMetricsInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.trace import TracerProvider

from cotacoes.logging import get_logger

from .providers import build_meter_provider, build_tracer_provider
from .resource import build_resource

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from cotacoes.config import Settings

logger = get_logger(__name__)


@dataclass
class TelemetryRuntime:
    tracer_provider: Optional[TracerProvider] = None
    meter_provider: Optional[MeterProvider] = None
    instrumentors: list[Any] = field(default_factory=list)

    def instrument_engine(self, engine: AsyncEngine) -> None:
        """Emit client spans for queries on ``engine``. No-op when tracing is off."""
        if self.tracer_provider is None:
            return
        try:
            instrumentor = SQLAlchemyInstrumentor()
            instrumentor.instrument(engine=engine.sync_engine, tracer_provider=self.tracer_provider)
            self.instrumentors.append(instrumentor)
        except Exception as exc:
            logger.warning("SQLAlchemy instrumentation not initialized", error=str(exc))

    def shutdown(self) -> None:
        """Detach instrumentations, then flush and stop both providers. Best effort."""
        for instrumentor in reversed(self.instrumentors):
            try:
                instrumentor.uninstrument()
            except Exception as exc:
                logger.warning("Instrumentation removal failed", error=str(exc))
        self.instrumentors.clear()

        for provider in (self.tracer_provider, self.meter_provider):
            if provider is None:
                continue
            try:
                provider.shutdown()
            except Exception as exc:
                logger.warning("Telemetry provider shutdown failed", error=str(exc))


def record_startup(settings: Settings, meter_provider: MeterProvider) -> None:
    meter = meter_provider.get_meter("app-metrics")
    counter = meter.create_counter("app.startup", description="Startup counter to validate metrics export")
    attributes = {
        "service.name": settings.telemetry.service_name,
        "deployment.environment": settings.app.environment,
        "service.version": settings.app.version,
    }
    counter.add(1, {k: v for k, v in attributes.items() if v is not None})


def _start_tracing(settings: Settings, runtime: TelemetryRuntime, resource) -> None:
    try:
        runtime.tracer_provider = build_tracer_provider(settings.telemetry, resource=resource)
        trace.set_tracer_provider(runtime.tracer_provider)
    except Exception as exc:
        runtime.tracer_provider = None
        logger.warning("OTLP traces not initialized", error=str(exc))
        return

    try:
        instrumentor = HTTPXClientInstrumentor()
        instrumentor.instrument(tracer_provider=runtime.tracer_provider)
        runtime.instrumentors.append(instrumentor)
    except Exception as exc:
        logger.warning("httpx instrumentation not initialized", error=str(exc))


def _start_metrics(settings: Settings, runtime: TelemetryRuntime, resource) -> None:
    try:
        runtime.meter_provider = build_meter_provider(settings.telemetry, resource=resource)
        metrics.set_meter_provider(runtime.meter_provider)
        record_startup(settings, runtime.meter_provider)
    except Exception as exc:
        logger.warning("OTLP metrics not initialized", error=str(exc))
        return

    try:
        instrumentor = SystemMetricsInstrumentor()
        instrumentor.instrument(meter_provider=runtime.meter_provider)
        runtime.instrumentors.append(instrumentor)
    except Exception as exc:
        logger.warning("Runtime metrics not initialized", error=str(exc))


def start_telemetry(settings: Settings) -> TelemetryRuntime:
    """Install global tracer/meter providers according to the OTEL_* selectors."""
    runtime = TelemetryRuntime()
    telemetry = settings.telemetry
    try:
        resource = build_resource(telemetry)
    except Exception as exc:
        logger.warning("OTLP resource not initialized", error=str(exc))
        return runtime

    if telemetry.traces_enabled:
        _start_tracing(settings, runtime, resource)
    if telemetry.metrics_enabled:
        _start_metrics(settings, runtime, resource)
    return runtime
