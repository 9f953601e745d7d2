"""
FastAPI process hosting the telemetry runtime and the database monitor.

Business routes are registered by the API layer on top of this app; here only
``/health`` is defined.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from functools import partial
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from cotacoes.config import Settings
from cotacoes.db import AuditWriter, DatabaseMonitor, create_engine, create_session_factory, ensure_schema, ping
from cotacoes.logging import configure_logging, get_logger
from cotacoes.telemetry.bootstrap import start_telemetry
from cotacoes.telemetry.spans import set_span_attributes


def _lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logging_runtime = configure_logging(settings)
        telemetry_runtime = start_telemetry(settings)
        logger = get_logger("cotacoes.app")

        engine = create_engine(settings.database)
        telemetry_runtime.instrument_engine(engine)
        monitor = DatabaseMonitor(
            partial(ping, engine),
            partial(ensure_schema, engine),
            interval=settings.database.check_interval,
        )
        app.state.monitor = monitor
        app.state.audit = AuditWriter(create_session_factory(engine), monitor)

        logger.info(
            "Service started",
            service=settings.telemetry.service_name,
            version=settings.app.version,
            environment=settings.app.environment,
            port=settings.app.port,
        )
        logger.warning("APIs keep serving without the database")
        monitor.start()
        try:
            yield
        finally:
            await monitor.stop()
            await engine.dispose()
            telemetry_runtime.shutdown()
            logging_runtime.shutdown()

    return lifespan


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    if settings is None:
        from cotacoes.config import settings as default_settings

        settings = default_settings

    app = FastAPI(title=settings.telemetry.service_name, lifespan=_lifespan(settings))

    @app.get("/health")
    async def health(request: Request) -> dict[str, str]:
        monitor: Optional[DatabaseMonitor] = getattr(request.app.state, "monitor", None)
        database = "connected" if monitor is not None and monitor.is_connected else "disconnected"
        set_span_attributes({"endpoint": "/health", "database": database})
        return {"status": "ok", "api": "operational", "database": database}

    FastAPIInstrumentor.instrument_app(app)
    return app
