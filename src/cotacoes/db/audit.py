"""
Fire-and-forget audit persistence, gated by the connectivity monitor.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

from sqlalchemy import insert, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from cotacoes.logging import get_logger
from cotacoes.models import Audit, Base

from .monitor import DatabaseMonitor

logger = get_logger(__name__)


async def ping(engine: AsyncEngine) -> None:
    """Connectivity probe: raises if ``SELECT 1`` fails."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def ensure_schema(engine: AsyncEngine) -> None:
    """Create the audit table if it does not exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Audit table created/verified")


class AuditWriter:
    """
    Writes request/response pairs to the ``audit`` table.

    Writes are skipped silently while the monitor reports the database as
    disconnected; nothing is queued or retried.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], monitor: DatabaseMonitor) -> None:
        self._session_factory = session_factory
        self._monitor = monitor
        self._pending: set[asyncio.Task[bool]] = set()

    async def save(self, endpoint: str, request_data: Any, response_data: Any) -> bool:
        """Insert one audit row. Returns whether a write was attempted and succeeded."""
        if not self._monitor.is_connected:
            return False
        try:
            async with self._session_factory() as session:
                await session.execute(
                    insert(Audit).values(
                        endpoint=endpoint,
                        request_data=request_data,
                        response_data=response_data,
                    )
                )
                await session.commit()
        except Exception as exc:
            logger.error("Audit write failed", endpoint=endpoint, error=str(exc))
            return False
        return True

    def record(self, endpoint: str, request_data: Any, response_data: Any) -> Optional[asyncio.Task[bool]]:
        """Schedule :meth:`save` without awaiting it."""
        if not self._monitor.is_connected:
            return None
        task = asyncio.get_running_loop().create_task(self.save(endpoint, request_data, response_data))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task
