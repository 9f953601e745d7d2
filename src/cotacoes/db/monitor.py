"""
Database connectivity monitor.

Polls the database on a fixed interval and keeps a single connected /
disconnected flag that request handlers read without awaiting anything.

States::

    Disconnected --probe ok--> Connected      (runs on_connect once per edge)
    Connected --probe failed--> Disconnected

The monitor is the only writer of the flag.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, Optional

from cotacoes.logging import get_logger

Probe = Callable[[], Awaitable[Any]]
OnConnect = Callable[[], Awaitable[Any]]

DEFAULT_INTERVAL = 5.0


class DatabaseMonitor:
    """
    Background connectivity check.

    Args:
        probe: Coroutine function that raises when the database is unavailable
        on_connect: Coroutine function run after each Disconnected -> Connected edge
        interval: Seconds between probes
        logger: Structured logger (default: module logger)
    """

    def __init__(
        self,
        probe: Probe,
        on_connect: Optional[OnConnect] = None,
        *,
        interval: float = DEFAULT_INTERVAL,
        logger: Any = None,
    ) -> None:
        self._probe = probe
        self._on_connect = on_connect
        self.interval = interval
        self._logger = logger or get_logger("cotacoes.db.monitor")
        self._connected = False
        self._failure_reported = False
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def check(self) -> bool:
        """Run one probe and apply the resulting transition. Never raises."""
        try:
            await self._probe()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self._on_failure(exc)
            return False

        if not self._connected:
            self._connected = True
            self._failure_reported = False
            self._logger.info("Database connection established")
            await self._run_on_connect()
        return True

    def _on_failure(self, exc: Exception) -> None:
        if self._connected:
            self._connected = False
            self._failure_reported = True
            self._logger.warning("Database connection lost", error=str(exc))
        elif not self._failure_reported:
            self._failure_reported = True
            self._logger.warning("Database unreachable", error=str(exc))

    async def _run_on_connect(self) -> None:
        if self._on_connect is None:
            return
        try:
            await self._on_connect()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self._logger.error("Database initialization failed", error=str(exc))

    async def run(self) -> None:
        """Probe now, then every ``interval`` seconds until cancelled."""
        await self.check()
        self._logger.info("Database health check started", interval_ms=int(self.interval * 1000))
        while True:
            await asyncio.sleep(self.interval)
            await self.check()

    def start(self) -> asyncio.Task[None]:
        if not self.running:
            self._task = asyncio.get_running_loop().create_task(self.run(), name="database-monitor")
        return self._task

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
