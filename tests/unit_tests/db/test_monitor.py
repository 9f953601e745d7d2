"""
Database connectivity monitor unit tests.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from cotacoes.db import DatabaseMonitor


def scripted_probe(outcomes: list[bool]):
    """Probe that succeeds/fails following ``outcomes`` in order."""
    remaining = list(outcomes)

    async def probe() -> None:
        if not remaining.pop(0):
            raise ConnectionRefusedError("connection refused")

    return probe


class TestTransitions:
    @pytest.mark.asyncio
    async def test_probe_sequence(self, recording_logger) -> None:
        on_connect = AsyncMock()
        monitor = DatabaseMonitor(
            scripted_probe([False, False, True, True, False]),
            on_connect,
            logger=recording_logger,
        )

        states = []
        for _ in range(5):
            await monitor.check()
            states.append(monitor.is_connected)

        assert states == [False, False, True, True, False]
        on_connect.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_starts_disconnected(self) -> None:
        monitor = DatabaseMonitor(AsyncMock())
        assert monitor.is_connected is False

    @pytest.mark.asyncio
    async def test_transitions_logged_once_per_edge(self, recording_logger) -> None:
        monitor = DatabaseMonitor(
            scripted_probe([False, False, True, True, False, False, True]),
            logger=recording_logger,
        )

        for _ in range(7):
            await monitor.check()

        assert recording_logger.events() == [
            "Database unreachable",
            "Database connection established",
            "Database connection lost",
            "Database connection established",
        ]

    @pytest.mark.asyncio
    async def test_reconnect_runs_initialization_again(self, recording_logger) -> None:
        on_connect = AsyncMock()
        monitor = DatabaseMonitor(scripted_probe([True, False, True]), on_connect, logger=recording_logger)

        for _ in range(3):
            await monitor.check()

        assert on_connect.await_count == 2

    @pytest.mark.asyncio
    async def test_initialization_failure_keeps_connected(self, recording_logger) -> None:
        on_connect = AsyncMock(side_effect=RuntimeError("permission denied for schema public"))
        monitor = DatabaseMonitor(AsyncMock(), on_connect, logger=recording_logger)

        assert await monitor.check() is True

        assert monitor.is_connected is True
        assert recording_logger.events("error") == ["Database initialization failed"]

    @pytest.mark.asyncio
    async def test_check_returns_state(self, recording_logger) -> None:
        monitor = DatabaseMonitor(scripted_probe([False, True]), logger=recording_logger)

        assert await monitor.check() is False
        assert await monitor.check() is True


class TestLoop:
    @pytest.mark.asyncio
    async def test_probes_immediately_and_periodically(self, recording_logger) -> None:
        probe = AsyncMock()
        monitor = DatabaseMonitor(probe, interval=0.01, logger=recording_logger)

        monitor.start()
        await asyncio.sleep(0.05)
        await monitor.stop()

        assert probe.await_count >= 2
        assert monitor.is_connected is True
        assert not monitor.running
        assert "Database health check started" in recording_logger.events("info")

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self, recording_logger) -> None:
        monitor = DatabaseMonitor(AsyncMock(), interval=10, logger=recording_logger)

        first = monitor.start()
        second = monitor.start()
        await monitor.stop()

        assert first is second

    @pytest.mark.asyncio
    async def test_stop_without_start(self) -> None:
        await DatabaseMonitor(AsyncMock()).stop()
