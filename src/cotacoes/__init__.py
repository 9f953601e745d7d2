"""Telemetry bootstrap and database monitor for the cotacoes demo API."""

__version__ = "0.1.0"
