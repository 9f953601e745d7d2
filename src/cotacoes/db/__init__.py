from .audit import AuditWriter, ensure_schema, ping
from .monitor import DatabaseMonitor
from .session import create_engine, create_session_factory

__all__ = ["AuditWriter", "DatabaseMonitor", "create_engine", "create_session_factory", "ensure_schema", "ping"]
