"""Diagnostics and structured audit logging."""

from .audit import AuditEvent, JsonlAuditLogger, build_event, sanitize_arguments, utc_timestamp
from .console import configure_logging, resolve_level

__all__ = [
    "AuditEvent",
    "JsonlAuditLogger",
    "build_event",
    "configure_logging",
    "resolve_level",
    "sanitize_arguments",
    "utc_timestamp",
]
