"""Audit — журнал событий (append-only, глобально упорядоченный)."""

from .event_log import CompositeEventLog, EventLogPort, InMemoryEventLog, LoggingEventLog

__all__ = [
    "EventLogPort",
    "InMemoryEventLog",
    "LoggingEventLog",
    "CompositeEventLog",
]
