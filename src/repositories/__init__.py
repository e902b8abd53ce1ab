"""Database repository helpers."""

from repositories.event_log_repository import (
    EventLogRepository,
    deserialize_log,
    serialize_log,
)

__all__ = [
    "EventLogRepository",
    "deserialize_log",
    "serialize_log",
]
