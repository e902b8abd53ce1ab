"""ORM models."""

from models.base import Base
from models.event_log import EventLogBlob

__all__ = [
    "Base",
    "EventLogBlob",
]
