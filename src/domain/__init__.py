"""Ladder domain modules."""

from domain.config import DerivationConfig, TrackerConfig, load_tracker_config
from domain.errors import FormatError, TrackerError, ValidationError
from domain.events import DRAW, AddPlayer, Event, EventLog, LogMatch
from domain.state import HeadToHead, MatchRecord, MaterializedView, Player, derive_state

__all__ = [
    "DRAW",
    "AddPlayer",
    "DerivationConfig",
    "Event",
    "EventLog",
    "FormatError",
    "HeadToHead",
    "LogMatch",
    "MatchRecord",
    "MaterializedView",
    "Player",
    "TrackerConfig",
    "TrackerError",
    "ValidationError",
    "derive_state",
    "load_tracker_config",
]
