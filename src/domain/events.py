"""Domain events that make up the tracker's append-only log."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeAlias

logger = logging.getLogger(__name__)

DRAW = "draw"


class EventType(str, Enum):
    """Wire names of the supported event types."""

    ADD_PLAYER = "ADD_PLAYER"
    LOG_MATCH = "LOG_MATCH"


@dataclass(frozen=True)
class AddPlayer:
    """Introduces a player; ``starting_rating`` falls back to the configured default."""

    name: str
    starting_rating: float | None = None


@dataclass(frozen=True)
class LogMatch:
    """Records one match result; ``winner`` is a participant name or ``"draw"``."""

    player1_name: str
    player2_name: str
    winner: str
    timestamp: str | None = None


Event: TypeAlias = AddPlayer | LogMatch
EventLog: TypeAlias = tuple[Event, ...]


def event_to_dict(event: Event) -> dict[str, Any]:
    """Serialize one event into its canonical ``{type, payload}`` form."""
    if isinstance(event, AddPlayer):
        payload: dict[str, Any] = {"name": event.name}
        if event.starting_rating is not None:
            payload["elo"] = event.starting_rating
        return {"type": EventType.ADD_PLAYER.value, "payload": payload}
    if isinstance(event, LogMatch):
        payload = {
            "player1Name": event.player1_name,
            "player2Name": event.player2_name,
            "winner": event.winner,
        }
        if event.timestamp is not None:
            payload["timestamp"] = event.timestamp
        return {"type": EventType.LOG_MATCH.value, "payload": payload}
    raise TypeError(f"Unsupported event type: {type(event)!r}")


def event_from_dict(raw: Any) -> Event | None:
    """Decode one canonical entry, returning None for entries that are not events.

    Missing optional fields get defaults; missing names decode to empty strings,
    which the replay then skips.
    """
    if not isinstance(raw, Mapping):
        return None

    event_type = raw.get("type")
    payload = raw.get("payload")
    if not isinstance(payload, Mapping):
        payload = {}

    if event_type == EventType.ADD_PLAYER.value:
        return AddPlayer(
            name=_as_text(payload.get("name")),
            starting_rating=_as_rating(payload.get("elo", payload.get("startingRating"))),
        )
    if event_type == EventType.LOG_MATCH.value:
        timestamp = payload.get("timestamp")
        return LogMatch(
            player1_name=_as_text(payload.get("player1Name")),
            player2_name=_as_text(payload.get("player2Name")),
            winner=_as_text(payload.get("winner")),
            timestamp=None if timestamp is None else str(timestamp),
        )
    return None


def events_to_dicts(log: Iterable[Event]) -> list[dict[str, Any]]:
    return [event_to_dict(event) for event in log]


def events_from_dicts(entries: Iterable[Any]) -> EventLog:
    """Decode canonical entries, dropping the ones that are not recognizable events."""
    events: list[Event] = []
    for index, raw in enumerate(entries):
        event = event_from_dict(raw)
        if event is None:
            logger.warning("Dropping unrecognized log entry at index %d: %r", index, raw)
            continue
        events.append(event)
    return tuple(events)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _as_rating(value: Any) -> float | None:
    """Stored rating as-is; integral values stay ints, non-finite ones are dropped."""
    if value is None or isinstance(value, bool):
        return None
    try:
        rating = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(rating):
        return None
    return int(rating) if rating.is_integer() else rating


__all__ = [
    "DRAW",
    "AddPlayer",
    "Event",
    "EventLog",
    "EventType",
    "LogMatch",
    "event_from_dict",
    "event_to_dict",
    "events_from_dicts",
    "events_to_dicts",
]
