"""JSON import/export of the event log.

Two layouts are understood on import:

* the canonical event array, ``[{"type": "ADD_PLAYER" | "LOG_MATCH", "payload": {...}}, ...]``
* the legacy lean match list, ``[{"player1Name", "player2Name", "winner", "timestamp"}, ...]``,
  which carries no player events. Players are inferred from the names that appear
  and the matches are replayed in ascending timestamp order.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from datetime import UTC, date, datetime
from typing import Any

from domain.errors import FormatError
from domain.events import (
    AddPlayer,
    Event,
    EventLog,
    LogMatch,
    events_from_dicts,
    events_to_dicts,
)

logger = logging.getLogger(__name__)

EXPORT_FILENAME_TEMPLATE = "elo-tracker-data-{day}.json"


def parse_import(data: bytes | str) -> EventLog:
    """Decode an import file into an event log.

    Raises ``FormatError`` when the input is not JSON or not a JSON array.
    """
    try:
        text = data.decode("utf-8") if isinstance(data, bytes) else data
        entries = json.loads(text)
    except (ValueError, RecursionError) as exc:
        raise FormatError(f"Import is not valid JSON: {exc}") from exc

    if not isinstance(entries, list):
        raise FormatError(f"Import must be a JSON array, got {type(entries).__name__}")

    if is_legacy_match_list(entries):
        logger.info("Importing legacy match list with %d entries", len(entries))
        return events_from_legacy_matches(entries)
    return events_from_dicts(entries)


def export_log(log: Sequence[Event], *, legacy: bool = False) -> bytes:
    """Pretty-printed JSON for ``log``; ``legacy`` writes the lean match list instead."""
    payload = legacy_matches_from_events(log) if legacy else events_to_dicts(log)
    return json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")


def export_filename(day: date) -> str:
    return EXPORT_FILENAME_TEMPLATE.format(day=day.isoformat())


def is_legacy_match_list(entries: Sequence[Any]) -> bool:
    """True when no entry is a typed event and at least one looks like a match."""
    mappings = [entry for entry in entries if isinstance(entry, Mapping)]
    if any("type" in entry for entry in mappings):
        return False
    return any(_legacy_names(entry) != ("", "") for entry in mappings)


def events_from_legacy_matches(entries: Sequence[Any]) -> EventLog:
    matches: list[LogMatch] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            logger.warning("Dropping non-object legacy entry at index %d: %r", index, entry)
            continue
        player1_name, player2_name = _legacy_names(entry)
        timestamp = entry.get("timestamp")
        matches.append(
            LogMatch(
                player1_name=player1_name,
                player2_name=player2_name,
                winner="" if entry.get("winner") is None else str(entry["winner"]),
                timestamp=None if timestamp is None else str(timestamp),
            )
        )

    # sorted() is stable, so matches with equal or missing timestamps keep file order.
    ordered = sorted(matches, key=lambda match: _timestamp_sort_key(match.timestamp))

    names: list[str] = []
    for match in ordered:
        for name in (match.player1_name, match.player2_name):
            if name and name not in names:
                names.append(name)

    events: list[Event] = [AddPlayer(name=name) for name in names]
    events.extend(ordered)
    return tuple(events)


def legacy_matches_from_events(log: Sequence[Event]) -> list[dict[str, Any]]:
    return [
        {
            "player1Name": event.player1_name,
            "player2Name": event.player2_name,
            "winner": event.winner,
            "timestamp": event.timestamp,
        }
        for event in log
        if isinstance(event, LogMatch)
    ]


def _legacy_names(entry: Mapping[str, Any]) -> tuple[str, str]:
    return (
        _legacy_name(entry, "player1Name", "player1"),
        _legacy_name(entry, "player2Name", "player2"),
    )


def _legacy_name(entry: Mapping[str, Any], flat_key: str, nested_key: str) -> str:
    value = entry.get(flat_key)
    if value is None:
        nested = entry.get(nested_key)
        if isinstance(nested, Mapping):
            value = nested.get("name")
    return "" if value is None else str(value)


def _timestamp_sort_key(timestamp: str | None) -> datetime:
    if not timestamp:
        return datetime.min
    try:
        parsed = datetime.fromisoformat(timestamp)
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(UTC).replace(tzinfo=None)
    except (ValueError, OverflowError):
        return datetime.min
    return parsed


__all__ = [
    "EXPORT_FILENAME_TEMPLATE",
    "events_from_legacy_matches",
    "export_filename",
    "export_log",
    "is_legacy_match_list",
    "legacy_matches_from_events",
    "parse_import",
]
