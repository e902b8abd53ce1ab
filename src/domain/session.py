"""Tracker session: owns the event log and performs validated writes."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from typing import Protocol, runtime_checkable

from domain.config import TrackerConfig
from domain.errors import ValidationError
from domain.events import DRAW, AddPlayer, Event, EventLog, LogMatch
from domain.interchange import export_log, parse_import
from domain.state import MaterializedView, derive_state

logger = logging.getLogger(__name__)


@runtime_checkable
class EventLogStore(Protocol):
    """Persistence contract for the raw event log."""

    def load(self) -> EventLog: ...

    def save(self, log: EventLog) -> None: ...


def _utc_timestamp() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TrackerSession:
    """Single owner of the event log.

    Every write is a full read-modify-write: the new log is validated and saved
    before it replaces the in-memory copy, so a failed write leaves both untouched.
    """

    def __init__(
        self,
        store: EventLogStore,
        config: TrackerConfig | None = None,
        *,
        clock: Callable[[], str] = _utc_timestamp,
    ) -> None:
        self.store = store
        self.config = config or TrackerConfig()
        self._clock = clock
        self._log: EventLog = ()

    @property
    def events(self) -> EventLog:
        return self._log

    def load(self) -> EventLog:
        self._log = tuple(self.store.load())
        logger.debug("Loaded %d events", len(self._log))
        return self._log

    def save(self) -> None:
        self.store.save(self._log)

    def append(self, event: Event) -> None:
        self.replace((*self._log, event))

    def replace(self, log: Sequence[Event]) -> None:
        new_log = tuple(log)
        # Structural check before anything is persisted.
        derive_state(new_log, self.config.derivation())
        self.store.save(new_log)
        self._log = new_log

    def clear(self) -> None:
        self.replace(())
        logger.info("Event log cleared")

    def view(self) -> MaterializedView:
        return derive_state(self._log, self.config.derivation())

    def add_player(self, name: str, starting_rating: int | None = None) -> AddPlayer:
        name = name.strip()
        if not name:
            raise ValidationError("Player name cannot be empty.")

        folded = name.casefold()
        if any(existing.casefold() == folded for existing in self.view().player_names):
            raise ValidationError(f"A player named {name!r} already exists.")

        rating = self.config.default_starting_rating if starting_rating is None else starting_rating
        allowed = sorted(self.config.starting_ratings.values())
        if rating not in allowed:
            raise ValidationError(f"Starting rating must be one of {allowed}, got {rating}.")

        event = AddPlayer(name=name, starting_rating=rating)
        self.append(event)
        logger.info("Added player %s with starting rating %d", name, rating)
        return event

    def log_match(self, player1_name: str, player2_name: str, winner: str) -> LogMatch:
        if not player1_name or not player2_name or not winner:
            raise ValidationError("Please complete all fields for the match.")
        if player1_name == player2_name:
            raise ValidationError("A player cannot play against themselves.")

        known = set(self.view().player_names)
        for name in (player1_name, player2_name):
            if name not in known:
                raise ValidationError(f"Unknown player {name!r}.")
        if winner not in (player1_name, player2_name, DRAW):
            raise ValidationError(
                f"Winner must be {player1_name!r}, {player2_name!r} or {DRAW!r}, got {winner!r}."
            )

        event = LogMatch(
            player1_name=player1_name,
            player2_name=player2_name,
            winner=winner,
            timestamp=self._clock(),
        )
        self.append(event)
        logger.info("Logged match %s vs %s, winner=%s", player1_name, player2_name, winner)
        return event

    def import_data(self, data: bytes | str) -> EventLog:
        """Replace the whole log with an import; ``FormatError`` leaves it unchanged."""
        log = parse_import(data)
        self.replace(log)
        logger.info("Imported %d events", len(log))
        return log

    def export_data(self, *, legacy: bool = False) -> bytes:
        return export_log(self._log, legacy=legacy)

    def reset(self) -> None:
        self.clear()


__all__ = ["EventLogStore", "TrackerSession"]
