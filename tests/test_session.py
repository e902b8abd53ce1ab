"""Tests for the tracker session's validated writes."""

from __future__ import annotations

import json

import pytest

from domain.config import TrackerConfig
from domain.errors import FormatError, ValidationError
from domain.events import AddPlayer, EventLog, LogMatch
from domain.session import EventLogStore, TrackerSession

FIXED_TIMESTAMP = "2026-01-01T12:00:00.000Z"


class MemoryStore:
    def __init__(self, log: EventLog = ()) -> None:
        self.log = log
        self.saves = 0

    def load(self) -> EventLog:
        return self.log

    def save(self, log: EventLog) -> None:
        self.log = log
        self.saves += 1


def _session(log: EventLog = ()) -> tuple[TrackerSession, MemoryStore]:
    store = MemoryStore(log)
    session = TrackerSession(store, TrackerConfig(), clock=lambda: FIXED_TIMESTAMP)
    session.load()
    return session, store


def test_memory_store_satisfies_protocol() -> None:
    assert isinstance(MemoryStore(), EventLogStore)


def test_load_reads_store() -> None:
    session, _ = _session((AddPlayer("A"),))
    assert session.events == (AddPlayer("A"),)
    assert session.view().player_names == ["A"]


def test_add_player_appends_and_saves() -> None:
    session, store = _session()
    event = session.add_player("  Alice  ", 1000)

    assert event == AddPlayer("Alice", 1000)
    assert store.log == (AddPlayer("Alice", 1000),)
    assert store.saves == 1


def test_add_player_defaults_to_configured_rating() -> None:
    session, store = _session()
    session.add_player("Bob")
    assert store.log == (AddPlayer("Bob", 800),)


@pytest.mark.parametrize(
    ("name", "rating", "message"),
    [
        ("", None, r"cannot be empty"),
        ("   ", None, r"cannot be empty"),
        ("ALICE", None, r"already exists"),
        ("Zed", 900, r"Starting rating must be one of \[600, 800, 1000\]"),
    ],
)
def test_add_player_rejects_invalid_input(name: str, rating: int | None, message: str) -> None:
    session, store = _session((AddPlayer("Alice"),))
    with pytest.raises(ValidationError, match=message):
        session.add_player(name, rating)
    assert store.log == (AddPlayer("Alice"),)
    assert store.saves == 0


def test_log_match_stamps_event_and_updates_view() -> None:
    session, store = _session((AddPlayer("A"), AddPlayer("B")))
    event = session.log_match("A", "B", "A")

    assert event == LogMatch("A", "B", "A", timestamp=FIXED_TIMESTAMP)
    assert store.log[-1] == event
    view = session.view()
    assert view.matches[0].timestamp == FIXED_TIMESTAMP
    assert view.get_player("A").rating == pytest.approx(840.0)  # type: ignore[union-attr]


@pytest.mark.parametrize(
    ("player1", "player2", "winner", "message"),
    [
        ("A", "", "A", r"complete all fields"),
        ("A", "B", "", r"complete all fields"),
        ("A", "A", "A", r"against themselves"),
        ("A", "Q", "A", r"Unknown player 'Q'"),
        ("A", "B", "C", r"Winner must be"),
    ],
)
def test_log_match_rejects_invalid_input(player1: str, player2: str, winner: str, message: str) -> None:
    session, store = _session((AddPlayer("A"), AddPlayer("B"), AddPlayer("C")))
    with pytest.raises(ValidationError, match=message):
        session.log_match(player1, player2, winner)
    assert store.saves == 0
    assert len(session.events) == 3


def test_log_match_accepts_draw() -> None:
    session, _ = _session((AddPlayer("A"), AddPlayer("B")))
    session.log_match("A", "B", "draw")
    assert session.view().head_to_head[("A", "B")].draws == 1


def test_import_replaces_log() -> None:
    session, store = _session((AddPlayer("Old"),))
    payload = json.dumps(
        [
            {"type": "ADD_PLAYER", "payload": {"name": "A", "elo": 600}},
            {"type": "ADD_PLAYER", "payload": {"name": "B"}},
            {"type": "LOG_MATCH", "payload": {"player1Name": "A", "player2Name": "B", "winner": "B"}},
        ]
    ).encode("utf-8")

    log = session.import_data(payload)

    assert len(log) == 3
    assert store.log == log
    assert session.view().player_names == ["A", "B"]


def test_failed_import_keeps_previous_log() -> None:
    session, store = _session((AddPlayer("Old"),))
    with pytest.raises(FormatError):
        session.import_data(b'{"not": "an array"}')
    assert session.events == (AddPlayer("Old"),)
    assert store.saves == 0


def test_export_import_round_trip_through_sessions() -> None:
    source, _ = _session()
    source.add_player("A", 1000)
    source.add_player("B", 600)
    source.log_match("A", "B", "B")
    source.log_match("B", "A", "draw")

    target, _ = _session()
    target.import_data(source.export_data())
    assert target.view() == source.view()


def test_reset_clears_log() -> None:
    session, store = _session((AddPlayer("A"), AddPlayer("B"), LogMatch("A", "B", "A")))
    session.reset()
    assert session.events == ()
    assert store.log == ()
    assert session.view().players == ()


def test_replace_rejects_non_events_without_saving() -> None:
    session, store = _session((AddPlayer("A"),))
    with pytest.raises(TypeError):
        session.replace([AddPlayer("B"), "not an event"])  # type: ignore[list-item]
    assert session.events == (AddPlayer("A"),)
    assert store.saves == 0
