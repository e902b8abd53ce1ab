"""Replay the event log into the materialized ladder view."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace

from domain.config import DerivationConfig
from domain.elo.calculator import compute_match_update, round_half_up
from domain.events import DRAW, AddPlayer, LogMatch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Player:
    name: str
    rating: float
    matches_played: int
    winstreak: int
    rating_history: tuple[float, ...]


@dataclass(frozen=True)
class MatchSide:
    name: str
    old_rating: float
    new_rating: float
    change: int


@dataclass(frozen=True)
class HeadToHead:
    """Tallies between two players; ``first``/``second`` are in lexicographic order."""

    first: str
    second: str
    first_wins: int = 0
    second_wins: int = 0
    draws: int = 0

    @property
    def key(self) -> tuple[str, str]:
        return (self.first, self.second)

    @property
    def decisive_matches(self) -> int:
        return self.first_wins + self.second_wins

    @property
    def total_matches(self) -> int:
        return self.decisive_matches + self.draws

    def wins_for(self, name: str) -> int:
        if name == self.first:
            return self.first_wins
        if name == self.second:
            return self.second_wins
        raise KeyError(name)

    def oriented(self, name: str) -> tuple[str, str, int, int, int]:
        """Return ``(name, opponent, name_wins, opponent_wins, draws)``."""
        opponent = self.second if name == self.first else self.first
        return (name, opponent, self.wins_for(name), self.wins_for(opponent), self.draws)

    def with_result(self, winner: str) -> HeadToHead:
        if winner == self.first:
            return replace(self, first_wins=self.first_wins + 1)
        if winner == self.second:
            return replace(self, second_wins=self.second_wins + 1)
        return replace(self, draws=self.draws + 1)


@dataclass(frozen=True)
class MatchRecord:
    """One replayed match with both sides' ratings before and after.

    ``head_to_head`` is the pair's running tally including this match.
    """

    player1: MatchSide
    player2: MatchSide
    winner: str
    timestamp: str | None = None
    head_to_head: HeadToHead | None = None

    def involves(self, name: str) -> bool:
        return name in (self.player1.name, self.player2.name)

    @property
    def is_draw(self) -> bool:
        return self.winner not in (self.player1.name, self.player2.name)


@dataclass(frozen=True)
class MaterializedView:
    players: tuple[Player, ...] = ()
    matches: tuple[MatchRecord, ...] = ()
    all_players_by_matches: tuple[Player, ...] = ()
    ranked_by_rating: tuple[Player, ...] = ()
    ranked_by_matches: tuple[Player, ...] = ()
    other_by_matches: tuple[Player, ...] = ()
    head_to_head: Mapping[tuple[str, str], HeadToHead] = field(default_factory=dict)

    @property
    def player_names(self) -> list[str]:
        return [player.name for player in self.all_players_by_matches]

    def get_player(self, name: str) -> Player | None:
        for player in self.players:
            if player.name == name:
                return player
        return None


@dataclass
class _PlayerState:
    name: str
    rating: float
    matches_played: int = 0
    history: list[float] = field(default_factory=list)


def head_to_head_key(name_a: str, name_b: str) -> tuple[str, str]:
    """Order-independent key for a pair of players."""
    return (name_a, name_b) if name_a <= name_b else (name_b, name_a)


def score_for_player1(match: LogMatch) -> float:
    if match.winner == match.player1_name:
        return 1.0
    if match.winner == match.player2_name:
        return 0.0
    return 0.5


def derive_state(
    log: Sequence[AddPlayer | LogMatch],
    config: DerivationConfig = DerivationConfig(),
) -> MaterializedView:
    """Replay ``log`` in order and build the complete view.

    Content problems never raise: matches naming an unknown player are skipped,
    duplicate players are ignored, and missing starting ratings use the default.
    Only an element that is not an event at all raises ``TypeError``.
    """
    players: dict[str, _PlayerState] = {}
    folded_names: set[str] = set()
    matches: list[MatchRecord] = []
    tallies: dict[tuple[str, str], HeadToHead] = {}

    for index, event in enumerate(log):
        if isinstance(event, AddPlayer):
            _apply_add_player(event, config, players, folded_names)
        elif isinstance(event, LogMatch):
            record = _apply_log_match(event, config, players)
            if record is None:
                logger.debug("Skipping match at index %d: %r", index, event)
                continue
            matches.append(replace(record, head_to_head=_record_result(tallies, record)))
        else:
            raise TypeError(f"Unsupported event at index {index}: {type(event)!r}")

    streaks = _compute_winstreaks(players, matches)
    snapshots = tuple(
        Player(
            name=state.name,
            rating=state.rating,
            matches_played=state.matches_played,
            winstreak=streaks[state.name],
            rating_history=tuple(state.history),
        )
        for state in players.values()
    )

    all_by_matches = tuple(sorted(snapshots, key=lambda player: -player.matches_played))
    ranked_by_matches = tuple(
        player for player in all_by_matches if player.matches_played >= config.ranking_min_matches
    )
    other_by_matches = tuple(
        player for player in all_by_matches if player.matches_played < config.ranking_min_matches
    )
    ranked_by_rating = tuple(sorted(ranked_by_matches, key=lambda player: -player.rating))

    return MaterializedView(
        players=snapshots,
        matches=tuple(matches),
        all_players_by_matches=all_by_matches,
        ranked_by_rating=ranked_by_rating,
        ranked_by_matches=ranked_by_matches,
        other_by_matches=other_by_matches,
        head_to_head=dict(sorted(tallies.items())),
    )


def build_head_to_head(matches: Sequence[MatchRecord]) -> dict[tuple[str, str], HeadToHead]:
    """Aggregate wins and draws per unordered player pair, keyed in sorted order."""
    tallies: dict[tuple[str, str], HeadToHead] = {}
    for match in matches:
        _record_result(tallies, match)
    return dict(sorted(tallies.items()))


def _record_result(tallies: dict[tuple[str, str], HeadToHead], match: MatchRecord) -> HeadToHead:
    first, second = head_to_head_key(match.player1.name, match.player2.name)
    current = tallies.get((first, second)) or HeadToHead(first=first, second=second)
    tallies[(first, second)] = current.with_result(match.winner)
    return tallies[(first, second)]


def _apply_add_player(
    event: AddPlayer,
    config: DerivationConfig,
    players: dict[str, _PlayerState],
    folded_names: set[str],
) -> None:
    if not event.name:
        return
    folded = event.name.casefold()
    if folded in folded_names:
        return

    folded_names.add(folded)
    players[event.name] = _PlayerState(
        name=event.name,
        rating=float(event.starting_rating or config.default_starting_rating),
    )


def _apply_log_match(
    event: LogMatch,
    config: DerivationConfig,
    players: dict[str, _PlayerState],
) -> MatchRecord | None:
    player1 = players.get(event.player1_name)
    player2 = players.get(event.player2_name)
    if player1 is None or player2 is None or player1 is player2:
        return None

    if event.winner not in (event.player1_name, event.player2_name, DRAW):
        logger.debug("Treating unrecognized winner %r as a draw", event.winner)

    old_rating1 = player1.rating
    old_rating2 = player2.rating
    update = compute_match_update(
        old_rating1,
        old_rating2,
        player1.matches_played,
        player2.matches_played,
        score_for_player1(event),
        config.elo,
    )
    new_rating1 = float(round_half_up(old_rating1 + update.change1))
    new_rating2 = float(round_half_up(old_rating2 + update.change2))

    player1.rating = new_rating1
    player2.rating = new_rating2
    player1.matches_played += 1
    player2.matches_played += 1
    player1.history.append(new_rating1)
    player2.history.append(new_rating2)

    return MatchRecord(
        player1=MatchSide(
            name=player1.name,
            old_rating=old_rating1,
            new_rating=new_rating1,
            change=update.change1,
        ),
        player2=MatchSide(
            name=player2.name,
            old_rating=old_rating2,
            new_rating=new_rating2,
            change=update.change2,
        ),
        winner=event.winner,
        timestamp=event.timestamp,
    )


def _compute_winstreaks(
    players: Mapping[str, _PlayerState],
    matches: Sequence[MatchRecord],
) -> dict[str, int]:
    streaks: dict[str, int] = {}
    for name in players:
        streak = 0
        for match in reversed(matches):
            if not match.involves(name):
                continue
            if match.winner != name:
                break
            streak += 1
        streaks[name] = streak
    return streaks


__all__ = [
    "HeadToHead",
    "MatchRecord",
    "MatchSide",
    "MaterializedView",
    "Player",
    "build_head_to_head",
    "derive_state",
    "head_to_head_key",
    "score_for_player1",
]
