"""Read-side helpers over a materialized view."""

from __future__ import annotations

from domain.state import HeadToHead, MatchRecord, MaterializedView, head_to_head_key


def matches_for_player(view: MaterializedView, name: str) -> list[MatchRecord]:
    """Matches ``name`` took part in, oldest first."""
    return [match for match in view.matches if match.involves(name)]


def head_to_head_between(view: MaterializedView, name_a: str, name_b: str) -> HeadToHead | None:
    return view.head_to_head.get(head_to_head_key(name_a, name_b))


def head_to_head_for_player(view: MaterializedView, name: str) -> list[HeadToHead]:
    """Records involving ``name`` with at least one winner, most decisive matches first."""
    records = [
        record
        for record in view.head_to_head.values()
        if name in record.key and record.decisive_matches > 0
    ]
    return sorted(records, key=lambda record: -record.decisive_matches)


def decisive_head_to_head(view: MaterializedView) -> list[HeadToHead]:
    """Pairs with at least one winner, ordered by pair."""
    return [record for record in view.head_to_head.values() if record.decisive_matches > 0]


__all__ = [
    "decisive_head_to_head",
    "head_to_head_between",
    "head_to_head_for_player",
    "matches_for_player",
]
