"""Dynamic K-factor Elo logic for one head-to-head match."""

from __future__ import annotations

from dataclasses import dataclass
from math import cos, floor, pi


@dataclass(frozen=True)
class EloParameters:
    k_min: float = 20.0
    k_max: float = 80.0
    transition_matches: int = 20
    scale_factor: float = 400.0


@dataclass(frozen=True)
class MatchUpdate:
    """Rating change for each side of one match."""

    change1: int
    change2: int


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always going towards +infinity."""
    return floor(value + 0.5)


def calculate_expected_score(rating: float, opponent_rating: float, scale_factor: float = 400.0) -> float:
    """Compute the Elo expected score for one side."""
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale_factor))


def calculate_k_factor(matches_played: int, params: EloParameters = EloParameters()) -> float:
    """K-factor that decays smoothly from k_max at zero matches to k_min at the transition."""
    if matches_played >= params.transition_matches:
        return params.k_min

    # 0 matches -> angle 0 -> scaling 1; transition -> angle pi -> scaling 0.
    angle = (matches_played / params.transition_matches) * pi
    scaling_factor = (1.0 + cos(angle)) / 2.0
    return params.k_min + ((params.k_max - params.k_min) * scaling_factor)


def compute_match_update(
    rating1: float,
    rating2: float,
    matches_played1: int,
    matches_played2: int,
    score1: float,
    params: EloParameters = EloParameters(),
) -> MatchUpdate:
    """Compute both rating changes for a match, each side scaled by its own K-factor.

    ``score1`` is player 1's actual result: 1.0 win, 0.5 draw, 0.0 loss. The two
    changes are rounded independently, so they need not cancel out.
    """
    k1 = calculate_k_factor(matches_played1, params)
    k2 = calculate_k_factor(matches_played2, params)
    expected1 = calculate_expected_score(rating1, rating2, params.scale_factor)

    performance_delta1 = score1 - expected1

    return MatchUpdate(
        change1=round_half_up(k1 * performance_delta1),
        change2=round_half_up(k2 * -performance_delta1),
    )


__all__ = [
    "EloParameters",
    "MatchUpdate",
    "calculate_expected_score",
    "calculate_k_factor",
    "compute_match_update",
    "round_half_up",
]
