"""Elo rating modules."""

from domain.elo.calculator import (
    EloParameters,
    MatchUpdate,
    calculate_expected_score,
    calculate_k_factor,
    compute_match_update,
    round_half_up,
)

__all__ = [
    "EloParameters",
    "MatchUpdate",
    "calculate_expected_score",
    "calculate_k_factor",
    "compute_match_update",
    "round_half_up",
]
