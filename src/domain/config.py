"""Load tracker settings from TOML files."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
import tomllib

from domain.elo.calculator import EloParameters

DEFAULT_STORAGE_KEY = "elo_tracker_game_data_v3"
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "configs" / "ladder.toml"

STARTING_RATINGS: dict[str, int] = {
    "beginner": 600,
    "intermediate": 800,
    "advanced": 1000,
}


@dataclass(frozen=True)
class DerivationConfig:
    """Inputs to state derivation besides the log itself."""

    default_starting_rating: float = 800.0
    ranking_min_matches: int = 4
    elo: EloParameters = EloParameters()


@dataclass(frozen=True)
class TrackerConfig:
    """Settings for one tracker instance."""

    storage_key: str = DEFAULT_STORAGE_KEY
    default_starting_rating: int = STARTING_RATINGS["intermediate"]
    ranking_min_matches: int = 4
    starting_ratings: dict[str, int] = field(default_factory=lambda: dict(STARTING_RATINGS))
    elo: EloParameters = EloParameters()
    file_path: Path | None = None

    def derivation(self) -> DerivationConfig:
        return DerivationConfig(
            default_starting_rating=float(self.default_starting_rating),
            ranking_min_matches=self.ranking_min_matches,
            elo=self.elo,
        )

    def as_config_json(self) -> dict[str, Any]:
        return {
            "storage_key": self.storage_key,
            "default_starting_rating": self.default_starting_rating,
            "ranking_min_matches": self.ranking_min_matches,
            "starting_ratings": dict(self.starting_ratings),
            "k_min": self.elo.k_min,
            "k_max": self.elo.k_max,
            "transition_matches": self.elo.transition_matches,
            "scale_factor": self.elo.scale_factor,
        }


def load_tracker_config(file_path: Path | None = None) -> TrackerConfig:
    """Load and validate a tracker TOML file; the bundled default is used when omitted."""
    target = file_path or DEFAULT_CONFIG_PATH
    if not target.exists():
        raise FileNotFoundError(f"Config file not found: {target}")
    if not target.is_file():
        raise ValueError(f"Config path is not a file: {target}")

    with target.open("rb") as file:
        raw = tomllib.load(file)
    return parse_tracker_config(raw, target)


def parse_tracker_config(raw: dict[str, Any], file_path: Path) -> TrackerConfig:
    tracker_raw = raw.get("tracker", {})
    elo_raw = raw.get("elo", {})

    storage_key = str(tracker_raw.get("storage_key", DEFAULT_STORAGE_KEY)).strip()
    if not storage_key:
        raise ValueError(f"{file_path}: [tracker].storage_key must not be empty")

    starting_ratings_raw = tracker_raw.get("starting_ratings", STARTING_RATINGS)
    starting_ratings = {str(tier): int(value) for tier, value in starting_ratings_raw.items()}
    if not starting_ratings:
        raise ValueError(f"{file_path}: [tracker.starting_ratings] must define at least one tier")
    for tier, value in starting_ratings.items():
        if value <= 0:
            raise ValueError(f"{file_path}: [tracker.starting_ratings].{tier} must be > 0")

    default_starting_rating = int(
        tracker_raw.get("default_starting_rating", STARTING_RATINGS["intermediate"])
    )
    if default_starting_rating not in starting_ratings.values():
        raise ValueError(
            f"{file_path}: [tracker].default_starting_rating must be one of "
            f"{sorted(starting_ratings.values())}"
        )

    ranking_min_matches = int(tracker_raw.get("ranking_min_matches", 4))
    if ranking_min_matches < 0:
        raise ValueError(f"{file_path}: [tracker].ranking_min_matches must be >= 0")

    elo = EloParameters(
        k_min=float(elo_raw.get("k_min", 20.0)),
        k_max=float(elo_raw.get("k_max", 80.0)),
        transition_matches=int(elo_raw.get("transition_matches", 20)),
        scale_factor=float(elo_raw.get("scale_factor", 400.0)),
    )
    _validate_elo_parameters(file_path=file_path, parameters=elo)

    return TrackerConfig(
        storage_key=storage_key,
        default_starting_rating=default_starting_rating,
        ranking_min_matches=ranking_min_matches,
        starting_ratings=starting_ratings,
        elo=elo,
        file_path=file_path,
    )


def _validate_elo_parameters(*, file_path: Path, parameters: EloParameters) -> None:
    if parameters.k_min <= 0.0:
        raise ValueError(f"{file_path}: [elo].k_min must be > 0")
    if parameters.k_max < parameters.k_min:
        raise ValueError(f"{file_path}: [elo].k_max must be >= k_min")
    if parameters.transition_matches <= 0:
        raise ValueError(f"{file_path}: [elo].transition_matches must be > 0")
    if parameters.scale_factor <= 0.0:
        raise ValueError(f"{file_path}: [elo].scale_factor must be > 0")


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_STORAGE_KEY",
    "STARTING_RATINGS",
    "DerivationConfig",
    "TrackerConfig",
    "load_tracker_config",
    "parse_tracker_config",
]
