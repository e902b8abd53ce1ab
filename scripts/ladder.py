#!/usr/bin/env python3
"""Command-line front end for the Elo ladder tracker."""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine
from domain.config import DEFAULT_CONFIG_PATH, TrackerConfig, load_tracker_config
from domain.errors import TrackerError
from domain.events import DRAW
from domain.interchange import export_filename
from domain.queries import decisive_head_to_head, head_to_head_for_player, matches_for_player
from domain.session import TrackerSession
from domain.state import MatchRecord, Player
from logging_config import setup_logging
from repositories import EventLogRepository

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Track Elo ratings for a head-to-head ladder.",
)

DbUrlOption = Annotated[
    str,
    typer.Option("--db-url", help="Database URL. Defaults to ladder.db in the working directory."),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Tracker TOML config. Defaults to configs/ladder.toml."),
]
DebugOption = Annotated[bool, typer.Option("--debug", help="Enable debug logging.")]


def _open_session(db_url: str, config_path: Path | None, debug: bool) -> TrackerSession:
    setup_logging(debug=debug)
    if config_path is not None or DEFAULT_CONFIG_PATH.exists():
        config = load_tracker_config(config_path)
    else:
        config = TrackerConfig()

    store = EventLogRepository(create_db_engine(db_url), storage_key=config.storage_key)
    session = TrackerSession(store, config)
    session.load()
    return session


def _format_player(index: int, player: Player) -> str:
    streak = f" streak={player.winstreak}" if player.winstreak > 1 else ""
    return (
        f"{index:2d}. {player.name:<20} "
        f"rating={player.rating:6.0f} matches={player.matches_played:3d}{streak}"
    )


def _format_match(match: MatchRecord) -> str:
    sides = []
    for side in (match.player1, match.player2):
        marker = "=" if match.is_draw else ("W" if match.winner == side.name else "L")
        sides.append(
            f"{side.name} [{marker}] {side.change:+d} "
            f"({side.old_rating:.0f} -> {side.new_rating:.0f})"
        )
    when = f" at {match.timestamp}" if match.timestamp else ""
    tally = ""
    if match.head_to_head is not None:
        _, _, wins, losses, draws = match.head_to_head.oriented(match.player1.name)
        tally = f"  h2h {wins}-{losses}" + (f"-{draws}" if draws else "")
    return f"{sides[0]}  vs  {sides[1]}{when}{tally}"


@app.command("add-player")
def add_player(
    name: Annotated[str, typer.Argument(help="Player name (unique, case-insensitive).")],
    starting_rating: Annotated[
        int | None,
        typer.Option("--starting-rating", help="One of the configured starting tiers."),
    ] = None,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config: ConfigOption = None,
    debug: DebugOption = False,
) -> None:
    """Add a new player to the ladder."""
    session = _open_session(db_url, config, debug)
    try:
        event = session.add_player(name, starting_rating)
    except TrackerError as exc:
        raise typer.BadParameter(str(exc), param_hint="NAME") from exc
    typer.echo(f"added player={event.name} starting_rating={event.starting_rating}")


@app.command("log-match")
def log_match(
    player1: Annotated[str, typer.Argument(help="First player.")],
    player2: Annotated[str, typer.Argument(help="Second player.")],
    winner: Annotated[str, typer.Argument(help=f"Winner's name or '{DRAW}'.")],
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config: ConfigOption = None,
    debug: DebugOption = False,
) -> None:
    """Record the result of one match."""
    session = _open_session(db_url, config, debug)
    try:
        session.log_match(player1, player2, winner)
    except TrackerError as exc:
        raise typer.BadParameter(str(exc)) from exc

    view = session.view()
    typer.echo(_format_match(view.matches[-1]))


@app.command()
def standings(
    show_all: Annotated[
        bool,
        typer.Option("--all", help="List every player by matches played instead of the ranking."),
    ] = False,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config: ConfigOption = None,
    debug: DebugOption = False,
) -> None:
    """Print ranked players by rating."""
    session = _open_session(db_url, config, debug)
    view = session.view()
    players = view.all_players_by_matches if show_all else view.ranked_by_rating

    if not players:
        typer.echo(
            "No players yet."
            if show_all
            else f"No players with at least {session.config.ranking_min_matches} matches yet."
        )
        return

    for index, player in enumerate(players, start=1):
        typer.echo(_format_player(index, player))


@app.command()
def players(
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config: ConfigOption = None,
    debug: DebugOption = False,
) -> None:
    """List player names, ranked players first."""
    session = _open_session(db_url, config, debug)
    view = session.view()
    for label, group in (("ranked", view.ranked_by_matches), ("other", view.other_by_matches)):
        for player in group:
            typer.echo(f"{label:<6} {player.name} matches={player.matches_played}")


@app.command()
def history(
    player: Annotated[
        str | None,
        typer.Option("--player", help="Only show matches involving this player."),
    ] = None,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config: ConfigOption = None,
    debug: DebugOption = False,
) -> None:
    """Print match history, newest first."""
    session = _open_session(db_url, config, debug)
    view = session.view()
    matches = matches_for_player(view, player) if player else list(view.matches)

    if not matches:
        typer.echo(f"No matches found for {player}." if player else "No matches played yet.")
        return

    for match in reversed(matches):
        typer.echo(_format_match(match))


@app.command()
def h2h(
    player: Annotated[
        str | None,
        typer.Option("--player", help="Only show records involving this player."),
    ] = None,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config: ConfigOption = None,
    debug: DebugOption = False,
) -> None:
    """Print head-to-head records."""
    session = _open_session(db_url, config, debug)
    view = session.view()
    records = head_to_head_for_player(view, player) if player else decisive_head_to_head(view)

    if not records:
        typer.echo(f"No H2H stats for {player}." if player else "No head-to-head matches yet.")
        return

    for record in records:
        name, opponent, wins, losses, draws = record.oriented(player or record.first)
        draw_note = f" ({draws} draws)" if draws else ""
        typer.echo(f"{name:<20} {wins:3d} - {losses:<3d} {opponent}{draw_note}")


@app.command("export")
def export_command(
    output: Annotated[
        Path | None,
        typer.Option("--output", help="Target file. Defaults to elo-tracker-data-<date>.json."),
    ] = None,
    legacy: Annotated[
        bool,
        typer.Option("--legacy", help="Write the lean match list instead of the event log."),
    ] = False,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config: ConfigOption = None,
    debug: DebugOption = False,
) -> None:
    """Write the event log to a JSON file."""
    session = _open_session(db_url, config, debug)
    if not session.events:
        typer.echo("No data to export.")
        return

    target = output or Path(export_filename(date.today()))
    target.write_bytes(session.export_data(legacy=legacy))
    typer.echo(f"exported events={len(session.events)} file={target}")


@app.command("import")
def import_command(
    source: Annotated[Path, typer.Argument(help="JSON file to import.")],
    yes: Annotated[bool, typer.Option("--yes", help="Skip the overwrite confirmation.")] = False,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config: ConfigOption = None,
    debug: DebugOption = False,
) -> None:
    """Replace all current data with the contents of a JSON file."""
    if not source.is_file():
        raise typer.BadParameter(f"File not found: {source}", param_hint="SOURCE")

    session = _open_session(db_url, config, debug)
    if not yes and not typer.confirm("This will overwrite all current data. Continue?"):
        raise typer.Abort()

    try:
        log = session.import_data(source.read_bytes())
    except TrackerError as exc:
        raise typer.BadParameter(str(exc), param_hint="SOURCE") from exc
    typer.echo(f"imported events={len(log)} players={len(session.view().players)}")


@app.command()
def reset(
    yes: Annotated[bool, typer.Option("--yes", help="Skip the confirmation prompt.")] = False,
    db_url: DbUrlOption = DEFAULT_DB_URL,
    config: ConfigOption = None,
    debug: DebugOption = False,
) -> None:
    """Delete all players and matches."""
    session = _open_session(db_url, config, debug)
    if not yes and not typer.confirm("This will delete all data permanently. Continue?"):
        raise typer.Abort()

    session.reset()
    typer.echo("All data has been reset.")


if __name__ == "__main__":
    app()
