"""End-to-end tests for the ladder command line."""

from __future__ import annotations

import importlib.util
import json
from pathlib import Path
from types import ModuleType

import pytest
from typer.testing import CliRunner

SCRIPT_PATH = Path(__file__).resolve().parents[1] / "scripts" / "ladder.py"

runner = CliRunner(env={"COLUMNS": "200", "TERMINAL_WIDTH": "200"})


def _load_cli() -> ModuleType:
    spec = importlib.util.spec_from_file_location("ladder_cli", SCRIPT_PATH)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture(scope="module")
def cli() -> ModuleType:
    return _load_cli()


@pytest.fixture()
def db_args(tmp_path: Path) -> list[str]:
    return ["--db-url", f"sqlite:///{tmp_path / 'ladder.db'}"]


def _invoke(cli: ModuleType, *args: str):
    return runner.invoke(cli.app, list(args))


def test_add_player_and_log_match(cli: ModuleType, db_args: list[str]) -> None:
    result = _invoke(cli, "add-player", "Alice", *db_args)
    assert result.exit_code == 0, result.output
    assert "added player=Alice starting_rating=800" in result.output

    assert _invoke(cli, "add-player", "Bob", "--starting-rating", "800", *db_args).exit_code == 0

    result = _invoke(cli, "log-match", "Alice", "Bob", "Alice", *db_args)
    assert result.exit_code == 0, result.output
    assert "Alice [W] +40 (800 -> 840)" in result.output
    assert "Bob [L] -40 (800 -> 760)" in result.output
    assert "h2h 1-0" in result.output

    result = _invoke(cli, "standings", "--all", *db_args)
    assert result.exit_code == 0, result.output
    lines = [line for line in result.output.splitlines() if line]
    assert lines[0].startswith(" 1. Alice")
    assert "rating=   840" in lines[0]

    result = _invoke(cli, "standings", *db_args)
    assert "No players with at least 4 matches yet." in result.output

    result = _invoke(cli, "h2h", *db_args)
    assert "Alice" in result.output
    assert "1 - 0" in result.output

    result = _invoke(cli, "history", "--player", "Cara", *db_args)
    assert "No matches found for Cara." in result.output

    _invoke(cli, "log-match", "Bob", "Alice", "draw", *db_args)
    result = _invoke(cli, "history", *db_args)
    lines = [line for line in result.output.splitlines() if line]
    assert lines[0].endswith("h2h 0-1-1")
    assert lines[1].endswith("h2h 1-0")

    result = _invoke(cli, "h2h", "--player", "Cara", *db_args)
    assert "No H2H stats for Cara." in result.output


def test_invalid_input_is_reported_as_bad_parameter(cli: ModuleType, db_args: list[str]) -> None:
    assert _invoke(cli, "add-player", "Alice", *db_args).exit_code == 0

    result = _invoke(cli, "add-player", "alice", *db_args)
    assert result.exit_code == 2
    assert "already exists" in result.output

    result = _invoke(cli, "log-match", "Alice", "Ghost", "Alice", *db_args)
    assert result.exit_code == 2


def test_export_import_and_reset(cli: ModuleType, db_args: list[str], tmp_path: Path) -> None:
    _invoke(cli, "add-player", "Alice", *db_args)
    _invoke(cli, "add-player", "Bob", *db_args)
    _invoke(cli, "log-match", "Alice", "Bob", "draw", *db_args)

    export_path = tmp_path / "export.json"
    result = _invoke(cli, "export", "--output", str(export_path), *db_args)
    assert result.exit_code == 0, result.output
    exported = json.loads(export_path.read_text())
    assert [entry["type"] for entry in exported] == ["ADD_PLAYER", "ADD_PLAYER", "LOG_MATCH"]

    result = _invoke(cli, "reset", "--yes", *db_args)
    assert "All data has been reset." in result.output
    assert "No players yet." in _invoke(cli, "standings", "--all", *db_args).output

    result = _invoke(cli, "import", str(export_path), "--yes", *db_args)
    assert result.exit_code == 0, result.output
    assert "imported events=3 players=2" in result.output


def test_import_rejects_non_array(cli: ModuleType, db_args: list[str], tmp_path: Path) -> None:
    bad_file = tmp_path / "bad.json"
    bad_file.write_text('{"type": "ADD_PLAYER"}')

    result = _invoke(cli, "import", str(bad_file), "--yes", *db_args)
    assert result.exit_code == 2
    assert "must be a JSON array" in result.output
