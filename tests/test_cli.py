from __future__ import annotations

import io
import json

import pytest

from brdgme_cli.config import DEFAULT_GAME, load_settings
from brdgme_cli.main import main
from brdgme_cli.registry import load_plugins


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("BRDGME_GAME", raising=False)
    monkeypatch.delenv("BRDGME_LOG_LEVEL", raising=False)


def run(capsys, argv):
    exit_code = main(argv)
    out = capsys.readouterr().out
    return exit_code, json.loads(out)


def test_list_games(capsys):
    exit_code, games = run(capsys, ["list-games"])

    assert exit_code == 0
    assert games == ["tictactoe"]


def test_run_with_request_argument(capsys):
    exit_code, response = run(capsys, ["run", "--request", '{"PlayerCounts": {}}'])

    assert exit_code == 0
    assert response == {"PlayerCounts": {"player_counts": [2]}}


def test_run_reads_request_from_stdin(capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO('{"New": {"players": 2}}\n'))

    exit_code, response = run(capsys, ["run"])

    assert exit_code == 0
    assert response["New"]["game"]["status"] == {"Active": {"whose_turn": [0], "eliminated": []}}


def test_run_writes_one_line(capsys):
    main(["run", "--request", '{"PlayerCounts": {}}'])

    out = capsys.readouterr().out
    assert out.endswith("\n")
    assert out.count("\n") == 1


def test_bad_request_still_exits_cleanly(capsys):
    exit_code, response = run(capsys, ["run", "--request", "nonsense"])

    assert exit_code == 0
    assert response["SystemError"]["message"].startswith("Unable to decode request: ")


def test_unknown_game_is_system_error(capsys):
    exit_code, response = run(
        capsys, ["run", "--game", "chess", "--request", '{"PlayerCounts": {}}']
    )

    assert exit_code == 0
    assert response == {"SystemError": {"message": "Game 'chess' is not registered"}}


def test_game_from_environment(capsys, monkeypatch):
    monkeypatch.setenv("BRDGME_GAME", "go")

    _, response = run(capsys, ["run", "--request", '{"PlayerCounts": {}}'])

    assert response == {"SystemError": {"message": "Game 'go' is not registered"}}


def test_settings_defaults():
    settings = load_settings()

    assert settings.game == DEFAULT_GAME
    assert settings.log_level == "WARNING"


def test_settings_from_config_file(tmp_path):
    (tmp_path / "config.toml").write_text(
        '[engine]\ndefault = "chess"\n\n[logging]\nlevel = "debug"\n',
        encoding="utf-8",
    )

    settings = load_settings()

    assert settings.game == "chess"
    assert settings.log_level == "DEBUG"


def test_environment_overrides_config_file(tmp_path, monkeypatch):
    (tmp_path / "config.toml").write_text('[engine]\ndefault = "chess"\n', encoding="utf-8")
    monkeypatch.setenv("BRDGME_GAME", "go")

    assert load_settings().game == "go"
    assert load_settings(game="tictactoe").game == "tictactoe"


def test_unreadable_config_file_falls_back_to_defaults(tmp_path):
    (tmp_path / "config.toml").write_text("[engine\n", encoding="utf-8")

    assert load_settings().game == DEFAULT_GAME


def test_registry_loads_tictactoe():
    plugins = load_plugins()

    engine = plugins["tictactoe"]()
    assert engine.player_counts() == [2]


def test_unknown_log_level_from_environment_falls_back(capsys, monkeypatch):
    monkeypatch.setenv("BRDGME_LOG_LEVEL", "verbose")

    assert load_settings().log_level == "WARNING"

    exit_code, response = run(capsys, ["run", "--request", '{"PlayerCounts": {}}'])
    assert exit_code == 0
    assert response == {"PlayerCounts": {"player_counts": [2]}}


def test_unknown_log_level_from_config_file_falls_back(tmp_path):
    (tmp_path / "config.toml").write_text('[logging]\nlevel = "loud"\n', encoding="utf-8")

    assert load_settings().log_level == "WARNING"
