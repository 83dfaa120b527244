"""Tests for the command-line runner."""
import json
from pathlib import Path

import pytest

from arenalog import app
from arenalog.config.config_manager import RunnerPreferences
from logfixtures import draft_events, single_game_match


@pytest.fixture
def prefs(tmp_path, monkeypatch):
    preferences = RunnerPreferences(
        output_dir=str(tmp_path / "matches"),
        draft_output_dir=str(tmp_path / "drafts"),
    )
    monkeypatch.setattr(app.RunnerPreferences, "load", classmethod(lambda cls: preferences))
    monkeypatch.chdir(tmp_path)
    return preferences


class TestBuildConfig:
    def test_flags_override_environment(self, prefs):
        args = app.build_parser().parse_args(
            ["--log", "/logs/Player.log", "--no-follow", "--poll-interval", "0.2", "--no-rotation-watch"]
        )
        config = app.build_config(args, prefs)
        assert config.player_log_path == "/logs/Player.log"
        assert config.follow is False
        assert config.poll_interval == 0.2
        assert config.watch_rotation is False

    def test_follow_is_left_alone_by_default(self, prefs, monkeypatch):
        monkeypatch.delenv("ARENALOG_FOLLOW", raising=False)
        args = app.build_parser().parse_args(["--log", "/logs/Player.log"])
        assert args.follow is None
        assert app.build_config(args, prefs).follow is True


class TestMain:
    def test_processes_log_and_exits(self, prefs, write_log, capsys):
        path = write_log(single_game_match("m1") + draft_events("d1"))

        assert app.main(["--log", path, "--no-follow", "--no-rotation-watch", "--poll-interval", "0.01"]) == 0

        replay = json.loads((Path(prefs.output_dir) / "m1.json").read_text())
        assert len(replay) == 7
        assert (Path(prefs.draft_output_dir) / "d1.json").exists()
        out = capsys.readouterr().out
        assert "Match m1" in out
        assert "Alice vs Bob: won" in out
        assert "Matches: 1 written" in out

    def test_missing_log(self, prefs, tmp_path):
        assert app.main(["--log", str(tmp_path / "nope.log"), "--no-follow"]) == 1
