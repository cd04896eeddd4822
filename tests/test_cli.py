"""Tests for the assetgraph CLI."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from assetgraph.cli import STATE_FILE, app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep user-level config out of the way and logs off the output."""
    home = tmp_path / "home"
    home.mkdir()
    (home / "assetgraph.yaml").write_text("log_level: warn\n")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(home)


def _run(project, *args):
    return runner.invoke(app, ["--root", str(project), *args])


class TestLoad:
    def test_load_saves_state(self, project):
        result = _run(project, "load", "Scene")
        assert result.exit_code == 0, result.output
        assert "Saved:" in result.output

        state = json.loads((project / ".assetgraph" / STATE_FILE).read_text())
        assert state["node"]["load_path"]["default"] == "Scene"
        groups = next(iter(state["streams"].values()))
        assert {r["import_from"] for r in groups["0"]} == {
            "Assets/Scene/a.asset",
            "Assets/Scene/sub/b.asset",
        }

    def test_missing_directory(self, project):
        result = _run(project, "load", "Nowhere")
        assert result.exit_code == 1
        assert "Directory not found" in result.output


class TestCheck:
    def test_no_state(self, project):
        result = _run(project, "check")
        assert result.exit_code == 1
        assert "No loader state found" in result.output

    def test_up_to_date(self, project):
        _run(project, "load", "Scene")
        result = _run(project, "check", "--ci")
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "OK"

    def test_deleted_asset_revisits(self, project):
        _run(project, "load", "Scene")
        (project / "Assets" / "Scene" / "a.asset").unlink()

        result = _run(project, "check", "--ci")

        assert result.exit_code == 0, result.output
        lines = result.output.strip().splitlines()
        assert lines[0] == "REVISIT 1"
        assert lines[1:] == ["Assets/Scene/sub/b.asset"]

    def test_change_elsewhere_is_ok(self, project):
        _run(project, "load", "Scene")
        (project / "Assets" / "Textures" / "new.png").write_bytes(b"png")
        result = _run(project, "check", "--ci")
        assert result.output.strip() == "OK"

    def test_moved_folder_follows_guid(self, project):
        _run(project, "load", "Scene")
        moved = _run(project, "move", "Assets/Scene", "Assets/Levels")
        assert moved.exit_code == 0, moved.output

        result = _run(project, "check", "--ci")

        lines = result.output.strip().splitlines()
        assert lines[0] == "REVISIT 2"
        assert lines[1:] == ["Assets/Levels/a.asset", "Assets/Levels/sub/b.asset"]
        state = json.loads((project / ".assetgraph" / STATE_FILE).read_text())
        assert state["node"]["load_path"]["default"] == "Levels"


class TestCorruptState:
    def _write_state(self, project, text):
        state_dir = project / ".assetgraph"
        state_dir.mkdir(exist_ok=True)
        (state_dir / STATE_FILE).write_text(text)

    def test_check_reports_invalid_json(self, project):
        self._write_state(project, "{not json")
        result = _run(project, "check")
        assert result.exit_code == 1
        assert "Invalid loader state" in result.output

    def test_check_reports_missing_keys(self, project):
        self._write_state(project, json.dumps({"streams": {}}))
        result = _run(project, "check")
        assert result.exit_code == 1
        assert "Invalid loader state" in result.output

    def test_watch_reports_invalid_state(self, project):
        self._write_state(project, "{not json")
        result = _run(project, "watch")
        assert result.exit_code == 1
        assert "Invalid loader state" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)

    def test_watch_without_state(self, project):
        result = _run(project, "watch")
        assert result.exit_code == 1
        assert "No loader state found" in result.output


class TestMove:
    def test_unknown_asset(self, project):
        result = _run(project, "move", "Assets/Nope", "Assets/Other")
        assert result.exit_code == 1


class TestIndex:
    def test_first_run_lists_changes(self, project):
        result = _run(project, "index")
        assert result.exit_code == 0
        assert "Changes" in result.output

    def test_second_run_up_to_date(self, project):
        _run(project, "index")
        result = _run(project, "index")
        assert "Index up to date." in result.output

    def test_missing_asset_root(self, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        result = _run(empty, "index")
        assert result.exit_code == 1


class TestConfigCommands:
    def test_init_creates_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 0
        assert (tmp_path / "assetgraph.yaml").is_file()

    def test_init_refuses_overwrite(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "assetgraph.yaml").write_text("log_level: info\n")
        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 1

    def test_show(self, project):
        result = _run(project, "config", "show")
        assert result.exit_code == 0
        assert "load_path" in result.output

    def test_bad_config_file(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("log_level: loud\n")
        result = runner.invoke(app, ["--config", str(bad), "index"])
        assert result.exit_code == 1
        assert "Invalid config" in result.output
