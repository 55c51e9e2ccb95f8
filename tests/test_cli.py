"""Tests for the quicklaunch CLI."""

import pytest
from typer.testing import CliRunner

from quicklaunch.cli import app

runner = CliRunner()

CONFIG_TOML = """
[settings.files]
enabled = false

[settings.applications]
enabled = false

[[commands]]
id = "gh"
keyword = "gh"
display_name = "GitHub search"
type = "Url"
path_template = "https://github.com/search?q={param}"
"""


@pytest.fixture
def config_path(tmp_path, monkeypatch):
    monkeypatch.delenv("QUICKLAUNCH_EXCHANGE_API_KEY", raising=False)
    path = tmp_path / "config.toml"
    path.write_text(CONFIG_TOML, encoding="utf-8")
    monkeypatch.setenv("QUICKLAUNCH_CONFIG", str(path))
    return path


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "quicklaunch v" in result.stdout


def test_search_calculator(config_path):
    result = runner.invoke(app, ["search", "6*7", "--no-apps", "--no-files"])
    assert result.exit_code == 0
    assert "42" in result.stdout


def test_search_no_results(config_path):
    result = runner.invoke(app, ["search", "zzqqxx", "--no-apps", "--no-files"])
    assert result.exit_code == 0
    assert "No results" in result.stdout


def test_search_matches_clipboard_entry(config_path):
    result = runner.invoke(
        app, ["search", "monday", "--no-apps", "--no-files", "--clip", "notes for monday"]
    )
    assert result.exit_code == 0
    assert "Clipboard" in result.stdout
    assert "monday" in result.stdout


def test_search_matches_recent_file(config_path):
    result = runner.invoke(
        app, ["search", "budget", "--no-apps", "--no-files", "--recent", "/tmp/budget.xlsx"]
    )
    assert result.exit_code == 0
    assert "Recent" in result.stdout
    assert "budget.xlsx" in result.stdout


def test_search_rejects_bad_limit(config_path):
    result = runner.invoke(app, ["search", "gh", "--limit", "0"])
    assert result.exit_code == 1


def test_run_with_param(config_path):
    result = runner.invoke(app, ["run", "gh", "typer"])
    assert result.exit_code == 0
    assert "OpenUrl" in result.stdout
    assert "https://github.com/search?q=typer" in result.stdout


def test_run_unknown_keyword(config_path):
    result = runner.invoke(app, ["run", "nope"])
    assert result.exit_code == 1
    assert "no command" in result.stdout


def test_commands_lists_builtins(config_path):
    result = runner.invoke(app, ["commands"])
    assert result.exit_code == 0
    assert "gh" in result.stdout
    assert "google" in result.stdout


def test_bad_config_exits(tmp_path, monkeypatch):
    path = tmp_path / "config.toml"
    path.write_text("[[commands]\n", encoding="utf-8")
    monkeypatch.setenv("QUICKLAUNCH_CONFIG", str(path))

    result = runner.invoke(app, ["commands"])

    assert result.exit_code == 1
    assert "Error" in result.stdout
