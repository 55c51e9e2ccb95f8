"""Pytest fixtures for quicklaunch tests."""

import pytest

from quicklaunch.config import LauncherConfig, LauncherSettings, StaticConfigProvider
from quicklaunch.models.command import Command, CommandGroup, CommandType
from quicklaunch.search.engine import SearchEngine
from quicklaunch.search.sources import ClipboardHistory, CommandSource


@pytest.fixture
def sample_commands():
    """Custom commands covering each type plus a disabled entry."""
    return [
        Command(
            id="gh",
            keyword="gh",
            display_name="GitHub search",
            type=CommandType.URL,
            path_template="https://github.com/search?q={param}",
            group_id="dev",
        ),
        Command(
            id="notes",
            keyword="notes",
            display_name="Notes folder",
            type=CommandType.DIRECTORY,
            path_template="~/notes",
        ),
        Command(
            id="deploy",
            keyword="deploy",
            display_name="Deploy service",
            type=CommandType.SHELL,
            path_template="./deploy.sh {param}",
            group_id="dev",
        ),
        Command(
            id="old",
            keyword="oldsite",
            display_name="Retired site",
            type=CommandType.URL,
            path_template="https://old.example.com",
            enabled=False,
        ),
    ]


@pytest.fixture
def sample_config(sample_commands):
    """LauncherConfig with sample commands and filesystem scanning disabled."""
    settings = LauncherSettings.model_validate(
        {
            "files": {"enabled": False},
            "applications": {"enabled": False},
        }
    )
    return LauncherConfig(
        commands=sample_commands,
        groups=[CommandGroup(id="dev", name="Development")],
        settings=settings,
    )


@pytest.fixture
def config_provider(sample_config):
    return StaticConfigProvider(sample_config)


@pytest.fixture
def clipboard():
    history = ClipboardHistory()
    history.add("ssh deploy@example.com")
    history.add("meeting notes for monday")
    return history


@pytest.fixture
def engine(config_provider, clipboard):
    """SearchEngine over commands and clipboard history only."""
    command_source = CommandSource()
    return SearchEngine(
        config_provider,
        sources=[command_source, clipboard],
        command_source=command_source,
    )
