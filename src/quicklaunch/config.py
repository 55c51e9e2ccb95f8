"""Configuration management for quicklaunch."""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Optional, Protocol

from pydantic import BaseModel, Field

from .models.command import Command, CommandGroup

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "QUICKLAUNCH_CONFIG"
REPO_CONFIG_RELPATH = Path(".quicklaunch") / "config.toml"


def _default_file_directories() -> list[str]:
    home = Path.home()
    return [str(home / "Desktop"), str(home / "Downloads")]


def _default_application_directories() -> list[str]:
    home = Path.home()
    return [
        "/usr/share/applications",
        str(home / ".local" / "share" / "applications"),
        "/Applications",
        str(home / "AppData" / "Roaming" / "Microsoft" / "Windows" / "Start Menu" / "Programs"),
    ]


class CurrencySettings(BaseModel):
    """Exchange-rate source and cache policy."""

    api_key: Optional[str] = Field(default=None)
    base_currency: str = Field(default="USD", min_length=3, max_length=3)
    base_url: str = Field(default="https://v6.exchangerate-api.com/v6")
    timeout_seconds: float = Field(default=5.0, gt=0)
    cache_ttl_seconds: int = Field(default=3600, gt=0)
    grace_seconds: int = Field(default=86400, ge=0)
    cache_file: Optional[str] = Field(default=None)


class FileSearchSettings(BaseModel):
    enabled: bool = Field(default=True)
    directories: list[str] = Field(default_factory=_default_file_directories)
    max_files: int = Field(default=300, gt=0)
    max_results: int = Field(default=8, gt=0)
    recursive: bool = Field(default=False)


class ApplicationSettings(BaseModel):
    enabled: bool = Field(default=True)
    directories: list[str] = Field(default_factory=_default_application_directories)
    max_items: int = Field(default=500, gt=0)
    cache_seconds: int = Field(default=300, ge=0)


class LauncherSettings(BaseModel):
    max_results: int = Field(default=10, gt=0)
    qr_threshold: int = Field(default=20, gt=0)
    web_search_url: str = Field(default="https://www.google.com/search?q={query}")
    currency: CurrencySettings = Field(default_factory=CurrencySettings)
    files: FileSearchSettings = Field(default_factory=FileSearchSettings)
    applications: ApplicationSettings = Field(default_factory=ApplicationSettings)


class LauncherConfig(BaseModel):
    """Read-only configuration snapshot consumed by the search core."""

    commands: list[Command] = Field(default_factory=list)
    groups: list[CommandGroup] = Field(default_factory=list)
    settings: LauncherSettings = Field(default_factory=LauncherSettings)

    model_config = {"frozen": True}

    def group_name(self, group_id: Optional[str]) -> Optional[str]:
        if not group_id:
            return None
        for group in self.groups:
            if group.id == group_id:
                return group.name
        return None

    @classmethod
    def from_env(cls, data: Optional[dict[str, Any]] = None) -> "LauncherConfig":
        """Build a config from parsed TOML data with environment overrides applied."""
        data = dict(data or {})
        settings = dict(data.get("settings") or {})
        currency = dict(settings.get("currency") or {})

        max_results = os.environ.get("QUICKLAUNCH_MAX_RESULTS")
        if max_results:
            settings["max_results"] = _as_int(max_results, name="QUICKLAUNCH_MAX_RESULTS")
        qr_threshold = os.environ.get("QUICKLAUNCH_QR_THRESHOLD")
        if qr_threshold:
            settings["qr_threshold"] = _as_int(qr_threshold, name="QUICKLAUNCH_QR_THRESHOLD")
        api_key = os.environ.get("QUICKLAUNCH_EXCHANGE_API_KEY")
        if api_key:
            currency["api_key"] = api_key
        base_currency = os.environ.get("QUICKLAUNCH_BASE_CURRENCY")
        if base_currency:
            currency["base_currency"] = base_currency.strip().upper()

        settings["currency"] = currency
        data["settings"] = settings
        return cls.model_validate(data)


class ConfigProvider(Protocol):
    def snapshot(self) -> LauncherConfig:
        ...


class StaticConfigProvider:
    """Serves one immutable configuration snapshot."""

    def __init__(self, config: Optional[LauncherConfig] = None):
        self._config = config or LauncherConfig()

    def snapshot(self) -> LauncherConfig:
        return self._config


def _as_int(value: Any, *, name: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Invalid config: {name} must be an int")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise ValueError(f"Invalid config: {name} must be an int")


def _find_repo_root(start_dir: Path) -> Path:
    """Find repository root by walking upward looking for .git or pyproject.toml."""
    current_dir = start_dir

    while True:
        if (current_dir / ".git").exists() or (current_dir / "pyproject.toml").exists():
            return current_dir

        parent_dir = current_dir.parent
        if parent_dir == current_dir:
            return start_dir

        current_dir = parent_dir


def find_config_file(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Locate .quicklaunch/config.toml between start_dir and the repo root."""
    start_dir = (start_dir or Path.cwd()).resolve()
    repo_root = _find_repo_root(start_dir)
    current_dir = start_dir

    while True:
        candidate = current_dir / REPO_CONFIG_RELPATH
        if candidate.is_file():
            return candidate
        if current_dir == repo_root or current_dir.parent == current_dir:
            return None
        current_dir = current_dir.parent


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Malformed config file {path}: {e}") from e
    except OSError as e:
        raise ValueError(f"Cannot read config file {path}: {e}") from e


def load_config(path: Optional[str | Path] = None) -> LauncherConfig:
    """Load the launcher configuration.

    Precedence:
    1. Explicit path argument
    2. QUICKLAUNCH_CONFIG environment variable
    3. .quicklaunch/config.toml walking upward from the working directory
    4. Built-in defaults

    Environment overrides (QUICKLAUNCH_MAX_RESULTS, QUICKLAUNCH_QR_THRESHOLD,
    QUICKLAUNCH_EXCHANGE_API_KEY, QUICKLAUNCH_BASE_CURRENCY) apply on top.

    Raises:
        ValueError: If the selected file is missing, malformed, or invalid
    """
    config_path: Optional[Path] = None
    if path:
        config_path = Path(path).expanduser()
    elif os.environ.get(CONFIG_ENV_VAR):
        config_path = Path(os.environ[CONFIG_ENV_VAR]).expanduser()
    else:
        config_path = find_config_file()

    data: dict[str, Any] = {}
    if config_path is not None:
        if not config_path.exists():
            raise ValueError(f"Config file does not exist: {config_path}")
        logger.debug(f"Loading config from {config_path}")
        data = _read_toml(config_path)

    return LauncherConfig.from_env(data)
