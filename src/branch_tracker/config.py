"""Configuration management for Branch Tracker."""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .http_sync import DEFAULT_TABLE

DEFAULT_CONFIG: Dict[str, Any] = {
    "data_dir": "",
    "workspace": "",
    "table": DEFAULT_TABLE,
    "poll_interval": 1.0,
    "request_timeout": None,  # requests waits indefinitely
    "verbose_logging": True,
}


def get_app_directory() -> Path:
    """Per-user private directory holding config and data."""
    return Path.home() / ".branch-tracker"


def get_default_config_dir() -> Path:
    return get_app_directory() / "config"


def get_default_data_dir() -> Path:
    """Get the default data directory for the current user.

    Returns:
        Path to default data directory
    """
    return get_app_directory() / "data"


class Config:
    """Configuration manager for Branch Tracker."""

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize configuration manager.

        Args:
            config_dir: Custom configuration directory path
        """
        if config_dir:
            self.config_dir = Path(config_dir)
        else:
            self.config_dir = get_default_config_dir()

        self.config_file = self.config_dir / "settings.json"
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from file or create default."""
        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    config = json.load(f)
                merged_config = DEFAULT_CONFIG.copy()
                merged_config.update(config)
                return merged_config
            except (json.JSONDecodeError, IOError) as e:
                print(f"Warning: Could not load config file: {e}")
                print("Using default configuration.")

        return DEFAULT_CONFIG.copy()

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value.

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value
        """
        return self._config.get(key, default)

    def update(self, config_dict: Dict[str, Any]) -> None:
        self._config.update(config_dict)

    @property
    def data_dir(self) -> Path:
        """Directory holding the session log."""
        data_dir = self.get("data_dir")
        if data_dir:
            return Path(data_dir)
        return get_default_data_dir()

    @property
    def workspace(self) -> str:
        """Workspace whose branch is tracked (defaults to the cwd)."""
        return self.get("workspace") or os.getcwd()

    @property
    def table(self) -> str:
        return self.get("table") or DEFAULT_TABLE

    @property
    def poll_interval(self) -> float:
        return float(self.get("poll_interval", 1.0))

    @property
    def request_timeout(self) -> Optional[float]:
        timeout = self.get("request_timeout")
        return float(timeout) if timeout else None

    @property
    def verbose_logging(self) -> bool:
        return self.get("verbose_logging", True)


def load_config_from_env() -> Dict[str, Any]:
    """Load configuration from environment variables.

    Returns:
        Configuration dictionary from environment
    """
    env_config: Dict[str, Any] = {}

    env_mappings = {
        "BRANCH_TRACKER_DATA_DIR": "data_dir",
        "BRANCH_TRACKER_WORKSPACE": "workspace",
        "BRANCH_TRACKER_TABLE": "table",
        "BRANCH_TRACKER_POLL_INTERVAL": "poll_interval",
        "BRANCH_TRACKER_REQUEST_TIMEOUT": "request_timeout",
        "BRANCH_TRACKER_VERBOSE": "verbose_logging",
    }

    for env_var, config_key in env_mappings.items():
        value = os.getenv(env_var)
        if value is None:
            continue

        if config_key in ["poll_interval", "request_timeout"]:
            try:
                env_config[config_key] = float(value)
            except ValueError:
                print(f"Warning: Invalid numeric value for {env_var}: {value}")
        elif config_key == "verbose_logging":
            env_config[config_key] = value.lower() in ("true", "1", "yes", "on")
        else:
            env_config[config_key] = value

    return env_config


def load_local_env(env_file: Optional[Path] = None) -> bool:
    """Load a development .env file without overriding exported variables."""
    env_file = env_file or Path.cwd() / ".env"
    if not env_file.exists():
        return False
    return load_dotenv(env_file, override=False)


def get_config(config_dir: Optional[str] = None) -> Config:
    """Build a Config with .env and environment overrides applied."""
    load_local_env()
    config = Config(config_dir)
    env_config = load_config_from_env()
    if env_config:
        config.update(env_config)
    return config
