"""Configuration handling for git-pj"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from git_pj.constants import (
    APP_DIR_NAME,
    APP_HOME_ENV,
    CONFIG_FILE_NAME,
    DEFAULT_WORKSPACE_NAME,
    LAYOUT_HOST,
    LAYOUTS,
)
from git_pj.exceptions import ConfigError
from git_pj.logging_config import get_logger
from git_pj.utils.files import atomic_write_json, locked_read_json

logger = get_logger(__name__)


def get_app_dir() -> Path:
    """Directory holding config, metadata and logs (``$GIT_PJ_HOME`` or ``~/.git-pj``)."""
    override = os.environ.get(APP_HOME_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / APP_DIR_NAME


def default_root() -> Path:
    return Path.home() / DEFAULT_WORKSPACE_NAME


@dataclass
class Config:
    """Configuration for git-pj with validation."""

    # Absolute workspace roots; the first one is where new repos are cloned
    roots: List[Path] = field(default_factory=lambda: [default_root()])
    layout: str = LAYOUT_HOST  # host, flat
    shell: Optional[str] = None  # Shell launched by `find`, defaults to $SHELL

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_roots()
        self._validate_layout()

    def _validate_roots(self):
        """Validate roots is a non-empty list and normalise entries to absolute paths."""
        if not isinstance(self.roots, list):
            raise ValueError("roots must be a list")
        if not self.roots:
            raise ValueError("roots cannot be empty")
        self.roots = [Path(root).expanduser().resolve() for root in self.roots]

    def _validate_layout(self):
        """Validate layout is one of allowed values."""
        if self.layout not in LAYOUTS:
            raise ValueError(f"layout must be one of {LAYOUTS}, got '{self.layout}'")

    @property
    def root(self) -> Path:
        """Default root for new repositories."""
        return self.roots[0]

    @property
    def with_host(self) -> bool:
        return self.layout == LAYOUT_HOST

    def to_dict(self) -> dict:
        return {
            "roots": [str(root) for root in self.roots],
            "layout": self.layout,
            "shell": self.shell,
        }

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, upgrading the single-root shape."""
        config_dict = dict(config_dict)
        if "roots" not in config_dict and config_dict.get("root"):
            config_dict["roots"] = [config_dict["root"]]

        known_fields = {"roots", "layout", "shell"}
        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)


class ConfigService:
    """Reads and writes the JSON config file."""

    def __init__(self, app_dir: Optional[Path] = None):
        self.app_dir = Path(app_dir) if app_dir else get_app_dir()
        self.config_file = self.app_dir / CONFIG_FILE_NAME

    def exists(self) -> bool:
        return self.config_file.exists()

    def load(self) -> Config:
        """Load the config, creating and persisting the default one on first run."""
        if not self.config_file.exists():
            logger.debug(f"No config file at {self.config_file}, writing defaults")
            config = Config()
            self.save(config)
            return config

        try:
            data = locked_read_json(self.config_file)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in config file {self.config_file}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {self.config_file} must hold an object")

        try:
            config = Config.from_dict(data)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid config file {self.config_file}: {e}")

        if "roots" not in data:
            logger.info("Upgrading single-root config to roots list")
            self.save(config)
        return config

    def save(self, config: Config) -> None:
        atomic_write_json(self.config_file, config.to_dict())
        logger.debug(f"Saved config to {self.config_file}")
