"""Persisted configuration store for git-worktree-keeper."""

import os
import sys
from pathlib import Path
from typing import Optional

import yaml

from git_worktree_keeper.config import Config
from git_worktree_keeper.constants import CONFIG_DIR_NAME, CONFIG_FILE_NAME
from git_worktree_keeper.exceptions import ConfigError
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


def get_config_dir() -> Path:
    """Directory holding the user configuration.

    Uses %APPDATA% on Windows and $XDG_CONFIG_HOME (default ~/.config) elsewhere.
    """
    if sys.platform == "win32":
        base_dir = os.environ.get("APPDATA")
        if not base_dir:
            raise ConfigError("%APPDATA%", "APPDATA environment variable not set")
        return Path(base_dir) / CONFIG_DIR_NAME

    base_dir = os.environ.get("XDG_CONFIG_HOME")
    if not base_dir:
        base_dir = str(Path.home() / ".config")
    return Path(base_dir) / CONFIG_DIR_NAME


def get_config_path() -> Path:
    """Full path to the user configuration file."""
    return get_config_dir() / CONFIG_FILE_NAME


def load_config(path: Optional[Path] = None) -> Config:
    """Read and validate the configuration file.

    Raises:
        FileNotFoundError: if the file does not exist
        ConfigError: if the file cannot be read or is invalid
    """
    path = path or get_config_path()
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except OSError as e:
        raise ConfigError(str(path), f"failed to read config file: {e}") from e

    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(str(path), f"failed to parse config file: {e}") from e

    try:
        config = Config.from_dict(document or {})
    except (TypeError, ValueError) as e:
        raise ConfigError(str(path), str(e)) from e

    logger.debug(f"Loaded configuration from {path}")
    return config


def load_or_default(path: Optional[Path] = None) -> Config:
    """Load the configuration, falling back to defaults.

    A missing file silently yields defaults; a broken one is reported as a
    warning and also yields defaults.
    """
    try:
        return load_config(path)
    except FileNotFoundError:
        logger.debug("No configuration file found, using defaults")
        return Config()
    except ConfigError as e:
        logger.warning(f"Failed to load config: {e}")
        return Config()


def save_config(config: Config, path: Optional[Path] = None) -> Path:
    """Write the configuration file, creating its directory if needed."""
    path = path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(config.to_dict(), sort_keys=False), encoding="utf-8")
    logger.info(f"Saved configuration to {path}")
    return path
