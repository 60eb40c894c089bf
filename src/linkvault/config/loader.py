"""Settings loader and shared instance manager.

This module handles:
- Environment variable loading from .env files
- Configuration file loading from TOML
- Thread-safe access to a shared Settings instance
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from dotenv import load_dotenv

from linkvault.config.models.settings import Settings
from linkvault.shared.constants import FileSystem
from linkvault.shared.errors import ErrorCode, create_config_error

logger = logging.getLogger(__name__)


def default_config_paths() -> list[Path]:
    """Locations searched for a config file, in priority order."""
    return [
        Path(FileSystem.CONFIG_DIRECTORY) / FileSystem.CONFIG_FILENAME,
        Path(FileSystem.CONFIG_FILENAME),
        Path.home() / FileSystem.HOME_DIR / FileSystem.CONFIG_FILENAME,
    ]


def _load_env_file(env_file: Path | None = None) -> bool:
    """Load environment variables from a .env file if one exists.

    Variables already set in the environment win over the file.

    Returns:
        True if a file was loaded
    """
    env_file = env_file or Path(FileSystem.ENV_FILENAME)
    if not env_file.exists():
        return False

    loaded = load_dotenv(env_file, override=False)
    logger.debug("Loaded environment from %s", env_file)
    return loaded


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from a TOML configuration file or the environment.

    Args:
        config_path: Optional path to a TOML file. If None, the default
            locations are tried before falling back to environment only.

    Returns:
        Settings instance loaded from the selected source

    Raises:
        ApplicationError: If the file is missing or does not validate
    """
    _load_env_file()

    try:
        if config_path:
            return Settings.from_toml_file(config_path)

        for candidate in default_config_paths():
            if candidate.exists():
                return Settings.from_toml_file(candidate)

        return Settings()
    except FileNotFoundError as e:
        raise create_config_error(
            str(e),
            code=ErrorCode.MISSING_CONFIG,
            file_path=str(config_path) if config_path else None,
            operation="load_settings",
            original_error=e,
        ) from e
    except ValueError as e:
        # pydantic.ValidationError and toml.TomlDecodeError are both ValueErrors
        raise create_config_error(
            f"Invalid configuration: {e}",
            code=ErrorCode.INVALID_CONFIG,
            file_path=str(config_path) if config_path else None,
            operation="load_settings",
            original_error=e,
        ) from e


class SettingsLoader:
    """Thread-safe manager of the shared Settings instance.

    Uses double-checked locking to keep the common read path lock-free.
    """

    _instance: Settings | None = None
    _lock: threading.RLock = threading.RLock()

    def get_config(self) -> Settings:
        """Get the shared settings instance, loading it if necessary."""
        if self._instance is None:
            with self._lock:
                if self._instance is None:
                    self._instance = load_settings()

        return self._instance

    def reload_config(self, config_path: str | Path | None = None) -> Settings:
        """Reload the shared settings instance from configuration files."""
        with self._lock:
            self._instance = load_settings(config_path)

        return self._instance


_loader = SettingsLoader()


def get_config() -> Settings:
    """Get the shared settings instance (thread-safe)."""
    return _loader.get_config()


def reload_config(config_path: str | Path | None = None) -> Settings:
    """Reload the shared settings instance from configuration files."""
    return _loader.reload_config(config_path)


__all__ = [
    "SettingsLoader",
    "default_config_paths",
    "get_config",
    "load_settings",
    "reload_config",
]
