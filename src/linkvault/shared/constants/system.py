"""
System Configuration Constants

This module contains constants related to application metadata,
file system locations and logging defaults.
"""

# Base file size unit (1KB)
BASE_FILE_SIZE = 1024  # 1KB in bytes

# Base time units
BASE_SECOND = 1
BASE_MINUTE = 60 * BASE_SECOND


class Application:
    """Application metadata constants."""

    NAME = "LinkVault"
    VERSION = "0.1.0"
    DESCRIPTION = "Linked-record resolution cache for Airtable bases"


class FileSystem:
    """File system related constants."""

    HOME_DIR = ".linkvault"
    CONFIG_DIRECTORY = "config"
    CONFIG_FILENAME = "config.toml"
    CACHE_DIRECTORY = "cache"
    CACHE_DB_FILENAME = "linkvault_cache.db"
    LOG_DIRECTORY = "logs"
    ENV_FILENAME = ".env"


class Logging:
    """Logging defaults."""

    DEFAULT_LEVEL = "INFO"
    DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    DEFAULT_FILE_PATH = "logs/linkvault.log"
    MAX_BYTES = 10 * BASE_FILE_SIZE**2  # 10MB
    BACKUP_COUNT = 5
    LOG_TIME_FORMAT = "[%H:%M:%S]"
