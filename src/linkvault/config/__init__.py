"""LinkVault Configuration Module

This module provides unified access to configuration models and settings
management:
- Settings: Main configuration facade
- Loader functions: get_config, load_settings, reload_config
- Domain models: App, Logging, API, Cache and table relationship settings
"""

from __future__ import annotations

from .loader import get_config, load_settings, reload_config
from .models import (
    APISettings,
    AirtableSettings,
    AppSettings,
    CacheSettings,
    LoggingSettings,
    SchemaSettings,
    Settings,
)

__all__ = [
    "APISettings",
    "AirtableSettings",
    "AppSettings",
    "CacheSettings",
    "LoggingSettings",
    "SchemaSettings",
    "Settings",
    "get_config",
    "load_settings",
    "reload_config",
]
