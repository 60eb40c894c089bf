"""Configuration domain models."""

from __future__ import annotations

from .api_settings import APISettings, AirtableSettings
from .app_settings import AppSettings, LoggingSettings
from .cache_settings import CacheSettings
from .schema_settings import SchemaSettings
from .settings import Settings

__all__ = [
    "APISettings",
    "AirtableSettings",
    "AppSettings",
    "CacheSettings",
    "LoggingSettings",
    "SchemaSettings",
    "Settings",
]
