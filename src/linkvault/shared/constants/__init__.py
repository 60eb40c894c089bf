"""
LinkVault Constants Module

This module provides centralized constants for the LinkVault application.
All magic values and configuration constants are defined here to ensure
consistency across the codebase.
"""

from .api import AirtableConfig, HTTPStatusCodes, NetworkConfig
from .cache import CacheSlots, SQLiteStore
from .cli import CLICommands, CLIDefaults, CLIHelp, CLIMessages
from .system import BASE_SECOND, Application, FileSystem, Logging
from .tables import Tables

__all__ = [
    "BASE_SECOND",
    "AirtableConfig",
    "Application",
    "CLICommands",
    "CLIDefaults",
    "CLIHelp",
    "CLIMessages",
    "CacheSlots",
    "FileSystem",
    "HTTPStatusCodes",
    "Logging",
    "NetworkConfig",
    "SQLiteStore",
    "Tables",
]
