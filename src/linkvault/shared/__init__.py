"""LinkVault Shared Module.

This package contains shared constants, logging helpers and error handling
used across LinkVault.
"""

__all__ = ["constants", "errors", "logging"]
