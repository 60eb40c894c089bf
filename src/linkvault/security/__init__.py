"""Security helpers for LinkVault."""

from .permissions import set_secure_file_permissions

__all__ = ["set_secure_file_permissions"]
