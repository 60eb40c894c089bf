"""File permission utilities.

The cache database holds a full copy of the remote base, so newly created
database files are restricted to their owner.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from linkvault.shared.errors import ApplicationError, ErrorCode, ErrorContext

logger = logging.getLogger(__name__)

OWNER_READ_WRITE = 0o600


def set_secure_file_permissions(file_path: Path | str) -> None:
    """Restrict a file to owner read/write (600).

    On Windows only the read-only flag is honoured by chmod, so the call
    is skipped there.

    Args:
        file_path: Path to the file to secure

    Raises:
        ApplicationError: If the file does not exist or cannot be changed
    """
    file_path = Path(file_path)
    context = ErrorContext(
        operation="set_secure_file_permissions",
        file_path=str(file_path),
    )

    if not file_path.exists():
        raise ApplicationError(
            ErrorCode.FILE_NOT_FOUND,
            f"Cannot set permissions: file does not exist: {file_path}",
            context,
        )

    if sys.platform == "win32":
        logger.debug("Skipping chmod on Windows for: %s", file_path)
        return

    try:
        file_path.chmod(OWNER_READ_WRITE)
    except OSError as e:
        raise ApplicationError(
            ErrorCode.PERMISSION_DENIED,
            f"Cannot set permissions: {file_path}",
            context,
            original_error=e,
        ) from e

    logger.debug("Permissions (600) set for: %s", file_path)
