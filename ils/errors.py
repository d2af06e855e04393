"""Typed errors surfaced to the interactive controller.

None of these are fatal: the controller turns them into a transient status
message and keeps the browser running.
"""

from __future__ import annotations

import errno
from pathlib import Path


class IlsError(Exception):
    """Base class for recoverable browser errors."""


class DirectoryLoadError(IlsError):
    """Reading a directory listing failed; prior navigation state is intact."""

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"{path}: {cause.strerror or cause}")

    @property
    def permission_denied(self) -> bool:
        return isinstance(self.cause, PermissionError) or self.cause.errno in {errno.EACCES, errno.EPERM}

    @property
    def user_message(self) -> str:
        if self.permission_denied:
            return f"Permission denied: {self.path} (check directory permissions)"
        reason = self.cause.strerror or str(self.cause)
        return f"Cannot open {self.path}: {reason}"


class FileOperationError(IlsError):
    """A copy/rename/create/trash/delete/chmod request could not be performed."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
