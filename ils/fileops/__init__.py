"""File mutations and their undo log."""

from __future__ import annotations

from .operations import FileMutator, FileOperations, unique_copy_path
from .undo import CopyAction, CreateAction, RenameAction, UndoAction, UndoLog, describe_action

__all__ = [
    "CopyAction",
    "CreateAction",
    "FileMutator",
    "FileOperations",
    "RenameAction",
    "UndoAction",
    "UndoLog",
    "describe_action",
    "unique_copy_path",
]
