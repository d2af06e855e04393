"""Undo/redo stacks for reversible file mutations.

Only copy, rename, and create can be logged; trash and delete have no action
type here, so they can never end up on either stack.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .operations import FileMutator

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CopyAction:
    src: Path
    dest: Path


@dataclass(frozen=True)
class RenameAction:
    old: Path
    new: Path


@dataclass(frozen=True)
class CreateAction:
    path: Path
    is_dir: bool


UndoAction = Union[CopyAction, RenameAction, CreateAction]


def describe_action(action: UndoAction) -> str:
    if isinstance(action, CopyAction):
        return f"copy of {action.src.name} to {action.dest.name}"
    if isinstance(action, RenameAction):
        return f"rename of {action.old.name} to {action.new.name}"
    kind = "directory" if action.is_dir else "file"
    return f"creation of {kind} {action.path.name}"


class UndoLog:
    """Editor-style undo/redo: a fresh action clears the redo stack."""

    def __init__(self, mutator: FileMutator) -> None:
        self.mutator = mutator
        self.undo_stack: list[UndoAction] = []
        self.redo_stack: list[UndoAction] = []

    @property
    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    def record(self, action: UndoAction) -> None:
        self.undo_stack.append(action)
        self.redo_stack.clear()

    def _revert(self, action: UndoAction) -> None:
        if isinstance(action, CopyAction):
            self.mutator.remove(action.dest)
        elif isinstance(action, RenameAction):
            self.mutator.rename(action.new, action.old)
        else:
            self.mutator.remove(action.path)

    def _apply(self, action: UndoAction) -> None:
        if isinstance(action, CopyAction):
            self.mutator.copy(action.src, action.dest)
        elif isinstance(action, RenameAction):
            self.mutator.rename(action.old, action.new)
        else:
            self.mutator.create(action.path, action.is_dir)

    def undo(self) -> UndoAction | None:
        """Revert the latest action; a failed revert drops the action."""
        if not self.undo_stack:
            return None
        action = self.undo_stack.pop()
        try:
            self._revert(action)
        except OSError as exc:
            LOGGER.info("dropping %s from undo log: %s", describe_action(action), exc)
            return None
        self.redo_stack.append(action)
        return action

    def redo(self) -> UndoAction | None:
        """Re-apply the latest undone action; a failed redo drops the action."""
        if not self.redo_stack:
            return None
        action = self.redo_stack.pop()
        try:
            self._apply(action)
        except OSError as exc:
            LOGGER.info("dropping %s from redo log: %s", describe_action(action), exc)
            return None
        self.undo_stack.append(action)
        return action
