"""Interaction modes as a closed set of immutable variants.

Exactly one mode is active. Dispatch sites check the variant with
``isinstance`` and fall through to ``NormalMode`` last.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union

PROMPT_RENAME = "rename"
PROMPT_NEW_FILE = "new_file"
PROMPT_NEW_DIR = "new_dir"
PROMPT_CONFIRM_DELETE = "confirm_delete"

PROMPT_LABELS = {
    PROMPT_RENAME: "Rename to",
    PROMPT_NEW_FILE: "New file",
    PROMPT_NEW_DIR: "New directory",
    PROMPT_CONFIRM_DELETE: "Delete permanently? (y/N)",
}


@dataclass(frozen=True)
class NormalMode:
    pass


@dataclass(frozen=True)
class HelpMode:
    pass


@dataclass(frozen=True)
class FuzzyFindMode:
    query: str = ""
    jump_on_unique: bool = True
    prev_match_count: int = 0


@dataclass(frozen=True)
class PromptMode:
    """Single-line text entry for an operation that needs a name or confirmation."""

    action: str
    text: str = ""
    target: Path | None = None

    @property
    def label(self) -> str:
        return PROMPT_LABELS.get(self.action, self.action)


Mode = Union[NormalMode, HelpMode, FuzzyFindMode, PromptMode]

NORMAL = NormalMode()
HELP = HelpMode()
