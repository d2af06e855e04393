"""Browsing core: entries, grid layout, selection, matching, and modes.

Nothing in this package touches the terminal.
"""

from __future__ import annotations

from .entries import LOCAL_FILESYSTEM, Entry, LocalFileSystem, load_entries, sort_entries
from .fuzzy import FuzzyMatch, fuzzy_match, matched_prefix_length
from .layout import CELL_WIDTH, NAME_WIDTH, GridLayout, ScreenGeometry, compute_geometry, compute_layout
from .modes import HELP, NORMAL, FuzzyFindMode, HelpMode, Mode, NormalMode, PromptMode
from .selection import DOWN, LEFT, RIGHT, UP, SelectionModel, SelectionState

__all__ = [
    "CELL_WIDTH",
    "DOWN",
    "Entry",
    "FuzzyFindMode",
    "FuzzyMatch",
    "GridLayout",
    "HELP",
    "HelpMode",
    "LEFT",
    "LOCAL_FILESYSTEM",
    "LocalFileSystem",
    "Mode",
    "NAME_WIDTH",
    "NORMAL",
    "NormalMode",
    "PromptMode",
    "RIGHT",
    "ScreenGeometry",
    "SelectionModel",
    "SelectionState",
    "UP",
    "compute_geometry",
    "compute_layout",
    "fuzzy_match",
    "load_entries",
    "matched_prefix_length",
    "sort_entries",
]
