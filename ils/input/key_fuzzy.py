"""Fuzzy-find mode: incremental prefix search with auto-navigation.

Each keystroke produces the next ``FuzzyFindMode`` (or ``NORMAL`` when the
search ends). Typing that narrows the matches to exactly one opens that
entry, as long as the previous keystroke still had at least one match.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace

from ..browser.fuzzy import fuzzy_match
from ..browser.modes import NORMAL, FuzzyFindMode, Mode
from ..browser.selection import DOWN, LEFT, RIGHT, UP, SelectionModel
from ..runtime.config import Keybindings

ARROW_DIRECTIONS = {"UP": UP, "DOWN": DOWN, "LEFT": LEFT, "RIGHT": RIGHT}


@dataclass(frozen=True)
class FuzzyKeyContext:
    """Selection plus the navigation callbacks fuzzy mode may trigger."""

    keybindings: Keybindings
    selection: SelectionModel
    case_sensitive: bool
    open_selected: Callable[[], None]
    go_back: Callable[[], None]
    go_home: Callable[[], None]
    activate_selected: Callable[[], None]
    quit: Callable[[], None]
    quit_file_manager: Callable[[], None]
    discard_pending_input: Callable[[], None]


def enter_fuzzy_mode(selection: SelectionModel, jump_on_unique: bool = True) -> FuzzyFindMode:
    return FuzzyFindMode(query="", jump_on_unique=jump_on_unique, prev_match_count=len(selection.entries))


def _restart(mode: FuzzyFindMode, selection: SelectionModel) -> FuzzyFindMode:
    return replace(mode, query="", prev_match_count=len(selection.entries))


def _append(key: str, mode: FuzzyFindMode, context: FuzzyKeyContext) -> Mode:
    selection = context.selection
    query = mode.query + key
    match = fuzzy_match(query, selection.names(), context.case_sensitive)
    if match.count != 1:
        return replace(mode, query=query, prev_match_count=match.count)

    selection.select(match.first_index)
    if mode.prev_match_count < 1:
        return replace(mode, query=query, prev_match_count=match.count)

    context.open_selected()
    context.discard_pending_input()
    if mode.jump_on_unique:
        return NORMAL
    return _restart(mode, selection)


def _backspace(mode: FuzzyFindMode, context: FuzzyKeyContext) -> FuzzyFindMode:
    selection = context.selection
    query = mode.query[:-1]
    match = fuzzy_match(query, selection.names(), context.case_sensitive)
    if match.count == 1:
        selection.select(match.first_index)
    return replace(mode, query=query, prev_match_count=match.count)


def handle_fuzzy_key(key: str, mode: FuzzyFindMode, context: FuzzyKeyContext) -> Mode:
    """Apply one key in fuzzy mode and return the mode that follows."""
    keys = context.keybindings
    if key == "ESC":
        return NORMAL
    if key in keys.keys_for("quit"):
        context.quit()
        return NORMAL
    if key in keys.keys_for("quit_file_manager"):
        context.quit_file_manager()
        return NORMAL
    if key in keys.keys_for("fuzzy_find"):
        context.go_back()
        return _restart(mode, context.selection)
    if key in keys.keys_for("help"):
        context.go_home()
        return _restart(mode, context.selection)
    if key == "BACKSPACE":
        return _backspace(mode, context)
    if key == "ENTER":
        context.activate_selected()
        return NORMAL
    if key in ARROW_DIRECTIONS:
        context.selection.move(ARROW_DIRECTIONS[key])
        return mode
    if len(key) == 1 and key.isprintable():
        return _append(key, mode, context)
    return mode
