"""Single-line prompt used by rename, create, and delete confirmation."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace

from ..browser.modes import NORMAL, PROMPT_CONFIRM_DELETE, Mode, PromptMode

CONFIRM_KEY = "y"


@dataclass(frozen=True)
class PromptKeyContext:
    commit: Callable[[PromptMode], None]


def handle_prompt_key(key: str, mode: PromptMode, context: PromptKeyContext) -> Mode:
    if mode.action == PROMPT_CONFIRM_DELETE:
        if key == CONFIRM_KEY:
            context.commit(mode)
        return NORMAL
    if key == "ESC":
        return NORMAL
    if key == "ENTER":
        context.commit(mode)
        return NORMAL
    if key == "BACKSPACE":
        return replace(mode, text=mode.text[:-1])
    if len(key) == 1 and key.isprintable():
        return replace(mode, text=mode.text + key)
    return mode
