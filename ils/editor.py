"""Editor launch helper for the edit action.

Runs ``$EDITOR`` (``vim`` when unset) while temporarily leaving raw and
alternate-screen mode. Returns an error message string instead of raising
for UI-friendly handling.
"""

from __future__ import annotations

import os
import shlex
import subprocess
from pathlib import Path
from typing import Callable

DEFAULT_EDITOR = "vim"


def editor_command() -> list[str]:
    editor_env = os.environ.get("EDITOR", "").strip()
    return shlex.split(editor_env) if editor_env else [DEFAULT_EDITOR]


def launch_editor(
    target: Path,
    disable_tui_mode: Callable[[], None],
    enable_tui_mode: Callable[[], None],
) -> str | None:
    try:
        cmd = editor_command()
    except ValueError as exc:
        return f"Cannot edit: bad $EDITOR ({exc})"
    if not cmd:
        return "Cannot edit: $EDITOR is empty."

    disable_tui_mode()
    try:
        subprocess.run([*cmd, str(target)], check=False)
    except OSError as exc:
        return f"Failed to launch editor: {exc}"
    finally:
        enable_tui_mode()
    return None
