"""Interactive session bootstrap.

Loads configuration, builds the controller with its terminal-facing
collaborators, runs the event loop inside raw mode, and carries out the
resulting exit intent once the terminal is restored.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from ..editor import launch_editor
from ..errors import DirectoryLoadError, IlsError
from ..input.reader import drain_pending_keys, read_key
from .config import load_app_config, save_settings
from .controller import BrowserController
from .exit import apply_exit_intent, write_exit_target
from .loop import RuntimeLoopIO, run_main_loop
from .terminal import ResizeNotifier, TerminalController

LOGGER = logging.getLogger(__name__)


def run_browser(start_dir: Path, no_color: bool = False) -> int:
    """Browse from ``start_dir``; raises ``IlsError`` for setup failures."""
    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    if not (os.isatty(stdin_fd) and os.isatty(stdout_fd)):
        raise IlsError("stdin and stdout must be a terminal")

    loaded = load_app_config()
    if loaded.warning:
        LOGGER.warning("config: %s", loaded.warning)

    terminal = TerminalController(stdin_fd, stdout_fd)
    controller = BrowserController(
        loaded.config,
        start_dir,
        launch_editor=lambda path: launch_editor(path, terminal.disable_tui_mode, terminal.enable_tui_mode),
        discard_pending_input=lambda: drain_pending_keys(stdin_fd),
        save_settings=save_settings,
        write_exit_target=write_exit_target,
        no_color=no_color,
        show_help=loaded.first_run,
        status_message=loaded.warning,
    )
    try:
        controller.start()
    except DirectoryLoadError as exc:
        raise IlsError(exc.user_message) from exc

    notifier = ResizeNotifier()
    notifier.install()
    try:
        with terminal.raw_mode():
            intent = run_main_loop(
                controller,
                RuntimeLoopIO(
                    read_key=lambda timeout_ms: read_key(stdin_fd, timeout_ms, wakeup_fd=notifier.read_fd),
                    write=terminal.write,
                    terminal=terminal,
                ),
            )
    finally:
        notifier.close()

    LOGGER.debug("session ended with %r", intent)
    error = apply_exit_intent(intent)
    if error:
        print(f"ils: {error}", file=sys.stderr)
    return 0
