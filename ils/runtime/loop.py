"""Main interactive event loop for the terminal UI.

Blocks on the next key (or resize) event, hands it to the controller and
redraws once per event. The read only times out while a PDF preview is
still loading, so the placeholder gets replaced without a keypress.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from ..input.reader import read_key
from ..render import image_placement, render_frame
from .controller import BrowserController
from .exit import EXIT_NONE, ExitIntent
from .terminal import TerminalController

PENDING_PREVIEW_POLL_MS = 100


@dataclass(frozen=True)
class RuntimeLoopIO:
    """Terminal endpoints used by ``run_main_loop``; swapped out in tests."""

    read_key: Callable[[int | None], str]
    write: Callable[[str], None]
    terminal: TerminalController | None = None


def run_main_loop(controller: BrowserController, io: RuntimeLoopIO) -> ExitIntent:
    """Run until the controller reports an exit intent.

    End of input counts as a plain quit.
    """
    kitty_image_state: tuple[str, int, int, int, int] | None = None
    terminal = io.terminal
    while True:
        context = controller.render_context()
        render_frame(context, io.write)

        if terminal is not None and terminal.supports_kitty_graphics():
            placement = None if context.show_help else image_placement(context)
            desired = None if placement is None else (str(placement[0]), *placement[1:])
            if desired != kitty_image_state:
                if kitty_image_state is not None:
                    terminal.kitty_clear_images()
                if placement is not None:
                    terminal.kitty_draw_png(
                        Path(placement[0]),
                        col=placement[1],
                        row=placement[2],
                        width_cells=placement[3],
                        height_cells=placement[4],
                    )
                kitty_image_state = desired

        timeout_ms = PENDING_PREVIEW_POLL_MS if controller.has_pending_previews() else None
        try:
            key = io.read_key(timeout_ms)
        except KeyboardInterrupt:
            continue
        if key == "":
            if timeout_ms is None:
                return EXIT_NONE
            continue

        intent = controller.handle_key(key)
        if intent is not None:
            return intent
