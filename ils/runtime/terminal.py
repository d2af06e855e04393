"""Terminal control helpers for the TUI session.

Owns raw-mode lifecycle, alternate-screen switching, and the SIGWINCH
self-pipe that wakes the blocking key read on resize. Also wraps Kitty
graphics protocol calls used for inline image previews.
"""

from __future__ import annotations

import base64
import contextlib
import os
import shutil
import signal
import termios
import tty
from pathlib import Path


class ResizeNotifier:
    """Self-pipe written by the SIGWINCH handler; the read end joins ``select``."""

    def __init__(self) -> None:
        self.read_fd, self.write_fd = os.pipe()
        os.set_blocking(self.read_fd, False)
        os.set_blocking(self.write_fd, False)
        self._previous_handler = None

    def _on_resize(self, signum, frame) -> None:
        with contextlib.suppress(BlockingIOError):
            os.write(self.write_fd, b"\0")

    def install(self) -> None:
        self._previous_handler = signal.signal(signal.SIGWINCH, self._on_resize)

    def close(self) -> None:
        if self._previous_handler is not None:
            signal.signal(signal.SIGWINCH, self._previous_handler)
            self._previous_handler = None
        os.close(self.read_fd)
        os.close(self.write_fd)


def terminal_size() -> tuple[int, int]:
    """Return ``(columns, rows)`` of the controlling terminal."""
    size = shutil.get_terminal_size((80, 24))
    return size.columns, size.lines


class TerminalController:
    """Manage terminal mode transitions and optional kitty image rendering."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with the cursor hidden."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, b"\x1b[?1049h\x1b[?25l")

    def disable_tui_mode(self) -> None:
        """Show the cursor, restore the main screen buffer and saved tty state."""
        os.write(self.stdout_fd, b"\x1b[?25h\x1b[?1049l")
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def write(self, data: str) -> None:
        payload = data.encode("utf-8", errors="replace")
        while payload:
            written = os.write(self.stdout_fd, payload)
            payload = payload[written:]

    def supports_kitty_graphics(self) -> bool:
        term = os.environ.get("TERM", "")
        if term == "xterm-kitty":
            return True
        return bool(os.environ.get("KITTY_WINDOW_ID"))

    def kitty_clear_images(self) -> None:
        os.write(self.stdout_fd, b"\x1b_Ga=d,d=A,q=2;\x1b\\")

    def kitty_draw_png(
        self,
        image_path: Path,
        col: int,
        row: int,
        width_cells: int,
        height_cells: int,
    ) -> None:
        """Draw an image file via kitty graphics protocol at cell-based coordinates."""
        encoded_path = base64.b64encode(str(image_path).encode("utf-8")).decode("ascii")
        payload = (
            f"\x1b7\x1b[{max(1, row)};{max(1, col)}H"
            f"\x1b_Ga=T,t=f,f=100,q=2,c={max(1, width_cells)},r={max(1, height_cells)};{encoded_path}\x1b\\"
            "\x1b8"
        )
        os.write(self.stdout_fd, payload.encode("ascii"))

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()
