"""Entry list, selected index, and grid scroll window for one directory.

Every public method leaves the selected row inside the visible window. Reload
is transactional: the directory is listed before any field changes, so a
failed listing leaves the model untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path

from ..errors import DirectoryLoadError
from .entries import LOCAL_FILESYSTEM, Entry, LocalFileSystem, load_entries, sibling_directories
from .layout import compute_layout

LOGGER = logging.getLogger(__name__)

UP = "up"
DOWN = "down"
LEFT = "left"
RIGHT = "right"
DIRECTIONS = (UP, DOWN, LEFT, RIGHT)


@dataclass(frozen=True)
class SelectionState:
    """Snapshot of the browsing position inside one directory."""

    entries: tuple[Entry, ...] = ()
    selected: int = 0
    scroll_offset: int = 0
    num_cols: int = 1


class SelectionModel:
    """Owns the current directory listing and the cursor over it."""

    def __init__(
        self,
        directory: Path,
        *,
        show_hidden: bool = False,
        filesystem: LocalFileSystem = LOCAL_FILESYSTEM,
    ) -> None:
        self.current_dir = directory
        self.show_hidden = show_hidden
        self.filesystem = filesystem
        self.state = SelectionState()
        self.visible_rows = 1
        self._width = 80
        self._available_rows = 1
        self._list_mode = False

    @property
    def entries(self) -> tuple[Entry, ...]:
        return self.state.entries

    @property
    def selected(self) -> int:
        return self.state.selected

    @property
    def scroll_offset(self) -> int:
        return self.state.scroll_offset

    @property
    def num_cols(self) -> int:
        return self.state.num_cols

    @property
    def selected_entry(self) -> Entry | None:
        if not self.state.entries:
            return None
        return self.state.entries[self.state.selected]

    @property
    def list_mode(self) -> bool:
        return self._list_mode

    def names(self) -> list[str]:
        return [entry.name for entry in self.state.entries]

    def row_of(self, index: int) -> int:
        return index // self.state.num_cols

    def set_viewport(self, width: int, available_rows: int, list_mode: bool) -> None:
        """Record the grid viewport and re-derive layout and scroll."""
        self._width = width
        self._available_rows = available_rows
        self._list_mode = list_mode
        self.state = self._apply_layout(self.state)

    def _apply_layout(self, state: SelectionState) -> SelectionState:
        layout = compute_layout(len(state.entries), self._width, self._available_rows, self._list_mode)
        self.visible_rows = layout.visible_rows
        selected = min(state.selected, max(0, len(state.entries) - 1))
        state = replace(state, num_cols=layout.num_cols, selected=selected)
        return self._scrolled_into_view(state)

    def _scrolled_into_view(self, state: SelectionState) -> SelectionState:
        row = state.selected // state.num_cols
        scroll = state.scroll_offset
        if row < scroll:
            scroll = row
        elif row >= scroll + self.visible_rows:
            scroll = row - self.visible_rows + 1
        total_rows = -(-len(state.entries) // state.num_cols) if state.entries else 0
        scroll = max(0, min(scroll, max(0, total_rows - self.visible_rows), row))
        if scroll == state.scroll_offset:
            return state
        return replace(state, scroll_offset=scroll)

    def scroll_into_view(self) -> None:
        self.state = self._scrolled_into_view(self.state)

    def select(self, index: int) -> None:
        if not self.state.entries:
            return
        index = max(0, min(index, len(self.state.entries) - 1))
        self.state = self._scrolled_into_view(replace(self.state, selected=index))

    def select_path(self, path: Path) -> bool:
        for index, entry in enumerate(self.state.entries):
            if entry.path == path:
                self.select(index)
                return True
        return False

    def _step(self, selected: int, direction: str) -> int | None:
        count = len(self.state.entries)
        cols = self.state.num_cols
        if direction == UP:
            return selected - cols if selected >= cols else None
        if direction == DOWN:
            return selected + cols if selected + cols < count else None
        if direction == LEFT:
            return selected - 1 if selected > 0 and selected % cols != 0 else None
        if direction == RIGHT:
            return selected + 1 if selected + 1 < count and (selected + 1) % cols != 0 else None
        raise ValueError(f"unknown direction: {direction!r}")

    def move(self, direction: str, amount: int = 1) -> bool:
        """Move up to ``amount`` steps row-major; stop quietly at a boundary."""
        selected = self.state.selected
        for _ in range(max(1, amount)):
            nxt = self._step(selected, direction)
            if nxt is None:
                break
            selected = nxt
        if selected == self.state.selected:
            return False
        self.select(selected)
        return True

    def reload(self, directory: Path | None = None) -> None:
        """Load ``directory`` (default: the current one) and reset the cursor.

        Raises ``DirectoryLoadError`` without modifying anything on failure.
        """
        target = self.current_dir if directory is None else directory
        try:
            entries = load_entries(target, self.show_hidden, self.filesystem)
        except OSError as exc:
            LOGGER.info("reload of %s failed: %s", target, exc)
            raise DirectoryLoadError(target, exc) from exc
        self.current_dir = target
        self.state = self._apply_layout(SelectionState(entries=tuple(entries)))

    def sibling(self, step: int) -> Path | None:
        """Move to the next (``step=1``) or previous (``-1``) sibling directory.

        Wraps at both ends. Returns the new directory, or ``None`` when there is
        nothing to switch to.
        """
        try:
            siblings = sibling_directories(self.current_dir, self.show_hidden, self.filesystem)
        except OSError as exc:
            raise DirectoryLoadError(self.current_dir.parent, exc) from exc
        if len(siblings) < 2 or self.current_dir not in siblings:
            return None
        index = siblings.index(self.current_dir)
        target = siblings[(index + step) % len(siblings)]
        self.reload(target)
        return target
