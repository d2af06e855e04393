"""Grid layout and screen partitioning.

Pure functions: no terminal queries, no state. The caller passes in the
viewport it measured.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

NAME_WIDTH = 20
CELL_WIDTH = NAME_WIDTH + 2
HEADER_ROWS = 1
FOOTER_ROWS = 1
MIN_PREVIEW_RATIO = 0.2
MAX_PREVIEW_RATIO = 1.0


@dataclass(frozen=True)
class GridLayout:
    """Column count and number of grid rows that fit on screen."""

    num_cols: int
    visible_rows: int


@dataclass(frozen=True)
class ScreenGeometry:
    """Row budget for the entry grid and the optional preview pane."""

    grid_rows: int
    preview_rows: int

    @property
    def grid_top(self) -> int:
        return HEADER_ROWS

    @property
    def separator_row(self) -> int:
        return HEADER_ROWS + self.grid_rows

    @property
    def preview_top(self) -> int:
        return self.separator_row + 1


def compute_layout(entry_count: int, width: int, available_rows: int, list_mode: bool) -> GridLayout:
    """Pick a column count for ``entry_count`` cells.

    List mode is always one column. Grid mode searches every column count that
    fits the width and keeps the one whose row count is closest to it (the most
    square arrangement) among those that fit ``available_rows``; ties keep the
    smaller column count. When nothing fits, the clamped ``ceil(sqrt(n))`` guess
    is kept and the grid scrolls.
    """
    visible_rows = max(1, available_rows)
    if list_mode:
        return GridLayout(num_cols=1, visible_rows=visible_rows)

    n = max(1, entry_count)
    max_cols = max(1, width // CELL_WIDTH)
    best_cols = min(max(1, math.ceil(math.sqrt(n))), max_cols)
    best_score: int | None = None
    for cols in range(1, max_cols + 1):
        rows_needed = -(-n // cols)
        if rows_needed > available_rows:
            continue
        score = abs(cols - rows_needed)
        if best_score is None or score < best_score:
            best_score = score
            best_cols = cols
    return GridLayout(num_cols=best_cols, visible_rows=visible_rows)


def clamp_preview_ratio(ratio: float) -> float:
    return max(MIN_PREVIEW_RATIO, min(MAX_PREVIEW_RATIO, ratio))


def compute_geometry(height: int, preview_visible: bool, preview_ratio: float) -> ScreenGeometry:
    """Split the rows between header and footer into grid and preview areas."""
    body = max(1, height - HEADER_ROWS - FOOTER_ROWS)
    if not preview_visible:
        return ScreenGeometry(grid_rows=body, preview_rows=0)
    ratio = clamp_preview_ratio(preview_ratio)
    grid_rows = max(1, int(body * (1.0 - ratio)))
    preview_rows = max(0, body - grid_rows - 1)
    return ScreenGeometry(grid_rows=grid_rows, preview_rows=preview_rows)
