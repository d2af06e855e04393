"""Rendering engine for the browser screen.

``build_frame`` turns a ``RenderContext`` snapshot into exactly one styled
line per terminal row without touching any state; ``render_frame`` writes
the composed frame (or the help modal) to the terminal.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from ..ansi import display_width, fit_ansi_line, truncate_name
from ..browser.fuzzy import matched_prefix_length
from ..browser.layout import NAME_WIDTH, ScreenGeometry
from ..colors import Palette
from ..preview.pipeline import PreviewContent
from .help import render_help_page

SEPARATOR_CHAR = "─"
SELECTED_PREFIX = "> "
UNSELECTED_PREFIX = "  "


@dataclass(frozen=True)
class GridCell:
    """One visible entry: its index in the listing plus what to draw."""

    index: int
    name: str
    is_dir: bool
    info: str = ""


@dataclass
class RenderContext:
    width: int
    height: int
    geometry: ScreenGeometry
    header: str
    cells: list[GridCell]
    num_cols: int
    selected: int
    palette: Palette
    list_mode: bool = False
    show_dir_slash: bool = False
    match_query: str = ""
    case_sensitive: bool = False
    preview: PreviewContent | None = None
    footer: str = ""
    footer_is_status: bool = False
    show_help: bool = False
    help_lines: list[str] = field(default_factory=list)
    empty_message: str = "(empty)"


def build_status_line(left_text: str, width: int, right_text: str = "│ ? Help") -> str:
    usable = max(1, width - 1)
    if usable <= len(right_text):
        return right_text[-usable:]
    left_limit = max(0, usable - len(right_text) - 1)
    left = truncate_name(left_text, left_limit) if left_limit else ""
    gap = " " * max(0, usable - display_width(left) - len(right_text))
    return f"{left}{gap}{right_text}"


def _cell_style(cell: GridCell, selected: bool, palette: Palette) -> str:
    if selected:
        return palette.selected
    if cell.is_dir:
        return palette.directory
    return palette.file


def format_cell(cell: GridCell, context: RenderContext, name_width: int) -> str:
    """Prefix, styled name (match prefix highlighted) padded to ``name_width``."""
    palette = context.palette
    is_selected = cell.index == context.selected
    display_name = f"{cell.name}/" if cell.is_dir and context.show_dir_slash else cell.name
    display_name = truncate_name(display_name, name_width)
    style = _cell_style(cell, is_selected, palette)

    match_len = 0
    if context.match_query:
        match_len = min(matched_prefix_length(cell.name, context.match_query, context.case_sensitive), len(display_name))

    parts = [SELECTED_PREFIX if is_selected else UNSELECTED_PREFIX]
    if match_len:
        parts.append(f"{palette.match}{display_name[:match_len]}{palette.reset}")
    parts.append(f"{style}{display_name[match_len:]}{palette.reset}")
    parts.append(" " * max(0, name_width - display_width(display_name)))
    return "".join(parts)


def build_grid_rows(context: RenderContext) -> list[str]:
    rows: list[str] = []
    if not context.cells:
        return [f"{context.palette.dim}{context.empty_message}{context.palette.reset}"]
    if context.list_mode:
        info_width = max((display_width(cell.info) for cell in context.cells), default=0)
        name_width = max(1, context.width - len(SELECTED_PREFIX) - (info_width + 1 if info_width else 0))
        for cell in context.cells:
            line = format_cell(cell, context, name_width)
            if info_width:
                line += " " + f"{context.palette.dim}{cell.info.rjust(info_width)}{context.palette.reset}"
            rows.append(line)
        return rows
    cols = max(1, context.num_cols)
    for start in range(0, len(context.cells), cols):
        rows.append("".join(format_cell(cell, context, NAME_WIDTH) for cell in context.cells[start : start + cols]))
    return rows


def build_frame(context: RenderContext) -> list[str]:
    """Compose every screen row: header, grid, optional preview, footer."""
    width = max(1, context.width)
    palette = context.palette
    frame: list[str] = [f"{palette.header}{fit_ansi_line(' ' + context.header, width)}{palette.reset}"]

    grid = build_grid_rows(context)
    for row in range(context.geometry.grid_rows):
        frame.append(fit_ansi_line(grid[row] if row < len(grid) else "", width))

    if context.geometry.preview_rows > 0:
        frame.append(f"{palette.preview_border}{SEPARATOR_CHAR * width}{palette.reset}")
        lines = context.preview.lines if context.preview is not None else ()
        for row in range(context.geometry.preview_rows):
            text = lines[row].rstrip("\r\n") if row < len(lines) else ""
            frame.append(fit_ansi_line(text, width))

    while len(frame) < context.height - 1:
        frame.append(" " * width)

    footer = build_status_line(context.footer, width)
    if context.footer_is_status:
        footer = f"{palette.status}{footer}{palette.reset}"
    frame.append(fit_ansi_line(footer, width))
    return frame[: max(1, context.height)]


def compose_frame(context: RenderContext) -> str:
    if context.show_help:
        return render_help_page(context.width, context.height, context.help_lines)
    rows = build_frame(context)
    return "".join(f"\033[{row + 1};1H{line}" for row, line in enumerate(rows))


def render_frame(context: RenderContext, write: Callable[[str], None] | None = None) -> None:
    """Write the composed frame; defaults to raw writes on stdout."""
    payload = compose_frame(context)
    if write is not None:
        write(payload)
        return
    os.write(sys.stdout.fileno(), payload.encode("utf-8", errors="replace"))


def image_placement(context: RenderContext) -> tuple[Path, int, int, int, int] | None:
    """Return ``(path, col, row, width_cells, height_cells)`` for an image preview."""
    preview = context.preview
    if preview is None or preview.image_path is None or context.geometry.preview_rows <= 0:
        return None
    return (
        preview.image_path,
        1,
        context.geometry.preview_top + 1,
        context.width,
        context.geometry.preview_rows,
    )
