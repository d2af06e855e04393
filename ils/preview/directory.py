"""Directory previews and recursive size measurement.

Both run synchronously on the calling thread. ``directory_size`` walks the
whole tree with no depth or entry limit, so large trees stall the caller.
"""

from __future__ import annotations

import os
from pathlib import Path

from ..browser.entries import is_hidden_name
from .syntax import sanitize_terminal_text

_SIZE_UNITS = ("B", "K", "M", "G", "T", "P")


def format_size(num_bytes: int) -> str:
    size = float(num_bytes)
    for unit in _SIZE_UNITS:
        if size < 1024 or unit == _SIZE_UNITS[-1]:
            if unit == "B":
                return f"{int(size)}{unit}"
            return f"{size:.1f}{unit}"
        size /= 1024
    return f"{num_bytes}B"


def directory_size(root: Path) -> int:
    """Total apparent size of regular files under ``root``; symlinks are not followed."""
    total = 0
    stack = [root]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                for item in it:
                    try:
                        if item.is_dir(follow_symlinks=False):
                            stack.append(Path(item.path))
                        elif item.is_file(follow_symlinks=False):
                            total += item.stat(follow_symlinks=False).st_size
                    except OSError:
                        continue
        except OSError:
            continue
    return total


def entry_size(path: Path) -> int | None:
    """Size of a file, or recursive size of a directory; ``None`` if unreadable."""
    try:
        if path.is_dir() and not path.is_symlink():
            return directory_size(path)
        return path.stat().st_size
    except OSError:
        return None


def build_directory_preview(directory: Path, show_hidden: bool, max_rows: int) -> list[str]:
    """Summary lines for a directory: counts, total size, then a child listing."""
    try:
        with os.scandir(directory) as it:
            children = [item for item in it if show_hidden or not is_hidden_name(item.name)]
    except OSError as exc:
        return [f"(cannot read directory: {exc.strerror or exc})"]

    dirs: list[str] = []
    files: list[str] = []
    for item in children:
        try:
            is_dir = item.is_dir()
        except OSError:
            is_dir = False
        (dirs if is_dir else files).append(item.name)
    dirs.sort()
    files.sort()

    lines = [
        f"{len(dirs)} directories, {len(files)} files",
        f"Total size: {format_size(directory_size(directory))}",
        "",
    ]
    lines.extend(sanitize_terminal_text(name) + "/" for name in dirs)
    lines.extend(sanitize_terminal_text(name) for name in files)
    if len(lines) > max_rows > 0:
        hidden = len(lines) - max_rows + 1
        lines = lines[: max_rows - 1] + [f"... {hidden} more"]
    return lines
