"""Directory entries and the filesystem capability they are resolved through.

Entries carry only a path. Whether an entry is a directory is asked of the
filesystem every time, so a listing can go stale between reload and use.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


class LocalFileSystem:
    """Read-only queries against the real filesystem."""

    def list_dir(self, directory: Path) -> list[Path]:
        """Return child paths of ``directory``; raises ``OSError`` on failure."""
        with os.scandir(directory) as it:
            return [directory / item.name for item in it]

    def is_dir(self, path: Path) -> bool:
        try:
            return path.is_dir()
        except OSError:
            return False

    def is_file(self, path: Path) -> bool:
        try:
            return path.is_file()
        except OSError:
            return False

    def exists(self, path: Path) -> bool:
        return os.path.lexists(path)


LOCAL_FILESYSTEM = LocalFileSystem()


@dataclass(frozen=True)
class Entry:
    """One child of the displayed directory."""

    path: Path
    filesystem: LocalFileSystem = field(default=LOCAL_FILESYSTEM, compare=False, repr=False)

    @property
    def name(self) -> str:
        return self.path.name or str(self.path)

    @property
    def is_dir(self) -> bool:
        return self.filesystem.is_dir(self.path)

    @property
    def is_file(self) -> bool:
        return self.filesystem.is_file(self.path)


def is_hidden_name(name: str) -> bool:
    return name.startswith(".")


def sort_entries(entries: list[Entry]) -> list[Entry]:
    """Order entries directories-first, then by name."""
    return sorted(entries, key=lambda entry: (not entry.is_dir, entry.name))


def load_entries(
    directory: Path,
    show_hidden: bool,
    filesystem: LocalFileSystem = LOCAL_FILESYSTEM,
) -> list[Entry]:
    """List, filter, and sort the children of ``directory``.

    Raises ``OSError`` when the directory cannot be read.
    """
    entries = [Entry(path, filesystem) for path in filesystem.list_dir(directory)]
    if not show_hidden:
        entries = [entry for entry in entries if not is_hidden_name(entry.name)]
    return sort_entries(entries)


def sibling_directories(
    directory: Path,
    show_hidden: bool,
    filesystem: LocalFileSystem = LOCAL_FILESYSTEM,
) -> list[Path]:
    """Return sorted subdirectories of ``directory``'s parent, including itself."""
    parent = directory.parent
    if parent == directory:
        return [directory]
    siblings = [
        path
        for path in filesystem.list_dir(parent)
        if filesystem.is_dir(path) and (show_hidden or not is_hidden_name(path.name) or path == directory)
    ]
    return sorted(siblings, key=lambda path: path.name)
