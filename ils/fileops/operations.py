"""Filesystem mutations behind the copy/rename/create/trash/delete commands.

``FileMutator`` holds the raw primitives shared with undo/redo and raises
``OSError``. ``FileOperations`` validates user input, re-checks that the
source still exists, and raises ``FileOperationError`` with a message fit for
the status line.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
from pathlib import Path

from send2trash import send2trash

from ..errors import FileOperationError
from .undo import CopyAction, CreateAction, RenameAction

LOGGER = logging.getLogger(__name__)


class FileMutator:
    """Low-level mutations; never overwrites an existing destination."""

    def copy(self, src: Path, dest: Path) -> None:
        if os.path.lexists(dest):
            raise FileExistsError(f"{dest} already exists")
        try:
            if src.is_dir() and not src.is_symlink():
                shutil.copytree(src, dest, symlinks=True)
            else:
                shutil.copy2(src, dest, follow_symlinks=False)
        except OSError:
            # dest did not exist before this call, so anything there is ours.
            if os.path.lexists(dest):
                self.remove(dest)
            raise

    def rename(self, src: Path, dest: Path) -> None:
        if os.path.lexists(dest):
            raise FileExistsError(f"{dest} already exists")
        os.rename(src, dest)

    def create(self, path: Path, is_dir: bool) -> None:
        if is_dir:
            path.mkdir()
        else:
            path.touch(exist_ok=False)

    def remove(self, path: Path) -> None:
        if not os.path.lexists(path):
            raise FileNotFoundError(f"{path} does not exist")
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()


def _copy_name(name: str, attempt: int) -> str:
    """``notes.txt`` -> ``notes copy.txt``, ``notes copy 2.txt``, ..."""
    path = Path(name)
    stem, suffix = (name, "") if name.startswith(".") and path.suffix == name else (path.stem, path.suffix)
    label = " copy" if attempt == 1 else f" copy {attempt}"
    return f"{stem}{label}{suffix}"


def unique_copy_path(src: Path) -> Path:
    attempt = 1
    while True:
        candidate = src.with_name(_copy_name(src.name, attempt))
        if not os.path.lexists(candidate):
            return candidate
        attempt += 1


def _validate_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise FileOperationError("Name cannot be empty.")
    if cleaned in {".", ".."} or "/" in cleaned or "\0" in cleaned:
        raise FileOperationError(f"Invalid name: {cleaned!r}")
    return cleaned


def _describe(exc: OSError) -> str:
    return exc.strerror or str(exc)


class FileOperations:
    """User-facing file commands; recordable ones return their undo action."""

    def __init__(self, mutator: FileMutator | None = None) -> None:
        self.mutator = mutator if mutator is not None else FileMutator()

    def _require_existing(self, path: Path) -> None:
        if not os.path.lexists(path):
            raise FileOperationError(f"{path.name} no longer exists.")

    def copy(self, src: Path) -> CopyAction:
        self._require_existing(src)
        dest = unique_copy_path(src)
        try:
            self.mutator.copy(src, dest)
        except (OSError, shutil.Error) as exc:
            LOGGER.info("copy %s -> %s failed: %s", src, dest, exc)
            raise FileOperationError(f"Copy failed: {exc}") from exc
        return CopyAction(src=src, dest=dest)

    def rename(self, old: Path, new_name: str) -> RenameAction:
        self._require_existing(old)
        new = old.with_name(_validate_name(new_name))
        if new == old:
            raise FileOperationError("Name unchanged.")
        try:
            self.mutator.rename(old, new)
        except FileExistsError as exc:
            raise FileOperationError(f"{new.name} already exists.") from exc
        except OSError as exc:
            LOGGER.info("rename %s -> %s failed: %s", old, new, exc)
            raise FileOperationError(f"Rename failed: {_describe(exc)}") from exc
        return RenameAction(old=old, new=new)

    def create(self, directory: Path, name: str, is_dir: bool) -> CreateAction:
        path = directory / _validate_name(name)
        if os.path.lexists(path):
            raise FileOperationError(f"{path.name} already exists.")
        try:
            self.mutator.create(path, is_dir)
        except OSError as exc:
            LOGGER.info("create %s failed: %s", path, exc)
            raise FileOperationError(f"Create failed: {_describe(exc)}") from exc
        return CreateAction(path=path, is_dir=is_dir)

    def trash(self, path: Path) -> None:
        """Move ``path`` to the platform trash. Not undoable."""
        self._require_existing(path)
        try:
            send2trash(str(path))
        except OSError as exc:
            LOGGER.info("trash %s failed: %s", path, exc)
            raise FileOperationError(f"Trash failed: {exc}") from exc

    def delete(self, path: Path) -> None:
        """Remove ``path`` permanently. Not undoable."""
        self._require_existing(path)
        try:
            self.mutator.remove(path)
        except OSError as exc:
            LOGGER.info("delete %s failed: %s", path, exc)
            raise FileOperationError(f"Delete failed: {_describe(exc)}") from exc

    def toggle_executable(self, path: Path) -> bool:
        """Flip the owner-execute bit and return whether it is now set."""
        self._require_existing(path)
        try:
            mode = path.stat().st_mode
            new_mode = mode ^ stat.S_IXUSR
            path.chmod(stat.S_IMODE(new_mode))
        except OSError as exc:
            LOGGER.info("chmod %s failed: %s", path, exc)
            raise FileOperationError(f"Permission change failed: {_describe(exc)}") from exc
        return bool(new_mode & stat.S_IXUSR)
