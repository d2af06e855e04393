"""Exit intents and the temp-file protocol read by the shell wrapper.

The wrapper reads ``EXIT_TARGET_PATH`` after the process ends: a directory is
``cd``-ed into, anything else is echoed, and the file is removed. A pure quit
leaves no file behind. Opening in the file manager spawns the platform
``open`` command instead of touching the file.
"""

from __future__ import annotations

import contextlib
import logging
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Union

LOGGER = logging.getLogger(__name__)

EXIT_TARGET_PATH = Path("/tmp/ils_cd")


@dataclass(frozen=True)
class ExitNone:
    pass


@dataclass(frozen=True)
class ExitTarget:
    """Leave the shell at ``path``: cd for a directory, echo for a file."""

    path: Path


@dataclass(frozen=True)
class ExitOpenInFileManager:
    path: Path


ExitIntent = Union[ExitNone, ExitTarget, ExitOpenInFileManager]
EXIT_NONE = ExitNone()


def write_exit_target(path: Path, target_file: Path | None = None) -> None:
    """Write ``path`` for the shell wrapper; failures are logged only."""
    destination = target_file if target_file is not None else EXIT_TARGET_PATH
    try:
        destination.write_text(str(path), encoding="utf-8")
    except OSError as exc:
        LOGGER.warning("could not write exit target %s: %s", destination, exc)


def clear_exit_target(target_file: Path | None = None) -> None:
    destination = target_file if target_file is not None else EXIT_TARGET_PATH
    with contextlib.suppress(FileNotFoundError):
        destination.unlink()


def file_manager_command(path: Path) -> list[str]:
    opener = "open" if sys.platform == "darwin" else "xdg-open"
    return [opener, str(path)]


def open_in_file_manager(path: Path) -> str | None:
    try:
        subprocess.Popen(
            file_manager_command(path),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as exc:
        LOGGER.warning("could not open %s in file manager: %s", path, exc)
        return f"Cannot open file manager: {exc}"
    return None


def apply_exit_intent(intent: ExitIntent, target_file: Path | None = None) -> str | None:
    """Carry out ``intent`` after the terminal is restored.

    Returns an error message suitable for stderr, or ``None``.
    """
    if isinstance(intent, ExitTarget):
        write_exit_target(intent.path, target_file)
        return None
    clear_exit_target(target_file)
    if isinstance(intent, ExitOpenInFileManager):
        return open_in_file_manager(intent.path)
    return None
