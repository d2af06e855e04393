"""Shared preview cache and the background loader that fills it.

The cache maps absolute paths to one of four states. The main thread claims a
path (``NotLoaded`` -> ``Loading``) under the lock before spawning a worker,
so at most one worker runs per path. The worker extracts without holding the
lock and takes it once more to write its terminal state. Entries are never
evicted.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from .syntax import sanitize_terminal_text

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotLoaded:
    pass


@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Loaded:
    lines: tuple[str, ...]


@dataclass(frozen=True)
class LoadError:
    message: str


PreviewCacheEntry = Union[NotLoaded, Loading, Loaded, LoadError]

NOT_LOADED = NotLoaded()
LOADING = Loading()


class PreviewCache:
    """Lock-guarded path -> ``PreviewCacheEntry`` map."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[Path, PreviewCacheEntry] = {}

    def get(self, path: Path) -> PreviewCacheEntry:
        with self._lock:
            return self._entries.get(path, NOT_LOADED)

    def claim(self, path: Path) -> bool:
        """Mark ``path`` as loading; ``False`` if another request already did."""
        with self._lock:
            if not isinstance(self._entries.get(path, NOT_LOADED), NotLoaded):
                return False
            self._entries[path] = LOADING
            return True

    def complete(self, path: Path, state: Loaded | LoadError) -> bool:
        """Write the terminal state for a claimed path, once."""
        with self._lock:
            if not isinstance(self._entries.get(path), Loading):
                return False
            self._entries[path] = state
            return True

    def has_pending(self) -> bool:
        with self._lock:
            return any(isinstance(state, Loading) for state in self._entries.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class BackgroundTextLoader:
    """Spawns one detached worker per claimed path to extract its text."""

    def __init__(self, cache: PreviewCache, extract: Callable[[Path], str], name: str = "ils-preview") -> None:
        self.cache = cache
        self._extract = extract
        self._name = name

    def request(self, path: Path) -> PreviewCacheEntry:
        """Return the cached state, starting a load first if none exists yet."""
        state = self.cache.get(path)
        if isinstance(state, NotLoaded) and self.cache.claim(path):
            worker = threading.Thread(
                target=self._worker,
                args=(path,),
                name=f"{self._name}:{path.name}",
                daemon=True,
            )
            worker.start()
            return LOADING
        return state

    def _worker(self, path: Path) -> None:
        try:
            text = self._extract(path)
        except Exception as exc:
            LOGGER.debug("text extraction failed for %s", path, exc_info=True)
            self.cache.complete(path, LoadError(str(exc) or exc.__class__.__name__))
            return
        lines = tuple(sanitize_terminal_text(line) for line in text.splitlines())
        LOGGER.debug("extracted %d lines from %s", len(lines), path)
        self.cache.complete(path, Loaded(lines))
