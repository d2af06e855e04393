"""Route a selected path to the right previewer.

Resolution order:
1. missing path -> placeholder
2. directory -> synchronous summary (counts, recursive size, listing)
3. image extension -> image payload drawn by the terminal, never cached
4. ``.pdf`` -> cached background extraction, ``Loading...`` until done
5. NUL-byte probe -> binary placeholder
6. text -> only the visible line window is read, then highlighted
"""

from __future__ import annotations

import itertools
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .cache import BackgroundTextLoader, Loaded, LoadError, Loading, NotLoaded, PreviewCache
from .directory import build_directory_preview
from .pdf import extract_text
from .syntax import DEFAULT_STYLE, highlight_lines

BINARY_PROBE_BYTES = 4_096
IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp", ".tiff", ".ico"})
PDF_EXTENSIONS = frozenset({".pdf"})

KIND_DIRECTORY = "directory"
KIND_TEXT = "text"
KIND_IMAGE = "image"
KIND_PDF = "pdf"
KIND_PLACEHOLDER = "placeholder"

LOADING_PLACEHOLDER = "Loading..."
UNREADABLE_PLACEHOLDER = "(binary file or cannot read)"


@dataclass(frozen=True)
class PreviewContent:
    """Lines to draw in the preview pane, plus what produced them."""

    kind: str
    lines: tuple[str, ...]
    image_path: Path | None = None
    loading: bool = False

    @classmethod
    def placeholder(cls, message: str) -> PreviewContent:
        return cls(kind=KIND_PLACEHOLDER, lines=(message,))


class ScrollPositions:
    """Per-path preview line offsets, kept apart from the content cache."""

    def __init__(self) -> None:
        self._offsets: dict[Path, int] = {}

    def get(self, path: Path) -> int:
        return self._offsets.get(path, 0)

    def set(self, path: Path, offset: int) -> None:
        self._offsets[path] = max(0, offset)

    def scroll(self, path: Path, delta: int, max_offset: int | None = None) -> int:
        offset = self.get(path) + delta
        if max_offset is not None:
            offset = min(offset, max(0, max_offset))
        self.set(path, offset)
        return self.get(path)


def is_binary_file(path: Path) -> bool:
    """``True`` when the first bytes contain NUL; raises ``OSError`` if unreadable."""
    with path.open("rb") as handle:
        return b"\x00" in handle.read(BINARY_PROBE_BYTES)


def read_line_window(path: Path, start: int, count: int) -> list[str]:
    """Read lines ``[start, start + count)`` without loading the rest of the file."""
    with path.open("r", encoding="utf-8", errors="replace", newline=None) as handle:
        return list(itertools.islice(handle, start, start + max(0, count)))


def count_lines(path: Path) -> int:
    with path.open("r", encoding="utf-8", errors="replace", newline=None) as handle:
        return sum(1 for _ in handle)


class PreviewPipeline:
    """Produces ``PreviewContent`` for a path and viewport height."""

    def __init__(
        self,
        cache: PreviewCache | None = None,
        *,
        extract_pdf_text: Callable[[Path], str] = extract_text,
        style: str = DEFAULT_STYLE,
        no_color: bool = False,
    ) -> None:
        self.cache = cache if cache is not None else PreviewCache()
        self.loader = BackgroundTextLoader(self.cache, extract_pdf_text, name="ils-pdf")
        self.scroll_positions = ScrollPositions()
        self.style = style
        self.no_color = no_color

    def has_pending(self) -> bool:
        return self.cache.has_pending()

    def kind_of(self, path: Path) -> str:
        if path.is_dir():
            return KIND_DIRECTORY
        suffix = path.suffix.lower()
        if suffix in IMAGE_EXTENSIONS:
            return KIND_IMAGE
        if suffix in PDF_EXTENSIONS:
            return KIND_PDF
        return KIND_TEXT

    def render(self, path: Path, visible_rows: int, *, show_hidden: bool = False) -> PreviewContent:
        """Build preview content for ``path`` at its remembered scroll offset."""
        try:
            if not path.exists():
                return PreviewContent.placeholder("(no such file)")
            kind = self.kind_of(path)
        except OSError:
            return PreviewContent.placeholder(UNREADABLE_PLACEHOLDER)
        if kind == KIND_DIRECTORY:
            return PreviewContent(
                kind=KIND_DIRECTORY,
                lines=tuple(build_directory_preview(path, show_hidden, visible_rows)),
            )
        if kind == KIND_IMAGE:
            return PreviewContent(kind=KIND_IMAGE, lines=(f"<image: {path.name}>",), image_path=path)
        if kind == KIND_PDF:
            return self._render_pdf(path, visible_rows)
        return self._render_text(path, visible_rows)

    def _render_pdf(self, path: Path, visible_rows: int) -> PreviewContent:
        state = self.loader.request(path)
        if isinstance(state, (NotLoaded, Loading)):
            return PreviewContent(kind=KIND_PDF, lines=(LOADING_PLACEHOLDER,), loading=True)
        if isinstance(state, LoadError):
            return PreviewContent.placeholder(f"(cannot extract PDF text: {state.message})")
        offset = self.scroll_positions.get(path)
        return PreviewContent(kind=KIND_PDF, lines=state.lines[offset : offset + visible_rows])

    def _render_text(self, path: Path, visible_rows: int) -> PreviewContent:
        offset = self.scroll_positions.get(path)
        try:
            if is_binary_file(path):
                return PreviewContent.placeholder(UNREADABLE_PLACEHOLDER)
            window = read_line_window(path, offset, visible_rows)
        except OSError:
            return PreviewContent.placeholder(UNREADABLE_PLACEHOLDER)
        return PreviewContent(kind=KIND_TEXT, lines=tuple(highlight_lines(window, path, self.style, self.no_color)))

    def line_count(self, path: Path) -> int | None:
        """Total scrollable lines for ``path``, or ``None`` when it does not scroll."""
        kind = self.kind_of(path)
        if kind == KIND_PDF:
            state = self.cache.get(path)
            return len(state.lines) if isinstance(state, Loaded) else None
        if kind != KIND_TEXT:
            return None
        try:
            return count_lines(path)
        except OSError:
            return None

    def scroll(self, path: Path, delta: int, visible_rows: int) -> int:
        """Scroll ``path`` by ``delta`` lines, bounded by its content length."""
        if delta < 0:
            return self.scroll_positions.scroll(path, delta)
        total = self.line_count(path)
        if total is None:
            return self.scroll_positions.get(path)
        return self.scroll_positions.scroll(path, delta, max_offset=total - visible_rows)
