"""Preview pipeline: per-kind content for the selected entry."""

from __future__ import annotations

from .cache import (
    BackgroundTextLoader,
    Loaded,
    LoadError,
    Loading,
    NotLoaded,
    PreviewCache,
    PreviewCacheEntry,
)
from .pipeline import (
    KIND_DIRECTORY,
    KIND_IMAGE,
    KIND_PDF,
    KIND_PLACEHOLDER,
    KIND_TEXT,
    LOADING_PLACEHOLDER,
    PreviewContent,
    PreviewPipeline,
    ScrollPositions,
)

__all__ = [
    "BackgroundTextLoader",
    "KIND_DIRECTORY",
    "KIND_IMAGE",
    "KIND_PDF",
    "KIND_PLACEHOLDER",
    "KIND_TEXT",
    "LOADING_PLACEHOLDER",
    "LoadError",
    "Loaded",
    "Loading",
    "NotLoaded",
    "PreviewCache",
    "PreviewCacheEntry",
    "PreviewContent",
    "PreviewPipeline",
    "ScrollPositions",
]
