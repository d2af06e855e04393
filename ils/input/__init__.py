"""Input-layer public API for key decoding and per-mode handlers.

Low-level terminal decoding (``read_key``) stays separate from the mode
handlers used by the controller.
"""

from .key_fuzzy import FuzzyKeyContext, enter_fuzzy_mode, handle_fuzzy_key
from .key_normal import NormalKeyContext, NormalKeyHandler, handle_normal_key
from .key_prompt import PromptKeyContext, handle_prompt_key
from .key_registry import KeyComboBinding, KeyComboRegistry
from .reader import DRAIN_WINDOW_MS, RESIZE_TOKEN, drain_pending_keys, read_key

__all__ = [
    "DRAIN_WINDOW_MS",
    "FuzzyKeyContext",
    "KeyComboBinding",
    "KeyComboRegistry",
    "NormalKeyContext",
    "NormalKeyHandler",
    "PromptKeyContext",
    "RESIZE_TOKEN",
    "drain_pending_keys",
    "enter_fuzzy_mode",
    "handle_fuzzy_key",
    "handle_normal_key",
    "handle_prompt_key",
    "read_key",
]
