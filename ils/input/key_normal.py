"""Normal-mode keyboard handling."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass

from ..runtime.config import Keybindings
from .key_registry import KeyComboBinding, KeyComboRegistry

# Keys that stay bound whatever the configuration says.
FIXED_BINDINGS: tuple[tuple[str, str], ...] = (
    ("UP", "up"),
    ("DOWN", "down"),
    ("LEFT", "left"),
    ("RIGHT", "right"),
    ("ENTER", "edit"),
    ("BACKSPACE", "back"),
)


@dataclass(frozen=True)
class NormalKeyContext:
    """Configured keys plus one bound action per role name."""

    keybindings: Keybindings
    actions: Mapping[str, Callable[[], bool | None]]


def build_normal_registry(context: NormalKeyContext) -> KeyComboRegistry:
    registry = KeyComboRegistry()
    for role, action in context.actions.items():
        keys = context.keybindings.keys_for(role)
        if keys:
            registry.register_binding(KeyComboBinding(keys, action))
    for key, role in FIXED_BINDINGS:
        action = context.actions.get(role)
        if action is not None:
            registry.register_binding(KeyComboBinding((key,), action))
    return registry


class NormalKeyHandler:
    """Reusable normal-mode handler; the registry is built once per context."""

    def __init__(self, context: NormalKeyContext) -> None:
        self.context = context
        self.registry = build_normal_registry(context)

    def handle(self, key: str) -> bool:
        """Run the action bound to ``key`` and return whether one was bound."""
        if key not in self.registry:
            return False
        self.registry.dispatch(key)
        return True


def handle_normal_key(key: str, context: NormalKeyContext) -> bool:
    return NormalKeyHandler(context).handle(key)
