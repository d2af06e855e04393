"""Persistent JSON config: keybindings, color roles, and behavior settings.

Loading is forgiving: a missing file yields defaults (and marks first
run), malformed sections fall back field by field and produce one warning
string for the status line. Loading never raises.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path

from platformdirs import user_config_dir

from ..browser.layout import clamp_preview_ratio
from ..colors import is_valid_color_spec

LOGGER = logging.getLogger(__name__)

APP_NAME = "ils"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

LAYOUT_GRID = "grid"
LAYOUT_LIST = "list"

DEFAULT_KEYBINDINGS: dict[str, tuple[str, ...]] = {
    "up": ("w",),
    "down": ("s",),
    "left": ("a",),
    "right": ("d",),
    "jump_up": ("W",),
    "jump_down": ("S",),
    "jump_left": ("A",),
    "jump_right": ("D",),
    "open": ("l",),
    "back": ("j", "b"),
    "home": ("h",),
    "quit": ("q",),
    "quit_cd": ("ESC",),
    "quit_file_manager": ("Q",),
    "help": ("?",),
    "preview_toggle": ("p",),
    "preview_up": ("i",),
    "preview_down": ("o",),
    "preview_page_up": ("I",),
    "preview_page_down": ("O",),
    "preview_height_decrease": ("-", "_"),
    "preview_height_increase": ("+", "="),
    "toggle_hidden": (".",),
    "fuzzy_find": ("/",),
    "fuzzy_find_stay": ("CTRL_F",),
    "toggle_layout": ("g",),
    "cycle_list_info": ("z",),
    "sibling_next": ("]",),
    "sibling_prev": ("[",),
    "copy": ("c",),
    "rename": ("r",),
    "new_file": ("n",),
    "new_dir": ("N",),
    "trash": ("x",),
    "delete": ("X",),
    "toggle_executable": ("m",),
    "undo": ("u",),
    "redo": ("U",),
}

NAMED_KEY_TOKENS = frozenset({"ESC", "ENTER", "BACKSPACE", "UP", "DOWN", "LEFT", "RIGHT", "TAB"})


def is_valid_key_token(token: object) -> bool:
    """A single printable character, a named key, or ``CTRL_<letter>``."""
    if not isinstance(token, str) or not token:
        return False
    if len(token) == 1:
        return token.isprintable()
    if token in NAMED_KEY_TOKENS:
        return True
    return token.startswith("CTRL_") and len(token) == 6 and token[5].isalpha()


@dataclass(frozen=True)
class Keybindings:
    """Role -> key tokens. Roles missing from ``bindings`` have no keys."""

    bindings: dict[str, tuple[str, ...]] = field(default_factory=lambda: dict(DEFAULT_KEYBINDINGS))

    def keys_for(self, role: str) -> tuple[str, ...]:
        return self.bindings.get(role, ())


@dataclass(frozen=True)
class ColorRoles:
    path_fg: str = "white"
    path_bg: str = "#333333"
    selected_fg: str = "none"
    selected_bg: str = "none"
    directory_fg: str = "cyan"
    preview_border_fg: str = "darkgrey"
    status_fg: str = "yellow"
    match_fg: str = "#ffff00"


@dataclass(frozen=True)
class Settings:
    show_hidden: bool = False
    preview_on_start: bool = False
    preview_split_ratio: float = 0.5
    jump_amount: int = 5
    case_sensitive_search: bool = False
    preview_scroll_amount: int = 10
    exit_after_edit: bool = False
    show_dir_slash: bool = False
    layout: str = LAYOUT_GRID
    show_tilde_for_home: bool = True
    syntax_style: str = "monokai"


@dataclass(frozen=True)
class AppConfig:
    keybindings: Keybindings = field(default_factory=Keybindings)
    colors: ColorRoles = field(default_factory=ColorRoles)
    settings: Settings = field(default_factory=Settings)


@dataclass(frozen=True)
class ConfigLoadResult:
    config: AppConfig
    warning: str | None = None
    first_run: bool = False


def load_config() -> dict[str, object]:
    """Load the raw persisted JSON object; ``{}`` when missing or malformed."""
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored so a read-only config
    directory never interrupts browsing.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        LOGGER.warning("could not write %s: %s", CONFIG_PATH, exc)


def config_to_dict(config: AppConfig) -> dict[str, object]:
    return {
        "keybindings": {role: list(keys) for role, keys in config.keybindings.bindings.items()},
        "colors": asdict(config.colors),
        "settings": asdict(config.settings),
    }


def _parse_keybindings(raw: object, problems: list[str]) -> Keybindings:
    bindings = dict(DEFAULT_KEYBINDINGS)
    if raw is None:
        return Keybindings(bindings)
    if not isinstance(raw, dict):
        problems.append("keybindings must be an object")
        return Keybindings(bindings)
    for role, value in raw.items():
        if role not in DEFAULT_KEYBINDINGS:
            continue
        tokens = [value] if isinstance(value, str) else value
        if not isinstance(tokens, list) or not all(is_valid_key_token(token) for token in tokens):
            problems.append(f"keybindings.{role}")
            continue
        bindings[role] = tuple(tokens)
    return Keybindings(bindings)


def _parse_colors(raw: object, problems: list[str]) -> ColorRoles:
    if raw is None:
        return ColorRoles()
    if not isinstance(raw, dict):
        problems.append("colors must be an object")
        return ColorRoles()
    values: dict[str, str] = {}
    for item in fields(ColorRoles):
        if item.name not in raw:
            continue
        spec = raw[item.name]
        if is_valid_color_spec(spec):
            values[item.name] = spec.strip()
        else:
            problems.append(f"colors.{item.name}")
    return ColorRoles(**values)


def _valid_setting(name: str, value: object) -> bool:
    default = getattr(Settings(), name)
    if isinstance(default, bool):
        return isinstance(value, bool)
    if isinstance(default, int):
        return isinstance(value, int) and not isinstance(value, bool) and value > 0
    if isinstance(default, float):
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if name == "layout":
        return value in {LAYOUT_GRID, LAYOUT_LIST}
    return isinstance(value, str) and bool(value.strip())


def _parse_settings(raw: object, problems: list[str]) -> Settings:
    if raw is None:
        return Settings()
    if not isinstance(raw, dict):
        problems.append("settings must be an object")
        return Settings()
    values: dict[str, object] = {}
    for item in fields(Settings):
        if item.name not in raw:
            continue
        value = raw[item.name]
        if not _valid_setting(item.name, value):
            problems.append(f"settings.{item.name}")
            continue
        values[item.name] = value
    settings = Settings(**values)
    return replace(settings, preview_split_ratio=clamp_preview_ratio(float(settings.preview_split_ratio)))


def parse_config(data: dict[str, object]) -> tuple[AppConfig, list[str]]:
    problems: list[str] = []
    config = AppConfig(
        keybindings=_parse_keybindings(data.get("keybindings"), problems),
        colors=_parse_colors(data.get("colors"), problems),
        settings=_parse_settings(data.get("settings"), problems),
    )
    return config, problems


def load_app_config() -> ConfigLoadResult:
    """Load the full configuration; never raises.

    On first run (no config file yet) the defaults are written out.
    """
    if not CONFIG_PATH.exists():
        config = AppConfig()
        save_config(config_to_dict(config))
        return ConfigLoadResult(config=config, first_run=True)

    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        LOGGER.warning("unreadable config %s: %s", CONFIG_PATH, exc)
        return ConfigLoadResult(config=AppConfig(), warning=f"Config error, using defaults: {exc}")
    if not isinstance(data, dict):
        return ConfigLoadResult(config=AppConfig(), warning="Config error, using defaults: not a JSON object")

    config, problems = parse_config(data)
    if not problems:
        return ConfigLoadResult(config=config)
    LOGGER.warning("invalid config values in %s: %s", CONFIG_PATH, ", ".join(problems))
    return ConfigLoadResult(config=config, warning=f"Invalid config values ignored: {', '.join(problems)}")


def save_settings(settings: Settings) -> None:
    """Replace the persisted ``settings`` section, keeping everything else."""
    data = load_config()
    data["settings"] = asdict(settings)
    save_config(data)
