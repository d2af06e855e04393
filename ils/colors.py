"""Color-role parsing and the ANSI palette handed to the renderer.

A color spec is a named color, ``#RRGGBB``, ``#RGB`` or ``none``. ``none``
and unrecognized specs leave the role on its built-in fallback style.
"""

from __future__ import annotations

from dataclasses import dataclass

from .ansi import RESET

NAMED_FOREGROUND_CODES = {
    "black": 30,
    "darkred": 31,
    "darkgreen": 32,
    "darkyellow": 33,
    "darkblue": 34,
    "darkmagenta": 35,
    "darkcyan": 36,
    "grey": 37,
    "gray": 37,
    "darkgrey": 90,
    "darkgray": 90,
    "red": 91,
    "green": 92,
    "yellow": 93,
    "blue": 94,
    "magenta": 95,
    "cyan": 96,
    "white": 97,
}


def parse_hex_color(spec: str) -> tuple[int, int, int] | None:
    digits = spec.strip().lstrip("#")
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) != 6:
        return None
    try:
        return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)
    except ValueError:
        return None


def parse_color(spec: str | None, background: bool = False) -> str | None:
    """Translate a color spec into an SGR escape, or ``None`` for no color."""
    if not isinstance(spec, str):
        return None
    normalized = spec.strip().lower()
    if not normalized or normalized in {"none", "reverse"}:
        return None
    if normalized.startswith("#"):
        rgb = parse_hex_color(normalized)
        if rgb is None:
            return None
        kind = 48 if background else 38
        return f"\033[{kind};2;{rgb[0]};{rgb[1]};{rgb[2]}m"
    code = NAMED_FOREGROUND_CODES.get(normalized)
    if code is None:
        return None
    return f"\033[{code + 10 if background else code}m"


def is_valid_color_spec(spec: object) -> bool:
    if not isinstance(spec, str):
        return False
    normalized = spec.strip().lower()
    return normalized in {"none", "reverse"} or parse_color(normalized) is not None


@dataclass(frozen=True)
class Palette:
    """Resolved ANSI sequences for every visual role."""

    header: str
    selected: str
    directory: str
    file: str
    preview_border: str
    status: str
    match: str
    dim: str = "\033[2m"
    bold: str = "\033[1m"
    reverse: str = "\033[7m"
    reset: str = RESET


def build_palette(colors, no_color: bool = False) -> Palette:
    """Build the palette from a ``ColorRoles`` record.

    With ``no_color`` every role collapses to plain text except the header and
    selection, which keep reverse video so they stay visible.
    """
    if no_color:
        return Palette(
            header="\033[7m",
            selected="\033[7m",
            directory="",
            file="",
            preview_border="",
            status="",
            match="\033[1m",
        )
    path_fg = parse_color(colors.path_fg)
    path_bg = parse_color(colors.path_bg, background=True)
    header = "".join(part for part in (path_fg, path_bg) if part) or "\033[7m"
    selected = "".join(
        part
        for part in (parse_color(colors.selected_fg), parse_color(colors.selected_bg, background=True))
        if part
    )
    return Palette(
        header=header,
        selected=selected or "\033[92m",
        directory=parse_color(colors.directory_fg) or "\033[94m",
        file="",
        preview_border=parse_color(colors.preview_border_fg) or "\033[90m",
        status=parse_color(colors.status_fg) or "\033[93m",
        match="\033[1m" + (parse_color(colors.match_fg) or "\033[93m") + "\033[48;2;50;50;50m",
    )
