"""Help overlay: every configured binding grouped by purpose.

Rendering helpers here are presentation-only and side-effect free.
"""

from __future__ import annotations

from ..ansi import clip_ansi_line, display_width

HELP_KEY = "\033[38;5;229m"
HELP_HEADING = "\033[1;38;5;81m"
HELP_DIM = "\033[2;38;5;250m"
HELP_BORDER = "\033[38;5;45m"
HELP_TITLE = "\033[1;38;5;45m"
RESET = "\033[0m"

HELP_SECTIONS: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    (
        "Move",
        (
            ("up", "up"),
            ("down", "down"),
            ("left", "left"),
            ("right", "right"),
            ("jump_up", "jump up"),
            ("jump_down", "jump down"),
            ("jump_left", "jump left"),
            ("jump_right", "jump right"),
        ),
    ),
    (
        "Navigate",
        (
            ("open", "open directory / pick file"),
            ("back", "parent directory"),
            ("home", "home directory"),
            ("sibling_next", "next sibling directory"),
            ("sibling_prev", "previous sibling directory"),
            ("fuzzy_find", "find (exit after unique match)"),
            ("fuzzy_find_stay", "find (keep searching)"),
        ),
    ),
    (
        "View",
        (
            ("preview_toggle", "toggle preview"),
            ("preview_up", "scroll preview up"),
            ("preview_down", "scroll preview down"),
            ("preview_page_up", "preview page up"),
            ("preview_page_down", "preview page down"),
            ("preview_height_decrease", "shrink preview"),
            ("preview_height_increase", "grow preview"),
            ("toggle_hidden", "show/hide hidden files"),
            ("toggle_layout", "grid / list layout"),
            ("cycle_list_info", "list info: none/size/modified"),
        ),
    ),
    (
        "Files",
        (
            ("copy", "copy"),
            ("rename", "rename"),
            ("new_file", "new file"),
            ("new_dir", "new directory"),
            ("trash", "move to trash"),
            ("delete", "delete permanently"),
            ("toggle_executable", "toggle executable"),
            ("undo", "undo"),
            ("redo", "redo"),
        ),
    ),
    (
        "Quit",
        (
            ("quit", "quit"),
            ("quit_cd", "quit and cd here"),
            ("quit_file_manager", "open in file manager"),
            ("help", "this help"),
        ),
    ),
)

FIXED_KEY_LINES: tuple[str, ...] = (
    f"  {HELP_KEY}Arrows{RESET} move   {HELP_KEY}Enter{RESET} edit file / cd into directory   {HELP_KEY}Backspace{RESET} parent",
    f"  {HELP_DIM}In find mode: type to narrow, Esc leaves, Backspace deletes{RESET}",
)


def format_key_token(token: str) -> str:
    if token.startswith("CTRL_"):
        return f"Ctrl+{token[5:]}"
    if token == "ESC":
        return "Esc"
    if token == " ":
        return "Space"
    return token


def help_lines(keybindings) -> list[str]:
    """Styled lines listing each role's keys, two entries per row."""
    lines: list[str] = []
    for heading, roles in HELP_SECTIONS:
        lines.append(f"{HELP_HEADING}{heading}{RESET}")
        items: list[str] = []
        for role, description in roles:
            keys = keybindings.keys_for(role)
            if not keys:
                continue
            label = "/".join(format_key_token(key) for key in keys)
            items.append(f"{HELP_KEY}{label}{RESET} {description}")
        for i in range(0, len(items), 2):
            pair = items[i : i + 2]
            if len(pair) == 2:
                padding = " " * max(1, 36 - display_width(pair[0]))
                lines.append(f"  {pair[0]}{padding}{pair[1]}")
            else:
                lines.append(f"  {pair[0]}")
    lines.append("")
    lines.extend(FIXED_KEY_LINES)
    lines.append("")
    lines.append(f"{HELP_DIM}Press any key to close{RESET}")
    return lines


def render_help_page(width: int, height: int, lines: list[str], title: str = "ils help") -> str:
    """Compose the full-screen help modal as one escape-sequence string."""
    out: list[str] = ["\033[H\033[J"]

    modal_w = max(20, min(84, width - 4))
    modal_h = max(5, min(len(lines) + 3, height - 2))
    x = max(0, (width - modal_w) // 2)
    y = max(0, (height - modal_h) // 2)
    inner_w = max(1, modal_w - 2)
    inner_h = max(1, modal_h - 2)

    out.append(f"\033[{y + 1};{x + 1}H{HELP_BORDER}╭")
    out.append("─" * inner_w)
    out.append(f"╮{RESET}")
    for i in range(inner_h):
        out.append(f"\033[{y + 2 + i};{x + 1}H{HELP_BORDER}│{RESET}")
        out.append(" " * inner_w)
        out.append(f"{HELP_BORDER}│{RESET}")
    out.append(f"\033[{y + modal_h};{x + 1}H{HELP_BORDER}╰")
    out.append("─" * inner_w)
    out.append(f"╯{RESET}")

    title_x = x + max(2, (modal_w - 2 - len(title)) // 2)
    out.append(f"\033[{y + 1};{title_x + 1}H{HELP_TITLE}{title}{RESET}")

    body_rows = min(len(lines), inner_h - 1)
    for i in range(body_rows):
        out.append(f"\033[{y + 2 + i};{x + 3}H")
        out.append(clip_ansi_line(lines[i], inner_w - 2))
        out.append(RESET)
    return "".join(out)
