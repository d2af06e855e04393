"""Shell integration: the ``ils`` wrapper function and ``--install``."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

from .runtime import config
from .runtime.exit import EXIT_TARGET_PATH

SHELL_FUNCTION = f"""ils() {{
    ils-bin "$@"
    if [ -f {EXIT_TARGET_PATH} ]; then
        local target=$(cat {EXIT_TARGET_PATH})
        rm {EXIT_TARGET_PATH}
        if [ -d "$target" ]; then
            cd "$target"
        else
            echo "$target"
        fi
    fi
}}
"""

INSTALL_MARKER = "ils-bin"


def init_script() -> str:
    return "# Interactive ls (ils): add this to your ~/.zshrc or ~/.bashrc\n" + SHELL_FUNCTION


def shell_rc_path(shell: str | None, home: Path) -> Path | None:
    """Pick the rc file for the login shell named by ``$SHELL``."""
    name = Path(shell or "").name
    if name == "zsh":
        return home / ".zshrc"
    if name == "bash":
        return home / ".bashrc"
    return None


def install(
    home: Path | None = None,
    shell: str | None = None,
    echo: Callable[[str], None] = print,
) -> int:
    """Write the default config and add the wrapper to the shell rc file."""
    home = home if home is not None else Path.home()
    shell = shell if shell is not None else os.environ.get("SHELL")

    if config.CONFIG_PATH.exists():
        echo(f"Config already present: {config.CONFIG_PATH}")
    else:
        config.save_config(config.config_to_dict(config.AppConfig()))
        echo(f"Created default config: {config.CONFIG_PATH}")

    rc_path = shell_rc_path(shell, home)
    if rc_path is None:
        echo("Could not detect your shell; add the following to its rc file:\n")
        echo(SHELL_FUNCTION)
        return 0

    try:
        existing = rc_path.read_text(encoding="utf-8") if rc_path.exists() else ""
        if INSTALL_MARKER in existing:
            echo(f"Shell function already installed in {rc_path}")
            return 0
        with rc_path.open("a", encoding="utf-8") as handle:
            handle.write("\n# Interactive ls (ils)\n" + SHELL_FUNCTION)
    except OSError as exc:
        echo(f"Cannot update {rc_path}: {exc}")
        return 1
    echo(f"Added shell function to {rc_path}")
    echo(f"Run 'source {rc_path}' or restart your shell to use 'ils'.")
    return 0
