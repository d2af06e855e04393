"""Command-line front door for ils.

Parses CLI options, configures debug logging, and dispatches to the
installer, the shell snippet, or the interactive browser.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from platformdirs import user_log_dir

from . import __version__
from .errors import IlsError
from .install import init_script, install
from .runtime import run_browser

DEBUG_ENV = "ILS_DEBUG"
LOG_FILENAME = "ils.log"


def configure_logging(environ=None) -> Path | None:
    """Send DEBUG logs to the user log dir when ``ILS_DEBUG=1``; otherwise stay silent."""
    environ = os.environ if environ is None else environ
    if environ.get(DEBUG_ENV) != "1":
        logging.getLogger("ils").addHandler(logging.NullHandler())
        return None
    log_dir = Path(user_log_dir("ils", appauthor=False))
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_FILENAME
    logging.basicConfig(
        level=logging.DEBUG,
        filename=str(log_path),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return log_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ils-bin",
        description="Interactive ls: browse, preview, and manage files from the keyboard.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory to start in. Defaults to the current directory.")
    parser.add_argument("-v", "--version", action="version", version=f"ils {__version__}")
    parser.add_argument("--install", action="store_true", help="Write default config and add the shell function.")
    parser.add_argument("--init", action="store_true", help="Print the shell function to add to your rc file.")
    parser.add_argument("--no-color", action="store_true", help="Disable colors.")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run ils; returns the process exit code (1 only for setup failures)."""
    args = build_parser().parse_args(argv)
    configure_logging()

    if args.install:
        return install()
    if args.init:
        sys.stdout.write(init_script())
        return 0

    try:
        start = Path(args.path) if args.path else Path.cwd()
        start = start.resolve()
        if not start.is_dir():
            raise IlsError(f"not a directory: {start}")
        return run_browser(start, no_color=args.no_color)
    except (IlsError, OSError) as exc:
        logging.getLogger(__name__).error("setup failed: %s", exc)
        print(f"ils: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
