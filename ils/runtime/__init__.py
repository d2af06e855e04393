"""Runtime orchestration: controller, event loop, terminal, config, exit.

Entry points are imported lazily so that leaf modules such as ``config``
can be used without pulling in the whole interactive stack.
"""

from __future__ import annotations


def run_browser(*args, **kwargs):
    """Lazily import the session entrypoint to avoid package-import cycles."""
    from .app import run_browser as _run_browser

    return _run_browser(*args, **kwargs)


__all__ = ["run_browser"]
