"""Public package surface for threadviewer.

Exports ``main`` for programmatic CLI invocation.
The navigation panels live in ``threadviewer.thread_pane`` and
``threadviewer.channel_pane``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = ["main"]
