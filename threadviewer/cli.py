"""Command-line front door for threadviewer.

Loads a JSON thread snapshot, applies optional drill and filter state, and
prints the thread and channel panels once, side by side.
"""

from __future__ import annotations

import argparse
import logging
import shutil
import sys
from collections.abc import Sequence
from pathlib import Path

from .ansi import display_width
from .channel_pane import ChannelList, ChannelPaneRenderer
from .config import (
    load_double_click_seconds,
    load_show_filter_hint,
    load_theme_name,
    load_thread_panel_max_width,
    save_show_filter_hint,
    save_theme_name,
)
from .pane import NavigationPanes
from .storage import SnapshotError, SnapshotThreadSource, load_snapshot
from .thread_model import index_threads
from .thread_pane import ThreadNavigator, ThreadPaneRenderer
from .ui_theme import MONO_THEME, available_theme_names, get_theme

logger = logging.getLogger(__name__)

PANEL_GAP = " "


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _default_rows() -> int:
    term = shutil.get_terminal_size((80, 24))
    return max(1, term.lines - 4)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def resolve_drill_path(source: SnapshotThreadSource, names: str) -> list[str]:
    """Resolve ``a/b/c`` thread names to the id chain from the top level down."""
    index = index_threads(source.get_threads())
    level = index.roots
    path: list[str] = []
    for name in [part for part in names.split("/") if part]:
        match = next((thread for thread in level if thread.name == name), None)
        if match is None:
            raise SystemExit(f"Unknown thread path: {names}")
        path.append(match.guid)
        level = index.children.get(match.guid, [])
    return path


def _pad(row: str, width: int) -> str:
    return row + " " * max(0, width - display_width(row))


def render_panels(panes: NavigationPanes, *, theme_name: str | None, no_color: bool) -> str:
    """Render both panels side by side and return the joined text."""
    theme = MONO_THEME if no_color else get_theme(theme_name)
    thread_width = panes.thread_panel_width()
    channel_width = panes.channel_panel_width()
    thread_rows = ThreadPaneRenderer(panes.navigator, theme, thread_width - 1).render().rows
    channel_rows = ChannelPaneRenderer(panes.channels, theme, channel_width).render().rows

    height = max(len(thread_rows), len(channel_rows))
    out: list[str] = []
    for idx in range(height):
        left = thread_rows[idx] if idx < len(thread_rows) else ""
        right = channel_rows[idx] if idx < len(channel_rows) else ""
        out.append((_pad(left, thread_width) + PANEL_GAP + right).rstrip() + "\n")
    return "".join(out)


def build_panes(source: SnapshotThreadSource, *, rows: int, width: int | None) -> NavigationPanes:
    max_width = load_thread_panel_max_width()
    if width is not None:
        max_width = max(1, min(max_width, width))
    navigator = ThreadNavigator(
        source,
        viewport_rows=rows,
        wrap_width=max_width - 1,
        show_filter_hint=load_show_filter_hint(),
    )
    channels = ChannelList(source.channels, current_path=source.current_path, viewport_rows=rows)
    return NavigationPanes(
        navigator,
        channels,
        thread_panel_max_width=max_width,
        double_click_seconds=load_double_click_seconds(),
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Parse CLI arguments and print the navigation panels for a snapshot."""
    parser = argparse.ArgumentParser(
        description="Render the thread and channel navigation panels for a JSON snapshot."
    )
    parser.add_argument("snapshot", help="Path to a JSON thread snapshot.")
    parser.add_argument("--drill", metavar="NAME/NAME", default=None, help="Drill into this thread path first.")
    parser.add_argument("--filter", metavar="TEXT", default=None, help="Apply this thread filter text.")
    parser.add_argument("--rows", type=_positive_int, default=None, help="Entry rows per panel.")
    parser.add_argument("--width", type=_positive_int, default=None, help="Maximum thread panel width.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}); a known name is remembered.",
    )
    parser.add_argument(
        "--filter-hint",
        choices=("show", "hide"),
        default=None,
        help="Show or hide the idle filter hint row and remember the choice.",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--verbose", action="store_true", help="Log debug details to stderr.")
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    path = Path(args.snapshot)
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    try:
        source = load_snapshot(path)
    except SnapshotError as exc:
        raise SystemExit(str(exc)) from exc

    if args.filter_hint is not None:
        save_show_filter_hint(args.filter_hint == "show")
    if args.theme is not None and args.theme in available_theme_names():
        save_theme_name(args.theme)

    rows = args.rows if args.rows is not None else _default_rows()
    panes = build_panes(source, rows=rows, width=args.width)
    if args.drill:
        panes.navigator.drill.replace(resolve_drill_path(source, args.drill))
    if args.filter is not None:
        panes.navigator.set_filter_text(args.filter)

    theme_name = args.theme if args.theme is not None else load_theme_name()
    sys.stdout.write(render_panels(panes, theme_name=theme_name, no_color=args.no_color))


if __name__ == "__main__":
    main()
