"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the thread and channel panels. The ``mono`` theme
carries empty codes so rendered rows stay plain text.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by panel renderers."""

    name: str
    reset: str
    depth_colors: tuple[str, ...]
    thread_item: str
    thread_main: str
    thread_selected: str
    thread_current: str
    thread_collapsed: str
    thread_section: str
    filter_hint: str
    channel_header: str
    channel_item: str
    channel_active: str
    channel_selected: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    depth_colors=(
        "\033[1;38;5;75m",
        "\033[1;38;5;141m",
        "\033[1;38;5;78m",
        "\033[1;38;5;227m",
    ),
    thread_item="\033[38;5;67m",
    thread_main="\033[1;38;5;231m",
    thread_selected="\033[1;38;5;16;48;5;220m",
    thread_current="\033[1;38;5;231;48;5;24m",
    thread_collapsed="\033[38;5;240m",
    thread_section="\033[38;5;240m",
    filter_hint="\033[38;5;240m",
    channel_header="\033[1;38;5;231m",
    channel_item="\033[38;5;245m",
    channel_active="\033[1;38;5;231m",
    channel_selected="\033[1;38;5;231;48;5;236m",
)

MONO_THEME = UITheme(
    name="mono",
    reset="",
    depth_colors=("",),
    thread_item="",
    thread_main="",
    thread_selected="",
    thread_current="",
    thread_collapsed="",
    thread_section="",
    filter_hint="",
    channel_header="",
    channel_item="",
    channel_active="",
    channel_selected="",
)

THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    MONO_THEME.name: MONO_THEME,
}


def available_theme_names() -> list[str]:
    """Return supported theme names in display order."""
    return list(THEMES)


def get_theme(name: str | None) -> UITheme:
    """Return the named theme, falling back to the default palette."""
    if not name:
        return DEFAULT_THEME
    return THEMES.get(name.strip().lower(), DEFAULT_THEME)


def depth_color(theme: UITheme, depth: int) -> str:
    """Return header color for a drill depth; deeper levels reuse the last color."""
    colors = theme.depth_colors
    if not colors:
        return ""
    return colors[max(0, min(depth, len(colors) - 1))]
