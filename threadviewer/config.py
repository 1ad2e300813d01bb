"""Settings file for the navigation panels.

Stores theme choice, thread-panel width cap, double-click interval, and the
filter-hint preference. Missing or malformed values read as defaults.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "threadviewer"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_THREAD_PANEL_MAX_WIDTH = 50
MIN_THREAD_PANEL_MAX_WIDTH = 26
MAX_THREAD_PANEL_MAX_WIDTH = 120
DEFAULT_DOUBLE_CLICK_SECONDS = 0.35


def load_config() -> dict[str, object]:
    """Read the settings object, or ``{}`` when there is nothing usable on disk."""
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except Exception as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Write ``data`` back as indented JSON.

    Filesystem and serialization errors are logged, not raised.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception as exc:
        logger.warning("could not write config %s: %s", CONFIG_PATH, exc)


def load_theme_name() -> str | None:
    """Return the persisted theme name, or ``None`` when unset or invalid."""
    value = load_config().get("theme")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def save_theme_name(name: str) -> None:
    config = load_config()
    config["theme"] = name
    save_config(config)


def load_thread_panel_max_width() -> int:
    """Return the thread-panel width cap.

    Booleans, non-integers, and values outside
    ``[MIN_THREAD_PANEL_MAX_WIDTH, MAX_THREAD_PANEL_MAX_WIDTH]`` fall back to
    the default.
    """
    value = load_config().get("thread_panel_max_width")
    if isinstance(value, bool) or not isinstance(value, int):
        return DEFAULT_THREAD_PANEL_MAX_WIDTH
    if not MIN_THREAD_PANEL_MAX_WIDTH <= value <= MAX_THREAD_PANEL_MAX_WIDTH:
        return DEFAULT_THREAD_PANEL_MAX_WIDTH
    return value


def load_double_click_seconds() -> float:
    """Return the double-click interval, constrained to ``(0, 2]`` seconds."""
    value = load_config().get("double_click_seconds")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_DOUBLE_CLICK_SECONDS
    if value <= 0 or value > 2:
        return DEFAULT_DOUBLE_CLICK_SECONDS
    return float(value)


def load_show_filter_hint() -> bool:
    """Return whether the idle thread panel shows its filter hint row.

    Only explicit boolean values are accepted; anything else means ``True``.
    """
    value = load_config().get("show_filter_hint")
    return value if isinstance(value, bool) else True


def save_show_filter_hint(show: bool) -> None:
    config = load_config()
    config["show_filter_hint"] = bool(show)
    save_config(config)
