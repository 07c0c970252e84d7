"""Persistent JSON config helpers.

Stores listing preferences, the UI theme, preview toggle and the watch poll
interval.
Malformed or missing config falls back to defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "lazytree"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_WATCH_POLL_SECONDS = 0.5


@dataclass(frozen=True)
class Settings:
    """Effective runtime preferences after config and CLI are merged."""

    show_hidden: bool = True
    dirs_first: bool = False
    theme: str | None = None
    preview: bool = True
    watch_poll_seconds: float = DEFAULT_WATCH_POLL_SECONDS


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON; write failures are logged only."""
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("could not write config %s: %s", CONFIG_PATH, exc)


def _load_bool(data: dict[str, object], key: str, default: bool) -> bool:
    value = data.get(key)
    return value if isinstance(value, bool) else default


def _load_theme_name(data: dict[str, object]) -> str | None:
    value = data.get("theme")
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _load_poll_seconds(data: dict[str, object]) -> float:
    value = data.get("watch_poll_seconds")
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return DEFAULT_WATCH_POLL_SECONDS
    return float(value)


def load_settings() -> Settings:
    """Read ``Settings`` from the config file, defaulting each invalid key."""
    data = load_config()
    return Settings(
        show_hidden=_load_bool(data, "show_hidden", True),
        dirs_first=_load_bool(data, "dirs_first", False),
        theme=_load_theme_name(data),
        preview=_load_bool(data, "preview", True),
        watch_poll_seconds=_load_poll_seconds(data),
    )


def save_settings(settings: Settings) -> None:
    """Persist ``settings``, keeping unrelated keys already in the file."""
    config = load_config()
    config.update(asdict(settings))
    if settings.theme is None:
        config.pop("theme", None)
    save_config(config)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "DEFAULT_WATCH_POLL_SECONDS",
    "Settings",
    "load_config",
    "save_config",
    "load_settings",
    "save_settings",
]
