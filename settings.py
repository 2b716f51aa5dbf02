"""JSON-based settings persistence for the calendar widget host."""

import json
import logging
import os

from calendar_system import GregorianCalendar, zone_by_name

logger = logging.getLogger(__name__)

_SETTINGS_PATH = os.path.join(os.path.expanduser("~"), ".easy-calendar-widget.json")

_DEFAULTS = {
    "locale": None,
    "timezone": None,
    "first_weekday": None,
    "widget_family": "medium",
    "dark_mode": False,
}


def load_settings() -> dict:
    """Load settings from disk, returning defaults for missing keys."""
    settings = dict(_DEFAULTS)
    try:
        with open(_SETTINGS_PATH, "r", encoding="utf-8") as f:
            stored = json.load(f)
    except FileNotFoundError:
        return settings
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", _SETTINGS_PATH, exc)
        return settings
    if not isinstance(stored, dict):
        return settings

    for key in ("locale", "timezone"):
        if key in stored and (stored[key] is None or isinstance(stored[key], str)):
            settings[key] = stored[key]
    fw = stored.get("first_weekday")
    # bool is an int subclass
    if isinstance(fw, int) and not isinstance(fw, bool) and 1 <= fw <= 7:
        settings["first_weekday"] = fw
    if isinstance(stored.get("widget_family"), str):
        settings["widget_family"] = stored["widget_family"]
    if isinstance(stored.get("dark_mode"), bool):
        settings["dark_mode"] = stored["dark_mode"]
    return settings


def save_settings(settings: dict) -> None:
    """Persist settings to disk."""
    with open(_SETTINGS_PATH, "w", encoding="utf-8") as f:
        json.dump(settings, f, indent=2)


def calendar_from_settings(settings: dict | None = None) -> GregorianCalendar:
    """A fresh calendar for the stored locale/timezone preferences."""
    if settings is None:
        settings = load_settings()
    return GregorianCalendar.for_locale(
        settings.get("locale"),
        tz=zone_by_name(settings.get("timezone")),
        first_weekday=settings.get("first_weekday"),
    )
