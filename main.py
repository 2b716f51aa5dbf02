"""Entry point — hosts the calendar timeline behind a pystray tray icon."""

import logging
import os
import sys
import threading
from datetime import date, datetime

from PIL import Image

from calendar_logic import Entry
from icon_gen import create_icon_image
from refresh import FALLBACK_INTERVAL
from settings import calendar_from_settings, load_settings
from timeline import CalendarTimelineProvider, Timeline

logger = logging.getLogger(__name__)


def _init_logging(level_name: str | None = None) -> None:
    """Log to stderr; EASY_CALENDAR_DEBUG=1 forces DEBUG."""
    debug_env = os.environ.get("EASY_CALENDAR_DEBUG", "")
    if debug_env.strip().lower() in ("1", "true", "yes", "on"):
        level_name = "DEBUG"

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stderr)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)-7s %(name)s: %(message)s", datefmt="%H:%M:%S",
        ))
        root.addHandler(handler)

    level = logging.INFO
    if isinstance(level_name, str):
        level = getattr(logging, level_name.upper(), logging.INFO)
    root.setLevel(level)


def _today_number(entry: Entry, today: date | None = None) -> int:
    """Day number of the highlighted cell, else of the calendar's local date."""
    for week in entry.current_month.weeks:
        for day in week.days:
            if day.is_today:
                return day.day_number
    if today is not None:
        return today.day
    return entry.timestamp.day


class TrayHost:
    """Keeps the tray icon in step with the timeline provider."""

    def __init__(self, provider: CalendarTimelineProvider) -> None:
        self.provider = provider
        self.tray = None
        self._timer: threading.Timer | None = None

    def _render(self, timeline: Timeline) -> tuple[Image.Image, str]:
        entry = timeline.entries[0]
        image = create_icon_image(_today_number(entry, timeline.today))
        return image, entry.current_month.title

    def refresh(self) -> None:
        try:
            timeline = self.provider.timeline()
        except Exception:
            logger.exception("Rebuilding the calendar failed, retrying in 24h")
            self._schedule(self.provider.clock() + FALLBACK_INTERVAL)
            return
        self.tray.icon, self.tray.title = self._render(timeline)
        self._schedule(timeline.refresh_after)

    def _schedule(self, when: datetime) -> None:
        delay = max(0.0, (when - self.provider.clock()).total_seconds())
        logger.info("Next refresh at %s (in %.0fs)", when.isoformat(), delay)
        self._timer = threading.Timer(delay, self.refresh)
        self._timer.daemon = True
        self._timer.start()

    def run(self) -> None:
        from tray_icon import create_tray

        timeline = self.provider.timeline()
        image, title = self._render(timeline)
        self.tray = create_tray(image, title, self.stop)
        self._schedule(timeline.refresh_after)
        self.tray.run()

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        if self.tray is not None:
            self.tray.stop()


def main() -> None:
    _init_logging()
    settings = load_settings()
    logger.info("Starting with locale=%s timezone=%s",
                settings["locale"], settings["timezone"])

    # settings are re-read on every build so edits apply at the next refresh
    provider = CalendarTimelineProvider(calendar_factory=calendar_from_settings)
    TrayHost(provider).run()


if __name__ == "__main__":
    main()
