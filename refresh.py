"""When to rebuild the calendar: shortly after the next local midnight."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from calendar_system import CalendarSystem

logger = logging.getLogger(__name__)

# Past midnight so a timer firing a little early still lands on the new day
MIDNIGHT_BUFFER = timedelta(seconds=60)
FALLBACK_INTERVAL = timedelta(hours=24)


class RefreshScheduler:
    def __init__(self, calendar: CalendarSystem) -> None:
        self.calendar = calendar

    def next_refresh_time(self, now: datetime) -> datetime:
        """Start of tomorrow in the calendar's timezone, plus the buffer."""
        try:
            tomorrow = self.calendar.add_days(now, 1)
            start_of_tomorrow = self.calendar.start_of_day(tomorrow)
        except (ValueError, OverflowError) as exc:
            logger.warning("Day arithmetic failed for %s (%s), refreshing in 24h", now, exc)
            return now + FALLBACK_INTERVAL
        return start_of_tomorrow + MIDNIGHT_BUFFER


def next_refresh_time(calendar: CalendarSystem, now: datetime) -> datetime:
    return RefreshScheduler(calendar).next_refresh_time(now)
