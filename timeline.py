"""Timeline provider: the contract between the widget host and the grid core.

The host asks for an entry (placeholder preview, live snapshot or a full
timeline) and is told when to ask again.  The calendar is fetched from
``calendar_factory`` on every request so a locale or timezone change is
picked up at the next build without restarting anything.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Callable

from calendar_logic import Entry, MonthGridBuilder
from calendar_system import CalendarSystem, GregorianCalendar
from refresh import RefreshScheduler

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Timeline:
    """Entries to show plus the earliest time the host should reload."""

    entries: tuple[Entry, ...]
    refresh_after: datetime
    today: date | None = None
    policy: str = "after"


class CalendarTimelineProvider:
    def __init__(
        self,
        calendar_factory: Callable[[], CalendarSystem] = GregorianCalendar.for_locale,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.calendar_factory = calendar_factory
        self.clock = clock

    def build_entry(self, now: datetime) -> Entry:
        return self._build_entry(self.calendar_factory(), now)

    def next_refresh_time(self, now: datetime) -> datetime:
        return RefreshScheduler(self.calendar_factory()).next_refresh_time(now)

    @staticmethod
    def _build_entry(calendar: CalendarSystem, now: datetime) -> Entry:
        builder = MonthGridBuilder(calendar, now)
        return Entry(timestamp=now, months=tuple(builder.build_four_month_models()))

    # ------------------------------------------------------------------
    # Host requests
    # ------------------------------------------------------------------
    def placeholder(self) -> Entry:
        return self.build_entry(self.clock())

    def snapshot(self) -> Entry:
        return self.build_entry(self.clock())

    def timeline(self) -> Timeline:
        now = self.clock()
        # one calendar for both, so a settings edit can't split them
        calendar = self.calendar_factory()
        entry = self._build_entry(calendar, now)
        refresh_after = RefreshScheduler(calendar).next_refresh_time(now)
        logger.debug("Built entry for %s, next refresh at %s", now, refresh_after)
        return Timeline(entries=(entry,), refresh_after=refresh_after,
                        today=calendar.local_date(now))
