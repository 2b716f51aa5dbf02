"""Pure calendar calculations — no UI dependencies.

:class:`MonthGridBuilder` turns a :class:`~calendar_system.CalendarSystem`
and a reference timestamp into immutable month grids: week rows of exactly
seven cells, padded with placeholders so day 1 lands under its weekday.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime

from calendar_system import CalendarSystem

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7
ENTRY_OFFSETS = (-1, 0, 1, 2)


class FatalConfigurationError(RuntimeError):
    """The calendar system could not resolve a month; no grid can be built."""


@dataclass(frozen=True)
class Day:
    """One grid cell: a real day or an alignment placeholder."""

    id: str
    day_number: int | None
    is_today: bool = False
    is_placeholder: bool = False
    date: date | None = None

    @classmethod
    def placeholder(cls, id: str) -> "Day":
        return cls(id=id, day_number=None, is_placeholder=True)


@dataclass(frozen=True)
class Week:
    id: str
    days: tuple[Day, ...]


@dataclass(frozen=True)
class Month:
    id: str
    year: int
    month: int
    title: str
    weekday_symbols: tuple[str, ...]
    weeks: tuple[Week, ...]
    contains_today: bool


@dataclass(frozen=True)
class Entry:
    """Four consecutive months around the month containing ``timestamp``."""

    timestamp: datetime
    months: tuple[Month, ...]

    @property
    def previous_month(self) -> Month:
        return self.months[0]

    @property
    def current_month(self) -> Month:
        return self.months[1]

    @property
    def next_month(self) -> Month:
        return self.months[2]

    @property
    def next_next_month(self) -> Month:
        return self.months[3]


def rotate_weekday_symbols(symbols: list[str], first_weekday: int) -> tuple[str, ...]:
    """Reorder Sunday-first names so index 0 is ``first_weekday`` (1-based)."""
    n = len(symbols)
    return tuple(symbols[(first_weekday - 1 + i) % n] for i in range(n))


def leading_empty_cells(first_of_month_weekday: int, first_weekday: int) -> int:
    """Placeholders before day 1 in the first row."""
    return (first_of_month_weekday - first_weekday + DAYS_PER_WEEK) % DAYS_PER_WEEK


class MonthGridBuilder:
    """Builds month grids relative to the day containing ``reference``."""

    def __init__(self, calendar: CalendarSystem, reference: datetime) -> None:
        self.calendar = calendar
        self.today = calendar.start_of_day(reference)
        self._today_date = calendar.local_date(self.today)

    def build_four_month_models(self) -> list[Month]:
        """[previous, current, next, next-next] months."""
        return [self.build_month(offset) for offset in ENTRY_OFFSETS]

    def build_month(self, offset: int) -> Month:
        """Month ``offset`` months away from today's month.

        Raises :class:`FatalConfigurationError` when the calendar cannot
        resolve the target month.
        """
        cal = self.calendar
        try:
            target = cal.add_months(self._today_date, offset)
        except (ValueError, OverflowError) as exc:
            raise FatalConfigurationError(
                f"Failed to calculate month with offset {offset}"
            ) from exc
        if target is None:
            raise FatalConfigurationError(f"Failed to calculate month with offset {offset}")

        year, month = target.year, target.month
        return Month(
            id=f"{year}-{month}",
            year=year,
            month=month,
            title=cal.month_title(year, month),
            weekday_symbols=rotate_weekday_symbols(
                cal.short_weekday_names, cal.first_weekday
            ),
            weeks=self._build_weeks(year, month),
            contains_today=(year, month) == (self._today_date.year, self._today_date.month),
        )

    def _build_weeks(self, year: int, month: int) -> tuple[Week, ...]:
        cal = self.calendar
        try:
            first_day = cal.make_date(year, month, 1)
            days_in_month = cal.days_in_month(year, month)
        except (ValueError, OverflowError) as exc:
            raise FatalConfigurationError(
                f"Failed to resolve the first day of {year}-{month}"
            ) from exc
        if first_day is None:
            raise FatalConfigurationError(f"Failed to resolve the first day of {year}-{month}")

        leading = leading_empty_cells(cal.weekday(first_day), cal.first_weekday)

        weeks: list[Week] = []
        current_day = 1
        row = 0
        while current_day <= days_in_month:
            days: list[Day] = []
            for col in range(DAYS_PER_WEEK):
                if row == 0 and col < leading:
                    days.append(Day.placeholder(f"placeholder-leading-{row}-{col}"))
                elif current_day <= days_in_month:
                    days.append(self._build_day(year, month, current_day))
                    current_day += 1
                else:
                    days.append(Day.placeholder(f"placeholder-trailing-{row}-{col}"))
            weeks.append(Week(id=f"week-{row}", days=tuple(days)))
            row += 1
        return tuple(weeks)

    def _build_day(self, year: int, month: int, day: int) -> Day:
        try:
            day_date = self.calendar.make_date(year, month, day)
        except (ValueError, OverflowError):
            # the cell still renders, it just can never be "today"
            logger.warning("Could not build date for %d-%02d-%02d", year, month, day)
            day_date = None
        return Day(
            id=f"{year}-{month}-{day}",
            day_number=day,
            is_today=day_date is not None and day_date == self._today_date,
            date=day_date,
        )
