"""Calendar capability used by the grid builder and the refresh scheduler.

The builder never talks to ``datetime`` arithmetic directly: everything that
depends on a calendar system, a locale or a timezone goes through an object
implementing :class:`CalendarSystem`.  :class:`GregorianCalendar` is the
production implementation; tests subclass it to force Monday-first weeks or
to inject arithmetic failures.
"""

from __future__ import annotations

import calendar
import locale
import logging
import os
import threading
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

SUNDAY = 1
MONDAY = 2
SATURDAY = 7

# Sunday-first order, matching the 1-based weekday numbering (1 = Sunday)
WEEKDAY_ABBR = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

# CLDR week data: territories whose week does not start on Monday
_SUNDAY_FIRST = frozenset(
    "AG AS BD BR BS BT BW BZ CA CO DM DO ET GT GU HK HN ID IL IN JM JP KE KH "
    "KR LA MH MM MO MT MX MZ NI NP PA PE PH PK PR PT PY SA SG SV TH TT TW UM "
    "US VE VI WS YE ZA ZW".split()
)
_SATURDAY_FIRST = frozenset("AE AF BH DJ DZ EG IQ IR JO KW LY OM QA SD SY".split())

_TITLE_FORMATS = {
    "ja": "{year}年{month}",
    "zh": "{year}年{month}",
    "ko": "{year}년 {month}",
    "hu": "{year}. {month}",
}
DEFAULT_TITLE_FORMAT = "{month} {year}"


class CalendarSystem(Protocol):
    """What the grid builder and scheduler need from a calendar."""

    first_weekday: int
    short_weekday_names: list[str]

    def days_in_month(self, year: int, month: int) -> int: ...

    def weekday(self, d: date) -> int: ...

    def make_date(self, year: int, month: int, day: int) -> date: ...

    def add_months(self, d: date, months: int) -> date: ...

    def add_days(self, ts: datetime, days: int) -> datetime: ...

    def start_of_day(self, ts: datetime) -> datetime: ...

    def local_date(self, ts: datetime) -> date: ...

    def month_title(self, year: int, month: int) -> str: ...


@lru_cache(maxsize=1)
def local_timezone() -> tzinfo:
    """Best-effort IANA zone for this machine, resolved once per process.

    Tries ``$TZ``, then the ``/etc/localtime`` link target, then the
    process's current fixed UTC offset (which does not follow DST).
    """
    candidates: list[str] = []
    env_tz = os.environ.get("TZ", "").lstrip(":")
    if env_tz:
        candidates.append(env_tz)
    try:
        target = os.path.realpath("/etc/localtime")
        if "zoneinfo" + os.sep in target:
            candidates.append(target.split("zoneinfo" + os.sep, 1)[1])
    except OSError:
        pass

    for name in candidates:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.debug("Ignoring unusable timezone name %r", name)

    logger.warning("Could not determine an IANA timezone, using fixed local offset")
    return datetime.now().astimezone().tzinfo or timezone.utc


def zone_by_name(name: str | None) -> tzinfo:
    """Resolve an IANA name, falling back to :func:`local_timezone`."""
    if not name:
        return local_timezone()
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, using local timezone", name)
        return local_timezone()


def _split_locale(locale_name: str) -> tuple[str, str]:
    """``"de_CH.UTF-8"`` -> ``("de", "CH")``."""
    base = locale_name.split(".", 1)[0].split("@", 1)[0].replace("-", "_")
    lang, _, territory = base.partition("_")
    return lang.lower(), territory.upper()


def default_first_weekday(locale_name: str | None) -> int:
    """First day of the week for a locale's territory (1 = Sunday)."""
    if not locale_name:
        return SUNDAY
    lang, territory = _split_locale(locale_name)
    if not territory:
        return SUNDAY if lang == "en" else MONDAY
    if territory in _SUNDAY_FIRST:
        return SUNDAY
    if territory in _SATURDAY_FIRST:
        return SATURDAY
    return MONDAY


# locale name -> (weekday names, month names), None when not installed.
# Filling it switches the process-wide LC_TIME, so that happens once per
# locale and under the lock; builds after that only read.
_NAMES_CACHE: dict[str, tuple[list[str], list[str]] | None] = {}
_NAMES_LOCK = threading.Lock()


def _read_locale_names(locale_name: str) -> tuple[list[str], list[str]] | None:
    for candidate in (locale_name, locale_name.split(".", 1)[0] + ".UTF-8"):
        try:
            with calendar.different_locale(candidate):
                # calendar numbers weekdays from Monday = 0
                weekdays = [calendar.day_abbr[d] for d in (6, 0, 1, 2, 3, 4, 5)]
                months = [calendar.month_name[m] for m in range(1, 13)]
            return weekdays, months
        except locale.Error:
            logger.debug("Locale %r is not installed", candidate)
    return None


def _locale_names(locale_name: str) -> tuple[list[str], list[str]]:
    """Abbreviated weekday names (Sunday first) and month names for a locale.

    Raises ``locale.Error`` when the locale is not installed.
    """
    try:
        names = _NAMES_CACHE[locale_name]
    except KeyError:
        with _NAMES_LOCK:
            if locale_name not in _NAMES_CACHE:
                _NAMES_CACHE[locale_name] = _read_locale_names(locale_name)
            names = _NAMES_CACHE[locale_name]
    if names is None:
        raise locale.Error(f"unsupported locale setting: {locale_name!r}")
    return list(names[0]), list(names[1])


def current_locale() -> str | None:
    """The process's LC_TIME locale name, or None for the C locale."""
    try:
        name, _encoding = locale.getlocale(locale.LC_TIME)
    except ValueError:
        return None
    if not name or name in ("C", "POSIX"):
        return None
    return name


class GregorianCalendar:
    """Proleptic Gregorian calendar bound to one timezone and locale."""

    def __init__(
        self,
        tz: tzinfo | None = None,
        first_weekday: int = SUNDAY,
        weekday_names: list[str] | None = None,
        month_names: list[str] | None = None,
        title_format: str = DEFAULT_TITLE_FORMAT,
    ) -> None:
        if not 1 <= first_weekday <= 7:
            raise ValueError(f"first_weekday must be in 1..7, got {first_weekday}")
        weekday_names = list(weekday_names or WEEKDAY_ABBR)
        month_names = list(month_names or MONTH_NAMES)
        if len(weekday_names) != 7:
            raise ValueError(f"expected 7 weekday names, got {len(weekday_names)}")
        if len(month_names) != 12:
            raise ValueError(f"expected 12 month names, got {len(month_names)}")

        self.tz = tz if tz is not None else timezone.utc
        self.first_weekday = first_weekday
        self.short_weekday_names = weekday_names
        self.month_names = month_names
        self.title_format = title_format

    @classmethod
    def for_locale(
        cls,
        locale_name: str | None = None,
        tz: tzinfo | None = None,
        first_weekday: int | None = None,
    ) -> "GregorianCalendar":
        """Calendar using a locale's names, week start and title layout.

        ``locale_name=None`` means the process's current LC_TIME locale.
        A locale that is not installed keeps the English names.
        """
        if locale_name is None:
            locale_name = current_locale()
        if first_weekday is None:
            first_weekday = default_first_weekday(locale_name)
        if tz is None:
            tz = local_timezone()

        weekday_names = month_names = None
        title_format = DEFAULT_TITLE_FORMAT
        if locale_name:
            try:
                weekday_names, month_names = _locale_names(locale_name)
            except locale.Error:
                logger.warning("Locale %r is not available, using English names", locale_name)
            else:
                lang, _territory = _split_locale(locale_name)
                title_format = _TITLE_FORMATS.get(lang, DEFAULT_TITLE_FORMAT)

        return cls(
            tz=tz,
            first_weekday=first_weekday,
            weekday_names=weekday_names,
            month_names=month_names,
            title_format=title_format,
        )

    # ------------------------------------------------------------------
    # Day-level queries
    # ------------------------------------------------------------------
    def days_in_month(self, year: int, month: int) -> int:
        return calendar.monthrange(year, month)[1]

    def weekday(self, d: date) -> int:
        """1-based weekday, 1 = Sunday ... 7 = Saturday."""
        return d.isoweekday() % 7 + 1

    def make_date(self, year: int, month: int, day: int) -> date:
        return date(year, month, day)

    def month_title(self, year: int, month: int) -> str:
        return self.title_format.format(month=self.month_names[month - 1], year=year)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------
    def add_months(self, d: date, months: int) -> date:
        """Shift by whole months, clamping the day to the target month."""
        return d + relativedelta(months=months)

    def add_days(self, ts: datetime, days: int) -> datetime:
        """Same wall-clock time ``days`` calendar days later."""
        local = self._localize(ts)
        return self._resolve(local.replace(tzinfo=None) + timedelta(days=days))

    def start_of_day(self, ts: datetime) -> datetime:
        """First instant of ``ts``'s local day (not always 00:00 under DST)."""
        return self._resolve(datetime.combine(self.local_date(ts), time()))

    def local_date(self, ts: datetime) -> date:
        return self._localize(ts).date()

    # ------------------------------------------------------------------
    # Timezone helpers
    # ------------------------------------------------------------------
    def _localize(self, ts: datetime) -> datetime:
        # naive timestamps are wall-clock times in this calendar's zone
        if ts.tzinfo is None:
            return ts.replace(tzinfo=self.tz)
        return ts.astimezone(self.tz)

    def _resolve(self, wall: datetime) -> datetime:
        # round-trip through UTC moves wall times inside a DST gap forward
        return wall.replace(tzinfo=self.tz).astimezone(timezone.utc).astimezone(self.tz)

    def __repr__(self) -> str:
        return f"GregorianCalendar(tz={self.tz!r}, first_weekday={self.first_weekday})"
