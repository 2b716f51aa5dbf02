import locale
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

import calendar_system
from calendar_system import MONDAY, GregorianCalendar
from timeline import CalendarTimelineProvider

NEW_YORK = ZoneInfo("America/New_York")
NOW = datetime(2024, 2, 15, 17, 0, tzinfo=timezone.utc)


def _provider(**cal_kwargs):
    calls = []

    def factory():
        calls.append(1)
        return GregorianCalendar(tz=NEW_YORK, **cal_kwargs)

    return CalendarTimelineProvider(calendar_factory=factory, clock=lambda: NOW), calls


def test_build_entry_has_four_months_in_order():
    provider, _calls = _provider()
    entry = provider.build_entry(NOW)
    assert entry.timestamp == NOW
    assert [m.id for m in entry.months] == ["2024-1", "2024-2", "2024-3", "2024-4"]
    assert entry.previous_month.id == "2024-1"
    assert entry.current_month.id == "2024-2"
    assert entry.next_month.id == "2024-3"
    assert entry.next_next_month.id == "2024-4"


def test_build_entry_is_deterministic():
    provider, _calls = _provider(first_weekday=MONDAY)
    assert provider.build_entry(NOW) == provider.build_entry(NOW)


def test_calendar_fetched_fresh_for_each_request():
    provider, calls = _provider()
    provider.build_entry(NOW)
    provider.next_refresh_time(NOW)
    provider.snapshot()
    assert len(calls) == 3


def test_placeholder_and_snapshot_use_clock():
    provider, _calls = _provider()
    assert provider.placeholder().timestamp == NOW
    assert provider.snapshot() == provider.build_entry(NOW)


def test_timeline_refreshes_after_next_midnight():
    provider, _calls = _provider()
    timeline = provider.timeline()
    assert len(timeline.entries) == 1
    assert timeline.entries[0].timestamp == NOW
    assert timeline.policy == "after"
    assert timeline.refresh_after == datetime(2024, 2, 16, 0, 1, tzinfo=NEW_YORK)
    assert timeline.refresh_after - NOW < timedelta(hours=24)


def test_timeline_uses_one_calendar_for_entry_and_refresh():
    provider, calls = _provider()
    timeline = provider.timeline()
    assert len(calls) == 1
    assert timeline.today == date(2024, 2, 15)


@pytest.fixture
def setlocale_writes(monkeypatch):
    monkeypatch.setattr(calendar_system, "_NAMES_CACHE", {})
    writes = []
    real_setlocale = locale.setlocale

    def spy(category, value=None):
        if value is not None:
            writes.append((category, value))
        return real_setlocale(category, value)

    monkeypatch.setattr(locale, "setlocale", spy)
    return writes


def test_locale_names_resolved_once_per_locale(setlocale_writes):
    GregorianCalendar.for_locale("C.UTF-8", tz=timezone.utc)
    after_first = len(setlocale_writes)
    GregorianCalendar.for_locale("C.UTF-8", tz=timezone.utc)
    assert len(setlocale_writes) == after_first


def test_build_entry_leaves_process_locale_alone(setlocale_writes):
    GregorianCalendar.for_locale("C.UTF-8", tz=timezone.utc)
    setlocale_writes.clear()

    provider = CalendarTimelineProvider(
        lambda: GregorianCalendar.for_locale("C.UTF-8", tz=timezone.utc), clock=lambda: NOW,
    )
    provider.build_entry(NOW)
    provider.timeline()
    assert setlocale_writes == []


def test_concurrent_builds_agree(setlocale_writes):
    provider = CalendarTimelineProvider(
        lambda: GregorianCalendar.for_locale("C.UTF-8", tz=timezone.utc), clock=lambda: NOW,
    )
    with ThreadPoolExecutor(max_workers=8) as pool:
        entries = list(pool.map(lambda _i: provider.build_entry(NOW), range(16)))
    assert all(e == entries[0] for e in entries)
    assert entries[0].current_month.weekday_symbols[-1] == "Sun"
