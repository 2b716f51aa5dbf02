from datetime import datetime, timezone

from calendar_system import GregorianCalendar
from layout import Theme, WidgetFamily, build_layout, metrics_for, months_for, parse_family
from timeline import CalendarTimelineProvider

NOW = datetime(2024, 2, 15, 12, 0, tzinfo=timezone.utc)


def _entry():
    provider = CalendarTimelineProvider(lambda: GregorianCalendar(tz=timezone.utc))
    return provider.build_entry(NOW)


def test_months_per_family():
    entry = _entry()
    ids = lambda rows: [[m.id for m in row] for row in rows]
    assert ids(months_for(entry, WidgetFamily.SMALL)) == [["2024-2"]]
    assert ids(months_for(entry, WidgetFamily.MEDIUM)) == [["2024-1", "2024-2"]]
    assert ids(months_for(entry, WidgetFamily.LARGE)) == [
        ["2024-1", "2024-2"], ["2024-3", "2024-4"],
    ]
    assert months_for(entry, WidgetFamily.EXTRA_LARGE) == months_for(entry, WidgetFamily.LARGE)


def test_parse_family_defaults_to_medium():
    assert parse_family("small") is WidgetFamily.SMALL
    assert parse_family("extra_large") is WidgetFamily.EXTRA_LARGE
    assert parse_family("huge") is WidgetFamily.MEDIUM
    assert parse_family(None) is WidgetFamily.MEDIUM


def test_metrics_grow_with_size():
    small, medium, large = (metrics_for(f) for f in
                            (WidgetFamily.SMALL, WidgetFamily.MEDIUM, WidgetFamily.LARGE))
    assert (small.title_font, medium.title_font, large.title_font) == (11, 12, 13)
    assert (small.today_circle, medium.today_circle, large.today_circle) == (14, 16, 20)
    assert metrics_for(WidgetFamily.EXTRA_LARGE) == large


def test_cells_mark_today_and_blank_placeholders():
    layout = build_layout(_entry(), WidgetFamily.SMALL, Theme.DARK)
    (card,) = layout.months[0]
    assert card.title == "February 2024"
    assert card.weekday_symbols[0] == "Sun"
    first_row = card.rows[0]
    assert [c.text for c in first_row] == ["", "", "", "", "1", "2", "3"]
    highlighted = [c.text for row in card.rows for c in row if c.highlight]
    assert highlighted == ["15"]
    assert layout.palette.today_text == "#FFFFFF"


def test_themes_differ():
    entry = _entry()
    light = build_layout(entry, WidgetFamily.MEDIUM)
    dark = build_layout(entry, WidgetFamily.MEDIUM, Theme.DARK)
    assert light.theme is Theme.LIGHT
    assert light.months == dark.months
    assert light.palette != dark.palette
