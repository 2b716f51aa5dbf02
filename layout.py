"""Render instructions for the widget: which months, what sizes, what colours.

Pure functions of ``(Entry, WidgetFamily, Theme)``; nothing here draws.
A renderer walks :class:`WidgetLayout` row by row.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from calendar_logic import Day, Entry, Month


class WidgetFamily(Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    EXTRA_LARGE = "extra_large"


class Theme(Enum):
    LIGHT = "light"
    DARK = "dark"


@dataclass(frozen=True)
class SizeMetrics:
    title_font: int
    weekday_font: int
    day_font: int
    row_height: int
    today_circle: int
    card_padding: int
    corner_radius: int
    vertical_spacing: int
    day_row_spacing: int


@dataclass(frozen=True)
class Palette:
    background: tuple[str, str]  # gradient top-left, bottom-right
    shadow_radius: int
    shadow_y: int
    shadow_opacity: float
    today_fill_opacity: float
    today_text: str


@dataclass(frozen=True)
class CellInstruction:
    text: str
    bold: bool
    highlight: bool


@dataclass(frozen=True)
class MonthInstruction:
    title: str
    weekday_symbols: tuple[str, ...]
    rows: tuple[tuple[CellInstruction, ...], ...]


@dataclass(frozen=True)
class WidgetLayout:
    family: WidgetFamily
    theme: Theme
    metrics: SizeMetrics
    palette: Palette
    months: tuple[tuple[MonthInstruction, ...], ...]  # grid rows of month cards
    spacing: int = 8


_METRICS = {
    WidgetFamily.SMALL: SizeMetrics(11, 8, 9, 12, 14, 8, 12, 4, 2),
    WidgetFamily.MEDIUM: SizeMetrics(12, 9, 10, 14, 16, 10, 14, 5, 2),
    WidgetFamily.LARGE: SizeMetrics(13, 10, 11, 16, 20, 12, 16, 6, 3),
}

_PALETTES = {
    Theme.LIGHT: Palette(("#F2F2F2", "#E0E0E0"), 6, 3, 0.08, 0.2, "accent"),
    Theme.DARK: Palette(("#262626", "#1A1A1A"), 4, 2, 0.3, 0.4, "#FFFFFF"),
}


def parse_family(name: str | None) -> WidgetFamily:
    """Settings string to family; unknown names lay out as medium."""
    try:
        return WidgetFamily(name)
    except ValueError:
        return WidgetFamily.MEDIUM


def metrics_for(family: WidgetFamily) -> SizeMetrics:
    if family is WidgetFamily.EXTRA_LARGE:
        family = WidgetFamily.LARGE
    return _METRICS[family]


def months_for(entry: Entry, family: WidgetFamily) -> tuple[tuple[Month, ...], ...]:
    """Months a widget of ``family`` shows, grouped into rows."""
    if family is WidgetFamily.SMALL:
        return ((entry.current_month,),)
    if family is WidgetFamily.MEDIUM:
        return ((entry.previous_month, entry.current_month),)
    return (
        (entry.previous_month, entry.current_month),
        (entry.next_month, entry.next_next_month),
    )


def _cell(day: Day) -> CellInstruction:
    if day.is_placeholder:
        return CellInstruction("", bold=False, highlight=False)
    return CellInstruction(str(day.day_number), bold=day.is_today, highlight=day.is_today)


def month_instruction(month: Month) -> MonthInstruction:
    return MonthInstruction(
        title=month.title,
        weekday_symbols=month.weekday_symbols,
        rows=tuple(tuple(_cell(d) for d in week.days) for week in month.weeks),
    )


def build_layout(entry: Entry, family: WidgetFamily, theme: Theme = Theme.LIGHT) -> WidgetLayout:
    return WidgetLayout(
        family=family,
        theme=theme,
        metrics=metrics_for(family),
        palette=_PALETTES[theme],
        months=tuple(
            tuple(month_instruction(m) for m in row) for row in months_for(entry, family)
        ),
    )
