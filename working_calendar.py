"""Working-day counts and target hours for the current month."""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal

from models import CalendarConfig, CalendarResult
from utils import iter_month_days, js_weekday, month_bounds, parse_iso_date


def is_working_day(d: date, config: CalendarConfig) -> bool:
    """A day is worked unless it falls on a weekend day or a holiday."""
    return js_weekday(d) not in config.weekend_days and d.isoformat() not in config.holidays


def compute_working_calendar(config: CalendarConfig, today: date) -> CalendarResult:
    """Count working days in today's month, in total and up to today inclusive."""
    total_working_days = 0
    working_days_to_date = 0

    for d in iter_month_days(today):
        if not is_working_day(d, config):
            continue
        total_working_days += 1
        if d <= today:
            working_days_to_date += 1

    daily = Decimal(config.daily_target_hours)
    return CalendarResult(
        total_working_days=total_working_days,
        working_days_to_date=working_days_to_date,
        total_target_hours=total_working_days * daily,
        expected_hours_by_today=working_days_to_date * daily,
    )


def public_holidays_for_month(country: str, today: date) -> dict[str, str]:
    """Get public holidays for a country in the month containing today.

    Raises NotImplementedError for a country the holidays package does not know.
    """
    import holidays

    first_day, last_day = month_bounds(today)
    country_holidays = holidays.country_holidays(country, years=today.year)
    return {
        d.isoformat(): name
        for d, name in sorted(country_holidays.items())
        if first_day <= d <= last_day
    }


def add_holiday(config: CalendarConfig, value: str) -> CalendarConfig:
    """Return config with the YYYY-MM-DD date added. Invalid input leaves it unchanged."""
    parsed = parse_iso_date(value)
    if parsed is None:
        return config
    return replace(config, holidays=config.holidays | {parsed.isoformat()})


def remove_holiday(config: CalendarConfig, iso_date: str) -> CalendarConfig:
    return replace(config, holidays=config.holidays - {iso_date})


def toggle_weekend_day(config: CalendarConfig, day_index: int) -> CalendarConfig:
    if day_index in config.weekend_days:
        return replace(config, weekend_days=config.weekend_days - {day_index})
    return replace(config, weekend_days=config.weekend_days | {day_index})


def apply_calendar_edits(
    config: CalendarConfig,
    weekend_days: set[int],
    holiday_entries: list[str],
    daily_target_hours: Decimal,
) -> tuple[CalendarConfig, list[str]]:
    """Apply edited settings to config.

    Returns the new config and the holiday entries that were ignored as invalid.
    """
    updated = replace(config, daily_target_hours=daily_target_hours)
    for day_index in set(config.weekend_days) ^ set(weekend_days):
        updated = toggle_weekend_day(updated, day_index)

    wanted = set()
    ignored = []
    for entry in holiday_entries:
        if not entry.strip():
            continue
        parsed = parse_iso_date(entry)
        if parsed is None:
            ignored.append(entry.strip())
            continue
        wanted.add(parsed.isoformat())
        updated = add_holiday(updated, parsed.isoformat())

    for iso in config.holidays - wanted:
        updated = remove_holiday(updated, iso)
    return updated, ignored
