"""Custom widgets for the work-hours dashboard."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from textual.widgets import Static
from rich.text import Text

from compensation import BONUS_LABELS, format_currency
from duration import format_duration
from models import CalendarConfig, CalendarResult, CompensationResult, ReportTotals
from utils import (
    PLACEHOLDER,
    WEEKDAY_LABELS,
    format_hours,
    format_number,
    format_percentage,
    format_timestamp,
)

LABEL_WIDTH = 26
# Columns the sync header pads its left and right halves out to
HEADER_WIDTH = 74


def _line(text: Text, label: str, value: str, dim: bool = False) -> None:
    text.append(f"{label:>{LABEL_WIDTH}}  {value}\n", style="dim" if dim else "")


class SyncHeader(Static):
    """Shows the signed-in account on the left and sync status on the right."""

    def update_display(
        self,
        account_name: str,
        company_name: str,
        today: date,
        loading: bool,
        last_synced_at: datetime | None,
    ):
        if loading:
            sync_label = "Syncing…"
        elif last_synced_at:
            sync_label = f"Synced {last_synced_at.strftime('%d %b %Y %H:%M')}"
        else:
            sync_label = "Awaiting sync"

        who = account_name or "Not signed in"
        if company_name:
            who = f"{who} @ {company_name}"

        text = Text()
        text.append(who, style="bold")
        right = f"{today.strftime('%a, %d %b')}  |  {sync_label}"
        spacing = HEADER_WIDTH - len(who) - len(right)
        text.append(" " * spacing if spacing > 0 else "  ")
        text.append(right, style="bold")
        self.update(text)


class CalendarSummary(Static):
    """Working days and hour pacing for the month."""

    def update_display(
        self,
        calendar: CalendarResult,
        logged_hours: Decimal,
        config: CalendarConfig,
        pacing: CompensationResult,
    ):
        hour_delta = pacing.hour_delta
        hours_to_target = pacing.hours_to_target
        status_label = "Advanced hours" if hour_delta >= 0 else "Remaining hours"

        text = Text()
        text.append("CALENDAR\n", style="bold")
        _line(text, "Working days", f"{calendar.working_days_to_date} of {calendar.total_working_days}")
        _line(text, "Days remaining", str(calendar.working_days_remaining),
              dim=calendar.working_days_remaining == 0)
        _line(text, "Target hours", format_hours(calendar.total_target_hours))
        _line(text, "Expected by today", format_hours(calendar.expected_hours_by_today))
        _line(text, "Logged hours", format_hours(logged_hours))
        _line(text, status_label, format_hours(abs(hour_delta)))
        _line(text, "Hours to target", format_hours(hours_to_target), dim=hours_to_target == 0)

        weekend = ", ".join(WEEKDAY_LABELS[d] for d in sorted(config.weekend_days)) or "none"
        holidays = ", ".join(config.sorted_holidays) or "none"
        _line(text, "Weekend", weekend, dim=True)
        _line(text, "Holidays", holidays, dim=True)
        _line(text, "Daily target", format_hours(config.daily_target_hours), dim=True)

        self.update(text)


class ReportStatsPanel(Static):
    """Stats from the most recent report fetch."""

    def update_display(self, totals: ReportTotals | None, loading: bool, error: str):
        text = Text()
        text.append("REPORT\n", style="bold")

        if error:
            text.append(f"{error}\n", style="bold red")
        if totals is None:
            text.append("Syncing…" if loading else "No report loaded yet.", style="dim")
            self.update(text)
            return

        _line(text, "Total worked", format_duration(totals.total_worked_ms))
        stats = totals.stats
        if stats is None:
            text.append("Report contained no line items.", style="dim")
            self.update(text)
            return

        if stats.title or stats.email:
            _line(text, "Employee", " ".join(str(v) for v in (stats.title, stats.email) if v))

        hour_fields = [
            ("Total hours", stats.total_hours),
            ("On computer", stats.on_computer_hours),
            ("Span", stats.span_hours),
            ("Meetings", stats.meeting_hours),
            ("Breaks", stats.break_hours),
            ("Idle", stats.idle_hours),
        ]
        for label, value in hour_fields:
            _line(text, label, format_hours(value), dim=value is None)

        _line(text, "Active minutes", format_percentage(stats.active_minutes_ratio),
              dim=stats.active_minutes_ratio is None)
        _line(text, "Active seconds", format_percentage(stats.active_seconds_ratio),
              dim=stats.active_seconds_ratio is None)

        for label, seconds in (
            ("Tracked time", stats.total_seconds_count),
            ("Active time", stats.active_seconds_count),
            ("Inactive time", stats.inactive_seconds_count),
        ):
            value = format_duration(seconds * 1000) if seconds is not None else PLACEHOLDER
            _line(text, label, value, dim=seconds is None)

        activity = stats.activity
        if activity:
            _line(text, "Timer status", str(activity.timer_status or PLACEHOLDER))
            _line(text, "User status", str(activity.user_status or PLACEHOLDER))
            idle = (
                format_duration(activity.idle_seconds * 1000)
                if activity.idle_seconds is not None else PLACEHOLDER
            )
            _line(text, "Idle for", idle)
            _line(text, "Client version", str(activity.client_version or PLACEHOLDER))
            _line(text, "Last activity", format_timestamp(activity.last_sync_ms))

        self.update(text)


class CompensationSummary(Static):
    """Salary breakdown. Hidden behind a toggle like other earnings figures."""

    def update_display(self, result: CompensationResult, enabled: bool, show_salary: bool):
        text = Text()
        text.append("COMPENSATION\n", style="bold")

        if not enabled:
            text.append("Salary calculations are off. Press s to configure.", style="dim")
            self.update(text)
            return
        if not show_salary:
            text.append("Hidden. Press $ to reveal.", style="dim")
            self.update(text)
            return

        def money(amount: Decimal) -> str:
            return format_currency(amount, result.currency)

        _line(text, "Monthly base", money(result.expected_monthly_base))
        _line(text, "Hourly rate", money(result.effective_hourly_rate))
        _line(text, "Target met", "yes" if result.meets_monthly_target else "no")
        _line(text, result.base_pay_label, money(result.base_pay))

        for line in result.bonuses:
            pct = f"{format_number(line.rate * 100)}%"
            label = f"{BONUS_LABELS[line.name]} ({pct})"
            _line(text, label, money(line.amount), dim=not line.active)

        _line(text, "Bonus subtotal", money(result.bonus_subtotal), dim=result.bonus_subtotal == 0)
        text.append(f"{'TOTAL':>{LABEL_WIDTH}}  {money(result.total_compensation)}", style="bold")

        self.update(text)
