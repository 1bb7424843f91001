"""Report payload normalisation and total-worked resolution."""

from __future__ import annotations

from typing import Any

from duration import extract_duration_ms
from models import ReportExtraction, ReportTotals, TimeReportStats
from utils import finite_float, sanitise_number

REPORT_KEY = "employeeTimeReport"
ITEMS_KEY = "timeReportItems"

# stats attribute -> report item key
NUMERIC_FIELDS = {
    "total_hours": "totalHours",
    "active_minutes_ratio": "activeMinutesRatio",
    "active_seconds_ratio": "activeSecondsRatio",
    "total_seconds_count": "totalSecondsCount",
    "active_seconds_count": "activeSecondsCount",
    "inactive_seconds_count": "inactiveSecondsCount",
    "break_hours": "breakHours",
    "span_hours": "spanHours",
    "on_computer_hours": "onComputerHours",
    "meeting_hours": "meetingHours",
    "idle_hours": "idleHours",
}

MS_PER_HOUR = 60 * 60 * 1000
MS_PER_SECOND = 1000


def extract_report_stats(payload: Any) -> ReportExtraction:
    """Locate the first usable report line item and normalise its fields.

    Never raises: a missing report or empty item list yields stats=None.
    """
    report = payload.get(REPORT_KEY) if isinstance(payload, dict) else None
    if not isinstance(report, dict):
        return ReportExtraction(report=None)

    items = report.get(ITEMS_KEY)
    if not isinstance(items, list) or not items:
        return ReportExtraction(report=report)

    item = next((entry for entry in items if isinstance(entry, dict)), None)
    if item is None:
        return ReportExtraction(report=report)

    stats = TimeReportStats(
        title=item.get("title"),
        email=item.get("email"),
        latest_activity=item.get("las"),
        **{attr: sanitise_number(item.get(key)) for attr, key in NUMERIC_FIELDS.items()},
    )
    return ReportExtraction(report=report, item=item, stats=stats)


def _scaled(value: float | None, factor: int) -> float | None:
    if value is None:
        return None
    return value * factor


def resolve_total_worked_ms(stats: TimeReportStats | None, payload: Any) -> float:
    """Largest non-negative reading across every known duration signal."""
    candidates = [extract_duration_ms(payload)]
    if stats is not None:
        candidates.extend([
            _scaled(stats.total_hours, MS_PER_HOUR),
            _scaled(stats.on_computer_hours, MS_PER_HOUR),
            _scaled(stats.span_hours, MS_PER_HOUR),
            _scaled(stats.total_seconds_count, MS_PER_SECOND),
            _scaled(stats.active_seconds_count, MS_PER_SECOND),
        ])

    usable = [c for c in map(finite_float, candidates) if c is not None and c >= 0]
    return max(usable) if usable else 0


def build_report_totals(payload: Any) -> ReportTotals:
    extraction = extract_report_stats(payload)
    return ReportTotals(
        raw=payload,
        total_worked_ms=resolve_total_worked_ms(extraction.stats, payload),
        report=extraction.report,
        item=extraction.item,
        stats=extraction.stats,
    )
