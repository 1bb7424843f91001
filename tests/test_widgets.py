"""Tests for the widgets module."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import MagicMock

from compensation import compute_compensation
from models import CalendarConfig, CompensationConfig
from report import build_report_totals
from widgets import HEADER_WIDTH, CalendarSummary, CompensationSummary, ReportStatsPanel, SyncHeader


def _rendered(widget) -> str:
    widget.update.assert_called_once()
    return widget.update.call_args[0][0].plain


def _pacing(calendar, logged):
    return compute_compensation(calendar, logged, CompensationConfig())


class TestSyncHeader:
    """Tests for the SyncHeader widget."""

    def test_signed_in(self):
        header = SyncHeader()
        header.update = MagicMock()

        header.update_display("Jane", "Acme", date(2026, 10, 19), False, datetime(2026, 10, 19, 9, 30))

        text = _rendered(header)
        assert "Jane @ Acme" in text
        assert "Mon, 19 Oct" in text
        assert "Synced 19 Oct 2026 09:30" in text

    def test_loading(self):
        header = SyncHeader()
        header.update = MagicMock()

        header.update_display("", "", date(2026, 10, 19), True, None)

        text = _rendered(header)
        assert "Not signed in" in text
        assert "Syncing" in text

    def test_never_synced(self):
        header = SyncHeader()
        header.update = MagicMock()

        header.update_display("Jane", "", date(2026, 10, 19), False, None)

        assert "Awaiting sync" in _rendered(header)

    def test_padded_to_header_width(self):
        header = SyncHeader()
        header.update = MagicMock()

        header.update_display("Jane", "Acme", date(2026, 10, 19), False, None)

        assert len(_rendered(header)) == HEADER_WIDTH


class TestCalendarSummary:
    """Tests for the CalendarSummary widget."""

    def test_behind_schedule(self, calendar_160):
        summary = CalendarSummary()
        summary.update = MagicMock()

        summary.update_display(calendar_160, Decimal("60"), CalendarConfig(), _pacing(calendar_160, "60"))

        text = _rendered(summary)
        assert "10 of 20" in text
        assert "Remaining hours  20 h" in text
        assert "Hours to target  100 h" in text
        assert "Sun, Sat" in text

    def test_ahead_of_schedule(self, calendar_160):
        summary = CalendarSummary()
        summary.update = MagicMock()
        config = CalendarConfig(holidays=frozenset({"2026-12-25"}))

        summary.update_display(calendar_160, Decimal("90.5"), config, _pacing(calendar_160, "90.5"))

        text = _rendered(summary)
        assert "Advanced hours  10.5 h" in text
        assert "2026-12-25" in text

    def test_no_weekend_or_holidays(self, calendar_160):
        summary = CalendarSummary()
        summary.update = MagicMock()

        summary.update_display(
            calendar_160, Decimal("0"), CalendarConfig(weekend_days=frozenset()), _pacing(calendar_160, "0")
        )

        text = _rendered(summary)
        assert "Weekend  none" in text
        assert "Holidays  none" in text

    def test_pacing_comes_from_engine_result(self, calendar_160):
        summary = CalendarSummary()
        summary.update = MagicMock()
        pacing = replace(_pacing(calendar_160, "60"), hour_delta=Decimal("-3"), hours_to_target=Decimal("7"))

        summary.update_display(calendar_160, Decimal("60"), CalendarConfig(), pacing)

        text = _rendered(summary)
        assert "Remaining hours  3 h" in text
        assert "Hours to target  7 h" in text


class TestReportStatsPanel:
    """Tests for the ReportStatsPanel widget."""

    def test_no_report_yet(self):
        panel = ReportStatsPanel()
        panel.update = MagicMock()

        panel.update_display(None, False, "")

        assert "No report loaded yet." in _rendered(panel)

    def test_error_shown_with_previous_totals(self, report_payload):
        panel = ReportStatsPanel()
        panel.update = MagicMock()

        panel.update_display(build_report_totals(report_payload), False, "Report request failed")

        text = _rendered(panel)
        assert "Report request failed" in text
        assert "160h 0m" in text

    def test_stats(self, report_payload):
        panel = ReportStatsPanel()
        panel.update = MagicMock()

        panel.update_display(build_report_totals(report_payload), False, "")

        text = _rendered(panel)
        assert "Jane Doe jane@example.com" in text
        assert "On computer  150 h" in text
        assert "Active minutes  82%" in text
        assert "Tracked time  151h 30m" in text
        assert "Idle  —" in text
        assert "Timer status  running" in text
        assert "Client version  5.2.1" in text

    def test_no_line_items(self):
        panel = ReportStatsPanel()
        panel.update = MagicMock()

        panel.update_display(build_report_totals({}), False, "")

        text = _rendered(panel)
        assert "0h 0m" in text
        assert "no line items" in text


class TestCompensationSummary:
    """Tests for the CompensationSummary widget."""

    def test_disabled(self, calendar_160, salary_config):
        summary = CompensationSummary()
        summary.update = MagicMock()
        config = replace(salary_config, enable_salary=False)

        summary.update_display(compute_compensation(calendar_160, 160, config), False, True)

        assert "Salary calculations are off" in _rendered(summary)

    def test_hidden(self, calendar_160, salary_config):
        summary = CompensationSummary()
        summary.update = MagicMock()

        summary.update_display(compute_compensation(calendar_160, 160, salary_config), True, False)

        text = _rendered(summary)
        assert "Hidden" in text
        assert "$" not in text.replace("Press $", "")

    def test_full_breakdown(self, calendar_160, salary_config):
        summary = CompensationSummary()
        summary.update = MagicMock()

        summary.update_display(compute_compensation(calendar_160, 160, salary_config), True, True)

        text = _rendered(summary)
        assert "Base salary  $4,000.00" in text
        assert "Attendance bonus (5%)  $200.00" in text
        assert "Performance bonus (3%)  $120.00" in text
        assert "TOTAL  $4,640.00" in text

    def test_prorated(self, calendar_160, salary_config):
        summary = CompensationSummary()
        summary.update = MagicMock()

        summary.update_display(compute_compensation(calendar_160, 120, salary_config), True, True)

        text = _rendered(summary)
        assert "Prorated base  $3,000.00" in text
        assert "Target met  no" in text
