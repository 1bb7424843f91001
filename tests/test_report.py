"""Tests for report.py - report item normalisation and total resolution."""

import json

from report import build_report_totals, extract_report_stats, resolve_total_worked_ms
from models import TimeReportStats


class TestExtractReportStats:
    """Tests for extract_report_stats."""

    def test_full_item(self, report_payload):
        """Every named field is copied from the first item."""
        result = extract_report_stats(report_payload)

        assert result.report is report_payload["employeeTimeReport"]
        assert result.item is report_payload["employeeTimeReport"]["timeReportItems"][0]
        stats = result.stats
        assert stats.title == "Jane Doe"
        assert stats.email == "jane@example.com"
        assert stats.total_hours == 151.5
        assert stats.on_computer_hours == 150.0
        assert stats.meeting_hours == 12
        assert stats.total_seconds_count == 545400
        assert stats.latest_activity["tStatus"] == "running"

    def test_non_finite_fields_are_absent(self):
        """Strings, nulls, booleans and NaN become None, never zero."""
        payload = {"employeeTimeReport": {"timeReportItems": [{
            "totalHours": "12",
            "breakHours": None,
            "spanHours": float("nan"),
            "idleHours": True,
            "meetingHours": 0,
        }]}}
        stats = extract_report_stats(payload).stats

        assert stats.total_hours is None
        assert stats.break_hours is None
        assert stats.span_hours is None
        assert stats.idle_hours is None
        assert stats.meeting_hours == 0
        assert stats.title is None
        assert stats.latest_activity is None

    def test_skips_items_that_are_not_records(self):
        payload = {"employeeTimeReport": {"timeReportItems": [None, 5, {"totalHours": 3}]}}
        result = extract_report_stats(payload)

        assert result.item == {"totalHours": 3}
        assert result.stats.total_hours == 3

    def test_no_report(self):
        result = extract_report_stats({"something": "else"})

        assert result.report is None
        assert result.item is None
        assert result.stats is None

    def test_empty_items_keeps_report(self):
        report = {"timeReportItems": []}
        result = extract_report_stats({"employeeTimeReport": report})

        assert result.report is report
        assert result.item is None
        assert result.stats is None

    def test_items_without_any_record(self):
        report = {"timeReportItems": ["a", 1]}
        result = extract_report_stats({"employeeTimeReport": report})

        assert result.report is report
        assert result.stats is None

    def test_non_dict_payload(self):
        assert extract_report_stats(None).stats is None
        assert extract_report_stats([1, 2]).stats is None


class TestActivitySnapshot:
    """Tests for the latest activity snapshot view."""

    def test_snapshot_fields(self, report_payload):
        activity = extract_report_stats(report_payload).stats.activity

        assert activity.timer_status == "running"
        assert activity.user_status == "active"
        assert activity.idle_seconds == 30
        assert activity.client_version == "5.2.1"
        assert activity.last_sync_ms == 1760000000000

    def test_missing_snapshot(self):
        assert TimeReportStats().activity is None


class TestResolveTotalWorkedMs:
    """Tests for the composite total."""

    def test_largest_stats_field_wins(self, report_payload):
        stats = extract_report_stats(report_payload).stats
        # spanHours 160 is the largest reading
        assert resolve_total_worked_ms(stats, report_payload) == 160 * 3_600_000

    def test_payload_scan_can_win(self):
        payload = {"totalTrackedMilliseconds": 7_200_000}
        stats = TimeReportStats(span_hours=1.5)

        assert resolve_total_worked_ms(stats, payload) == 7_200_000

    def test_seconds_fields(self):
        stats = TimeReportStats(total_seconds_count=3600, active_seconds_count=7200)
        assert resolve_total_worked_ms(stats, {}) == 7_200_000

    def test_negative_candidates_dropped(self):
        stats = TimeReportStats(total_hours=-4)
        assert resolve_total_worked_ms(stats, {}) == 0

    def test_no_stats_and_no_signal(self):
        assert resolve_total_worked_ms(None, {}) == 0


class TestBuildReportTotals:
    """Tests for build_report_totals."""

    def test_totals(self, report_payload):
        totals = build_report_totals(report_payload)

        assert totals.raw is report_payload
        assert totals.total_worked_hours == 160
        assert totals.stats.on_computer_hours == 150.0

    def test_empty_payload(self):
        totals = build_report_totals({})

        assert totals.total_worked_ms == 0
        assert totals.total_worked_hours == 0
        assert totals.stats is None


class TestOversizedNumbers:
    """Report fields too large for a float are absent, never an error."""

    def test_huge_total_hours(self):
        payload = json.loads(
            '{"employeeTimeReport": {"timeReportItems": [{"totalHours": 1' + "0" * 400
            + ', "spanHours": 2}]}}'
        )
        totals = build_report_totals(payload)

        assert totals.stats.total_hours is None
        assert totals.total_worked_ms == 2 * 3_600_000

    def test_scaled_value_overflows(self):
        stats = TimeReportStats(total_hours=10 ** 305, span_hours=1)
        assert resolve_total_worked_ms(stats, {}) == 3_600_000
