"""Tests for the app module."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest

from models import Account, AuthSession, CalendarConfig, CompensationConfig
from report import build_report_totals


@pytest.fixture
def app(store):
    """App wired to a temporary store and a fake client, with rendering stubbed out."""
    from app import WorkHoursApp

    with patch.object(WorkHoursApp, "run"):
        instance = WorkHoursApp(store=store, client=MagicMock())
    instance._refresh_display = MagicMock()
    instance.notify = MagicMock()
    return instance


def _auth():
    return AuthSession(
        access_token="tok",
        account=Account(id="a1", company_id="c1", name="Jane", raw={"id": "a1", "companyId": "c1"}),
    )


class TestStartup:
    """Tests for state loaded at construction."""

    def test_loads_stored_preferences(self, store):
        from app import WorkHoursApp

        calendar = CalendarConfig(weekend_days=frozenset({5, 6}))
        store.save_calendar(calendar)
        store.save_session(_auth())

        with patch.object(WorkHoursApp, "run"):
            app = WorkHoursApp(store=store, client=MagicMock())

        assert app.calendar_config == calendar
        assert app.session.auth.is_authenticated is True
        assert app.show_salary is False


class TestCompute:
    """Tests for WorkHoursApp._compute."""

    def test_month_figures(self, app):
        app.session.set_logged_hours("104")

        calendar, compensation = app._compute(date(2026, 10, 19))

        assert calendar.total_working_days == 22
        assert calendar.expected_hours_by_today == Decimal("104")
        assert compensation.hour_delta == 0
        assert compensation.hours_to_target == Decimal("72")

    def test_salary_uses_current_config(self, app):
        app.compensation_config = CompensationConfig(
            base_salary=Decimal("4400"), enable_salary=True, enable_attendance_bonus=True
        )
        app.session.set_logged_hours("176")

        _, compensation = app._compute(date(2026, 10, 19))

        assert compensation.meets_monthly_target is True
        assert compensation.total_compensation == Decimal("4620")


class TestSession:
    """Tests for sign in, sign out and fetch results."""

    def test_authenticated_session_is_saved(self, app):
        with patch.object(app, "_start_fetch") as start_fetch:
            app._on_authenticated({"accessToken": "tok", "account": {"id": "a1", "companyId": "c1"}})

        assert app.session.auth.is_authenticated is True
        assert app.store.load_session().access_token == "tok"
        start_fetch.assert_called_once()

    def test_sign_out_keeps_calendar(self, app, report_payload):
        calendar = CalendarConfig(holidays=frozenset({"2026-10-12"}))
        app.calendar_config = calendar
        app.store.save_calendar(calendar)
        app.session.sign_in(_auth())
        app.store.save_session(_auth())
        app.session.complete_fetch(app.session.begin_fetch(), build_report_totals(report_payload))
        app.show_salary = True

        app._sign_out()

        assert app.session.totals is None
        assert app.session.logged_hours == 0
        assert app.store.load_session().is_signed_in is False
        assert app.show_salary is False
        assert app.calendar_config == calendar
        assert app.store.load_calendar() == calendar

    def test_stale_fetch_does_not_refresh(self, app, report_payload):
        app.session.sign_in(_auth())
        stale = app.session.begin_fetch()
        app.session.begin_fetch()

        app._on_fetch_complete(stale, build_report_totals(report_payload))

        assert app.session.totals is None
        app._refresh_display.assert_not_called()

    def test_failed_fetch_notifies(self, app):
        app.session.sign_in(_auth())
        ticket = app.session.begin_fetch()

        app._on_fetch_failed(ticket, RuntimeError("Report request failed"))

        assert app.session.error == "Report request failed"
        app.notify.assert_called_once_with("Report request failed", severity="error")

    def test_unexpected_fetch_error_ends_loading(self, app):
        app.session.sign_in(_auth())
        ticket = app.session.begin_fetch()
        app.client.fetch_total_time.side_effect = OverflowError("int too large to convert to float")
        app.call_from_thread = lambda callback, *args: callback(*args)

        app._run_fetch(ticket, app._build_request(date(2026, 10, 19)))

        assert app.session.loading is False
        assert app.session.error == "int too large to convert to float"
        app.notify.assert_called_once_with("int too large to convert to float", severity="error")

    def test_fetch_result_applied(self, app, report_payload):
        app.session.sign_in(_auth())
        ticket = app.session.begin_fetch()
        app.client.fetch_total_time.return_value = build_report_totals(report_payload)
        app.call_from_thread = lambda callback, *args: callback(*args)

        app._run_fetch(ticket, app._build_request(date(2026, 10, 19)))

        assert app.session.loading is False
        assert app.session.totals.total_worked_hours == 160

    def test_build_request(self, app):
        app.session.sign_in(_auth())

        request = app._build_request(date(2026, 10, 19))

        assert request.company_id == "c1"
        assert request.account_id == "a1"
        assert request.headers() == {"Authorization": "Bearer tok"}


class TestSettings:
    """Tests for settings callbacks."""

    def test_logged_hours_override(self, app):
        app._on_logged_hours("12.5")
        assert app.session.logged_hours == Decimal("12.5")

    def test_cancelled_dialog_changes_nothing(self, app):
        before = app.calendar_config
        app._on_calendar_saved(None)
        assert app.calendar_config is before

    def test_calendar_saved(self, app):
        config = CalendarConfig(weekend_days=frozenset({0}))
        app._on_calendar_saved(config)
        assert app.store.load_calendar() == config

    def test_salary_saved(self, app, salary_config):
        app._on_salary_saved(salary_config)
        assert app.store.load_compensation() == salary_config

    def test_toggle_salary(self, app):
        app.action_toggle_salary()
        assert app.show_salary is True
        app.action_toggle_salary()
        assert app.show_salary is False

    @patch("app.public_holidays_for_month")
    def test_import_holidays(self, mock_holidays, app):
        mock_holidays.return_value = ["2026-12-25"]

        app.action_import_holidays()

        assert "2026-12-25" in app.calendar_config.holidays
        assert "2026-12-25" in app.store.load_calendar().holidays
        app.notify.assert_called_once_with("Added 1 holidays")

    @patch("app.public_holidays_for_month")
    def test_import_unknown_country(self, mock_holidays, app):
        mock_holidays.side_effect = NotImplementedError

        app.action_import_holidays()

        assert app.calendar_config.holidays == frozenset()
        assert app.notify.call_args.kwargs["severity"] == "error"
