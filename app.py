#!/usr/bin/env python3
"""Work-hours dashboard TUI application."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import Footer

from client import ReportClient, ReportClientError, ReportRequest, ReportValidationError
from compensation import compute_compensation
from config import HOLIDAY_COUNTRY, LOG_FILE, LOG_LEVEL
from models import AuthSession, CalendarResult, CompensationResult, ReportTotals
from screens import (
    CalendarSettingsScreen,
    ConfirmScreen,
    LoggedHoursScreen,
    LoginScreen,
    SalarySettingsScreen,
)
from session import DashboardSession, FetchTicket
from storage import PreferenceStore
from widgets import CalendarSummary, CompensationSummary, ReportStatsPanel, SyncHeader
from working_calendar import compute_working_calendar, public_holidays_for_month

logger = logging.getLogger(__name__)


class WorkHoursApp(App):
    """Monthly hours, pacing and pay for one signed-in user."""

    CSS = """
    Screen {
        background: $surface;
    }

    #sync-header {
        height: auto;
        background: $primary;
        color: $text;
        padding: 0 1;
        text-style: bold;
    }

    #panels {
        height: auto;
    }

    #calendar-summary, #report-stats {
        width: 1fr;
        height: auto;
        padding: 1 2;
        color: $text;
    }

    #compensation-summary {
        height: auto;
        padding: 1 2;
        color: $text;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh_report", "Sync"),
        Binding("l", "edit_logged_hours", "Hours"),
        Binding("c", "edit_calendar", "Calendar"),
        Binding("h", "import_holidays", "Holidays"),
        Binding("s", "edit_salary", "Salary"),
        Binding("$", "toggle_salary", "$"),
        Binding("x", "sign_out", "Sign out"),
    ]

    def __init__(self, store: PreferenceStore | None = None, client: ReportClient | None = None):
        super().__init__()
        self.store = store or PreferenceStore()
        self.store.init_db()
        self.client = client or ReportClient()

        self.session = DashboardSession(self.store.load_session())
        self.calendar_config = self.store.load_calendar()
        self.compensation_config = self.store.load_compensation()

        # Privacy mode: hide salary figures by default
        self.show_salary = False

    def compose(self) -> ComposeResult:
        yield SyncHeader(id="sync-header")
        with VerticalScroll():
            with Horizontal(id="panels"):
                yield CalendarSummary(id="calendar-summary")
                yield ReportStatsPanel(id="report-stats")
            yield CompensationSummary(id="compensation-summary")
        yield Footer()

    def on_mount(self):
        self._refresh_display()
        if self.session.auth.is_signed_in:
            self._start_fetch()
        else:
            self._prompt_login()

    # --- Calculations ---

    def _compute(self, today: date | None = None) -> tuple[CalendarResult, CompensationResult]:
        """Calendar and pay figures for the current inputs."""
        today = today or date.today()
        calendar = compute_working_calendar(self.calendar_config, today)
        compensation = compute_compensation(calendar, self.session.logged_hours, self.compensation_config)
        return calendar, compensation

    def _refresh_display(self):
        today = date.today()
        calendar, compensation = self._compute(today)
        account = self.session.auth.account

        self.query_one("#sync-header", SyncHeader).update_display(
            account.name if account else "",
            account.company_name if account else "",
            today,
            self.session.loading,
            self.session.last_synced_at,
        )
        self.query_one("#calendar-summary", CalendarSummary).update_display(
            calendar, self.session.logged_hours, self.calendar_config, compensation
        )
        self.query_one("#report-stats", ReportStatsPanel).update_display(
            self.session.totals, self.session.loading, self.session.error
        )
        self.query_one("#compensation-summary", CompensationSummary).update_display(
            compensation, self.compensation_config.enable_salary, self.show_salary
        )

    # --- Authentication ---

    def _prompt_login(self, error: str = "", username: str = "") -> None:
        self.push_screen(LoginScreen(error, username), self._on_login_submitted)

    def _on_login_submitted(self, result: tuple[str, str] | None) -> None:
        if result is None:
            self.exit()
            return
        username, password = result
        self._authenticate(username, password)

    @work(thread=True, exit_on_error=False)
    def _authenticate(self, username: str, password: str) -> None:
        try:
            payload = self.client.authenticate(username, password)
        except (ReportClientError, ReportValidationError) as e:
            self.call_from_thread(self._prompt_login, str(e), username)
            return
        self.call_from_thread(self._on_authenticated, payload)

    def _on_authenticated(self, payload: dict) -> None:
        auth = AuthSession.from_payload(payload)
        self.session.sign_in(auth)
        self.store.save_session(auth)
        self.notify(f"Signed in as {auth.account.name if auth.account else 'unknown account'}")
        self._refresh_display()
        self._start_fetch()

    def _sign_out(self) -> None:
        """Clear the session and everything derived from it. Calendar settings are kept."""
        self.session.sign_out()
        self.store.clear_session()
        self.show_salary = False
        logger.info("Signed out")

    def action_sign_out(self) -> None:
        def do_sign_out(confirmed: bool | None) -> None:
            if not confirmed:
                return
            self._sign_out()
            self._refresh_display()
            self._prompt_login()

        self.push_screen(ConfirmScreen("Sign out and clear report data?"), do_sign_out)

    # --- Report fetch ---

    def _build_request(self, today: date) -> ReportRequest:
        auth = self.session.auth
        return ReportRequest.for_month(
            today,
            token=auth.access_token,
            token_type=auth.token_type,
            company_id=auth.account.company_id if auth.account else None,
            account_id=auth.account.id if auth.account else None,
        )

    def _start_fetch(self) -> None:
        if not self.session.auth.is_authenticated:
            self.notify("Signed in account is missing company or account details", severity="warning")
            return
        ticket = self.session.begin_fetch()
        self._refresh_display()
        self._fetch_report(ticket, self._build_request(date.today()))

    @work(thread=True, exit_on_error=False)
    def _fetch_report(self, ticket: FetchTicket, request: ReportRequest) -> None:
        self._run_fetch(ticket, request)

    def _run_fetch(self, ticket: FetchTicket, request: ReportRequest) -> None:
        """Fetch and hand the outcome to the UI thread. Every path ends the loading state."""
        try:
            totals = self.client.fetch_total_time(request)
        except (ReportClientError, ReportValidationError) as e:
            self.call_from_thread(self._on_fetch_failed, ticket, e)
            return
        except Exception as e:
            logger.exception("Unexpected error while fetching the report")
            self.call_from_thread(self._on_fetch_failed, ticket, e)
            return
        self.call_from_thread(self._on_fetch_complete, ticket, totals)

    def _on_fetch_complete(self, ticket: FetchTicket, totals: ReportTotals) -> None:
        if self.session.complete_fetch(ticket, totals):
            self._refresh_display()

    def _on_fetch_failed(self, ticket: FetchTicket, error: Exception) -> None:
        if self.session.fail_fetch(ticket, error):
            self.notify(str(error), severity="error")
            self._refresh_display()

    def action_refresh_report(self) -> None:
        if not self.session.auth.is_signed_in:
            self._prompt_login()
            return
        self._start_fetch()

    # --- Settings ---

    def action_edit_logged_hours(self) -> None:
        self.push_screen(LoggedHoursScreen(self.session.logged_hours_text), self._on_logged_hours)

    def _on_logged_hours(self, result: str | None) -> None:
        if result is not None:
            self.session.set_logged_hours(result)
            self._refresh_display()

    def action_edit_calendar(self) -> None:
        self.push_screen(CalendarSettingsScreen(self.calendar_config), self._on_calendar_saved)

    def _on_calendar_saved(self, result) -> None:
        if result:
            self.calendar_config = result
            self.store.save_calendar(result)
            self._refresh_display()

    def action_import_holidays(self) -> None:
        """Add the configured country's public holidays for this month."""
        try:
            found = public_holidays_for_month(HOLIDAY_COUNTRY, date.today())
        except NotImplementedError:
            self.notify(f"No public holiday data for {HOLIDAY_COUNTRY}", severity="error")
            return

        new_dates = set(found) - self.calendar_config.holidays
        if new_dates:
            self.calendar_config = replace(
                self.calendar_config, holidays=self.calendar_config.holidays | new_dates
            )
            self.store.save_calendar(self.calendar_config)
            self._refresh_display()
        self.notify(f"Added {len(new_dates)} holidays" if new_dates else "No new holidays to add")

    def action_edit_salary(self) -> None:
        self.push_screen(SalarySettingsScreen(self.compensation_config), self._on_salary_saved)

    def _on_salary_saved(self, result) -> None:
        if result:
            self.compensation_config = result
            self.store.save_compensation(result)
            self._refresh_display()

    def action_toggle_salary(self) -> None:
        self.show_salary = not self.show_salary
        self._refresh_display()


def main():
    import sys
    if LOG_FILE:
        logging.basicConfig(
            filename=LOG_FILE,
            level=LOG_LEVEL,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    if len(sys.argv) > 1 and sys.argv[1] == "--db-info":
        from datetime import datetime
        import storage
        db_path = storage.DB_PATH
        print(f"Database: {db_path}")
        if db_path.exists():
            mtime = datetime.fromtimestamp(db_path.stat().st_mtime)
            size = db_path.stat().st_size
            print(f"Modified: {mtime.strftime('%Y-%m-%d %H:%M:%S')}")
            print(f"Size: {size:,} bytes")
        else:
            print("Status: Does not exist (will be created on first run)")
        return

    app = WorkHoursApp()
    app.run()


if __name__ == "__main__":
    main()
