"""Modal screens for the work-hours dashboard."""

from __future__ import annotations

from decimal import Decimal

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Checkbox, Input, Label
from textual.screen import ModalScreen

from compensation import normalise_currency
from models import CalendarConfig, CompensationConfig
from utils import WEEKDAY_LABELS, parse_decimal
from working_calendar import apply_calendar_edits


class ConfirmScreen(ModalScreen[bool]):
    """Simple confirmation dialog."""

    CSS = """
    ConfirmScreen {
        align: center middle;
    }

    #confirm-dialog {
        width: 50;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $warning;
    }

    #confirm-buttons {
        width: 100%;
        height: auto;
        margin-top: 1;
    }

    #confirm-buttons Button {
        width: 1fr;
        margin: 0 1;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("y", "confirm", "Yes"),
        Binding("n", "cancel", "No"),
    ]

    def __init__(self, message: str):
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-dialog"):
            yield Label(self.message)
            with Horizontal(id="confirm-buttons"):
                yield Button("Yes (Y)", variant="warning", id="yes")
                yield Button("No (N)", variant="default", id="no")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "yes")

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)


class LoginScreen(ModalScreen[tuple[str, str] | None]):
    """Credentials prompt for the report service."""

    CSS = """
    LoginScreen {
        align: center middle;
    }

    #login-dialog {
        width: 60;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #login-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    #login-error {
        color: $error;
        margin-bottom: 1;
    }

    .field-label {
        height: 1;
        color: $text-muted;
    }

    #login-buttons {
        width: 100%;
        height: auto;
        margin-top: 1;
        align: center middle;
    }

    #login-buttons Button {
        width: auto;
        min-width: 12;
        margin: 0 2;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Quit"),
    ]

    def __init__(self, error: str = "", username: str = ""):
        super().__init__()
        self.error = error
        self.username = username

    def compose(self) -> ComposeResult:
        with Vertical(id="login-dialog"):
            yield Label("Sign in to continue", id="login-title")
            if self.error:
                yield Label(self.error, id="login-error")
            yield Label("Username", classes="field-label")
            yield Input(value=self.username, placeholder="you@example.com", id="username")
            yield Label("Password", classes="field-label")
            yield Input(placeholder="", password=True, id="password")
            with Horizontal(id="login-buttons"):
                yield Button("Sign in", variant="primary", id="sign-in")
                yield Button("Quit", variant="default", id="cancel")

    def on_mount(self) -> None:
        field = "#password" if self.username else "#username"
        self.query_one(field, Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "username":
            self.query_one("#password", Input).focus()
        else:
            self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel":
            self.dismiss(None)
        elif event.button.id == "sign-in":
            self._submit()

    def action_cancel(self) -> None:
        self.dismiss(None)

    def _submit(self) -> None:
        username = self.query_one("#username", Input).value.strip()
        password = self.query_one("#password", Input).value

        if not username or not password:
            self.app.notify("Username and password are required.", severity="error")
            return

        self.dismiss((username, password))


class LoggedHoursScreen(ModalScreen[str | None]):
    """Manual override for the month's logged hours."""

    CSS = """
    LoggedHoursScreen {
        align: center middle;
    }

    #hours-dialog {
        width: 50;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #hours-buttons {
        width: 100%;
        height: auto;
        margin-top: 1;
        align: center middle;
    }

    #hours-buttons Button {
        width: auto;
        min-width: 12;
        margin: 0 2;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, current: str = ""):
        super().__init__()
        self.current = current

    def compose(self) -> ComposeResult:
        with Vertical(id="hours-dialog"):
            yield Label("Logged hours this month")
            yield Input(value=self.current, placeholder="0", id="logged-hours")
            with Horizontal(id="hours-buttons"):
                yield Button("Save", variant="primary", id="save")
                yield Button("Cancel", variant="default", id="cancel")

    def on_mount(self) -> None:
        self.query_one("#logged-hours", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._save()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel":
            self.dismiss(None)
        elif event.button.id == "save":
            self._save()

    def action_cancel(self) -> None:
        self.dismiss(None)

    def _save(self) -> None:
        value = self.query_one("#logged-hours", Input).value.strip()
        hours = parse_decimal(value)
        if value and (hours is None or hours < 0):
            self.app.notify("Logged hours must be zero or more", severity="error")
            return
        self.dismiss(value)


class CalendarSettingsScreen(ModalScreen[CalendarConfig | None]):
    """Edit weekend days, holidays and the daily target."""

    CSS = """
    CalendarSettingsScreen {
        align: center middle;
    }

    #calendar-dialog {
        width: 70;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #calendar-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    #weekend-row {
        width: 100%;
        height: auto;
        margin-bottom: 1;
    }

    #weekend-row Checkbox {
        width: auto;
    }

    .field-label {
        height: 1;
        color: $text-muted;
    }

    #calendar-buttons {
        width: 100%;
        height: auto;
        margin-top: 1;
        align: center middle;
    }

    #calendar-buttons Button {
        width: auto;
        min-width: 12;
        margin: 0 2;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, config: CalendarConfig):
        super().__init__()
        self.config = config

    def compose(self) -> ComposeResult:
        with Vertical(id="calendar-dialog"):
            yield Label("Working calendar", id="calendar-title")
            yield Label("Weekend days", classes="field-label")
            with Horizontal(id="weekend-row"):
                for index, label in enumerate(WEEKDAY_LABELS):
                    yield Checkbox(label, value=index in self.config.weekend_days, id=f"weekend-{index}")
            yield Label("Daily target (h)", classes="field-label")
            yield Input(value=str(self.config.daily_target_hours), placeholder="8", id="daily-target")
            yield Label("Holidays (YYYY-MM-DD, comma separated)", classes="field-label")
            yield Input(value=", ".join(self.config.sorted_holidays), placeholder="2026-12-25", id="holidays")
            with Horizontal(id="calendar-buttons"):
                yield Button("Save", variant="primary", id="save")
                yield Button("Cancel", variant="default", id="cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel":
            self.dismiss(None)
        elif event.button.id == "save":
            self._save()

    def action_cancel(self) -> None:
        self.dismiss(None)

    def _save(self) -> None:
        weekend = {
            index for index in range(len(WEEKDAY_LABELS))
            if self.query_one(f"#weekend-{index}", Checkbox).value
        }

        daily = parse_decimal(self.query_one("#daily-target", Input).value)
        if daily is None or daily < 0:
            self.app.notify("Daily target must be zero or more", severity="error")
            return

        entries = self.query_one("#holidays", Input).value.split(",")
        config, ignored = apply_calendar_edits(self.config, weekend, entries, daily)
        if ignored:
            self.app.notify(f"Ignored invalid holiday dates: {', '.join(ignored)}", severity="warning")
        self.dismiss(config)


class SalarySettingsScreen(ModalScreen[CompensationConfig | None]):
    """Edit salary, hourly rate, currency and bonus toggles."""

    CSS = """
    SalarySettingsScreen {
        align: center middle;
    }

    #salary-dialog {
        width: 70;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #salary-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    .field-row {
        width: 100%;
        height: auto;
        margin-bottom: 1;
    }

    .field-group {
        width: 1fr;
        height: auto;
        margin: 0 1 0 0;
    }

    .field-label {
        height: 1;
        color: $text-muted;
    }

    #salary-buttons {
        width: 100%;
        height: auto;
        margin-top: 1;
        align: center middle;
    }

    #salary-buttons Button {
        width: auto;
        min-width: 12;
        margin: 0 2;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    # checkbox id -> CompensationConfig attribute
    TOGGLES = {
        "enable-salary": ("Enable salary calculations", "enable_salary"),
        "attendance-bonus": ("Attendance bonus (5%)", "enable_attendance_bonus"),
        "time-management-bonus": ("Time management bonus (5%)", "enable_time_management_bonus"),
        "client-bonus": ("Client bonus (3%)", "enable_client_bonus"),
        "performance-bonus": ("Performance bonus (3%)", "enable_performance_bonus"),
    }

    def __init__(self, config: CompensationConfig):
        super().__init__()
        self.config = config

    def compose(self) -> ComposeResult:
        with Vertical(id="salary-dialog"):
            yield Label("Salary", id="salary-title")
            with Horizontal(classes="field-row"):
                with Vertical(classes="field-group"):
                    yield Label("Monthly base", classes="field-label")
                    yield Input(value=self._text(self.config.base_salary), placeholder="0", id="base-salary")
                with Vertical(classes="field-group"):
                    yield Label("Hourly rate", classes="field-label")
                    yield Input(value=self._text(self.config.hourly_rate), placeholder="0", id="hourly-rate")
                with Vertical(classes="field-group"):
                    yield Label("Currency", classes="field-label")
                    yield Input(value=self.config.currency, placeholder="USD", id="currency", max_length=3)
            for checkbox_id, (label, attr) in self.TOGGLES.items():
                yield Checkbox(label, value=getattr(self.config, attr), id=checkbox_id)
            with Horizontal(id="salary-buttons"):
                yield Button("Save", variant="primary", id="save")
                yield Button("Cancel", variant="default", id="cancel")

    @staticmethod
    def _text(value: Decimal | None) -> str:
        return "" if value is None else str(value)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel":
            self.dismiss(None)
        elif event.button.id == "save":
            self._save()

    def action_cancel(self) -> None:
        self.dismiss(None)

    def _read_amount(self, field_id: str, label: str) -> tuple[bool, Decimal | None]:
        raw = self.query_one(f"#{field_id}", Input).value.strip()
        if not raw:
            return True, None
        value = parse_decimal(raw)
        if value is None or value < 0:
            self.app.notify(f"{label} must be zero or more", severity="error")
            return False, None
        return True, value

    def _save(self) -> None:
        ok, base_salary = self._read_amount("base-salary", "Monthly base")
        if not ok:
            return
        ok, hourly_rate = self._read_amount("hourly-rate", "Hourly rate")
        if not ok:
            return

        toggles = {
            attr: self.query_one(f"#{checkbox_id}", Checkbox).value
            for checkbox_id, (_, attr) in self.TOGGLES.items()
        }
        self.dismiss(CompensationConfig(
            base_salary=base_salary,
            hourly_rate=hourly_rate,
            currency=normalise_currency(self.query_one("#currency", Input).value),
            **toggles,
        ))
