from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from config import (
    DEFAULT_CURRENCY,
    DEFAULT_DAILY_TARGET_HOURS,
    DEFAULT_TOKEN_TYPE,
    DEFAULT_WEEKEND_DAYS,
)
from utils import sanitise_number


@dataclass(frozen=True)
class CalendarConfig:
    weekend_days: frozenset[int] = DEFAULT_WEEKEND_DAYS
    holidays: frozenset[str] = frozenset()
    daily_target_hours: Decimal = DEFAULT_DAILY_TARGET_HOURS

    def __post_init__(self):
        weekend = frozenset(self.weekend_days)
        if any(isinstance(d, bool) or not isinstance(d, int) or not 0 <= d <= 6 for d in weekend):
            raise ValueError(f"Weekend days must be weekday indices 0-6, got {set(weekend)}")
        for iso in self.holidays:
            # Only the canonical form matches date.isoformat() in the calendar
            if date.fromisoformat(iso).isoformat() != iso:
                raise ValueError(f"Holiday must be written as YYYY-MM-DD, got {iso!r}")
        if self.daily_target_hours < 0:
            raise ValueError("Daily target hours cannot be negative")
        object.__setattr__(self, "weekend_days", weekend)
        object.__setattr__(self, "holidays", frozenset(self.holidays))

    @property
    def sorted_holidays(self) -> list[str]:
        return sorted(self.holidays)


@dataclass(frozen=True)
class CalendarResult:
    total_working_days: int
    working_days_to_date: int
    total_target_hours: Decimal
    expected_hours_by_today: Decimal

    @property
    def working_days_remaining(self) -> int:
        return max(self.total_working_days - self.working_days_to_date, 0)


@dataclass(frozen=True)
class ActivitySnapshot:
    """Latest activity snapshot attached to a report line item."""

    timer_status: Any = None
    user_status: Any = None
    idle_seconds: float | None = None
    client_version: Any = None
    last_sync_ms: float | None = None

    @classmethod
    def from_payload(cls, las: Any) -> ActivitySnapshot | None:
        if not isinstance(las, dict):
            return None
        return cls(
            timer_status=las.get("tStatus"),
            user_status=las.get("uStatus"),
            idle_seconds=sanitise_number(las.get("idleSecs")),
            client_version=las.get("cVersion"),
            last_sync_ms=sanitise_number(las.get("ts")),
        )


@dataclass(frozen=True)
class TimeReportStats:
    """Normalised numeric fields of one report line item. None means absent."""

    title: Any = None
    email: Any = None
    total_hours: float | None = None
    active_minutes_ratio: float | None = None
    active_seconds_ratio: float | None = None
    total_seconds_count: float | None = None
    active_seconds_count: float | None = None
    inactive_seconds_count: float | None = None
    break_hours: float | None = None
    span_hours: float | None = None
    on_computer_hours: float | None = None
    meeting_hours: float | None = None
    idle_hours: float | None = None
    latest_activity: Any = None

    @property
    def activity(self) -> ActivitySnapshot | None:
        return ActivitySnapshot.from_payload(self.latest_activity)


@dataclass(frozen=True)
class ReportExtraction:
    report: dict | None = None
    item: dict | None = None
    stats: TimeReportStats | None = None


@dataclass(frozen=True)
class ReportTotals:
    raw: Any
    total_worked_ms: float
    report: dict | None = None
    item: dict | None = None
    stats: TimeReportStats | None = None

    @property
    def total_worked_hours(self) -> float:
        return self.total_worked_ms / (60 * 60 * 1000)


@dataclass(frozen=True)
class Account:
    id: Any = None
    company_id: Any = None
    name: str = ""
    email: str = ""
    company_name: str = ""
    raw: dict = field(default_factory=dict)

    @classmethod
    def from_payload(cls, data: Any) -> Account | None:
        if not isinstance(data, dict):
            return None
        company = data.get("company") if isinstance(data.get("company"), dict) else {}
        return cls(
            id=data.get("id"),
            company_id=data.get("companyId"),
            name=data.get("name") or data.get("username") or "",
            email=data.get("email") or "",
            company_name=company.get("name") or "",
            raw=data,
        )


@dataclass(frozen=True)
class AuthSession:
    access_token: str = ""
    token_type: str = DEFAULT_TOKEN_TYPE
    account: Account | None = None

    @property
    def is_signed_in(self) -> bool:
        return bool(self.access_token)

    @property
    def is_authenticated(self) -> bool:
        """Signed in with enough account data to fetch a report."""
        return bool(
            self.access_token
            and self.account
            and self.account.id
            and self.account.company_id
        )

    @classmethod
    def from_payload(cls, data: Any) -> AuthSession:
        if not isinstance(data, dict) or not data.get("accessToken"):
            return cls()
        return cls(
            access_token=data["accessToken"],
            token_type=data.get("tokenType") or DEFAULT_TOKEN_TYPE,
            account=Account.from_payload(data.get("account")),
        )

    def to_payload(self) -> dict:
        return {
            "accessToken": self.access_token,
            "tokenType": self.token_type,
            "account": self.account.raw if self.account else None,
        }


@dataclass
class CompensationConfig:
    base_salary: Decimal | None = None
    hourly_rate: Decimal | None = None
    currency: str = DEFAULT_CURRENCY
    enable_salary: bool = False
    enable_attendance_bonus: bool = False
    enable_time_management_bonus: bool = False
    enable_client_bonus: bool = False
    enable_performance_bonus: bool = False


@dataclass(frozen=True)
class BonusLine:
    name: str
    rate: Decimal
    active: bool
    amount: Decimal


@dataclass(frozen=True)
class CompensationResult:
    currency: str
    expected_monthly_base: Decimal
    effective_hourly_rate: Decimal
    meets_monthly_target: bool
    capped_hours: Decimal
    base_pay: Decimal
    bonuses: tuple[BonusLine, ...]
    bonus_subtotal: Decimal
    total_compensation: Decimal
    hour_delta: Decimal
    hours_to_target: Decimal

    @property
    def base_pay_label(self) -> str:
        return "Base salary" if self.meets_monthly_target else "Prorated base"

    def bonus(self, name: str) -> BonusLine:
        for line in self.bonuses:
            if line.name == name:
                return line
        raise KeyError(name)
