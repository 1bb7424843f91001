from __future__ import annotations

import json
import logging
import os
import sqlite3
from decimal import Decimal
from pathlib import Path
from typing import Any

from compensation import normalise_currency
from models import AuthSession, CalendarConfig, CompensationConfig
from utils import parse_decimal

logger = logging.getLogger(__name__)

SESSION_KEY = "session"
SALARY_KEY = "salary"
CALENDAR_KEY = "calendar"


def _get_db_path() -> Path:
    """Get database path from environment variable or default location."""
    if env_path := os.environ.get("WORKHOURS_DB"):
        return Path(env_path)
    return Path(__file__).parent / "data" / "workhours.db"


DB_PATH = _get_db_path()


class PreferenceStore:
    """Persisted preference records, each kept as one JSON blob per key."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = Path(db_path) if db_path else DB_PATH

    def get_connection(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self):
        """Create tables if they don't exist."""
        conn = self.get_connection()
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS preferences (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
        """)
        conn.commit()
        conn.close()

    # --- Raw records ---

    def load_record(self, key: str) -> Any:
        """Load and decode one record. A record that is not valid JSON is deleted."""
        conn = self.get_connection()
        row = conn.execute(
            "SELECT value FROM preferences WHERE key = ?", (key,)
        ).fetchone()
        conn.close()

        if not row:
            return None
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError:
            logger.warning(f"Discarding unreadable {key!r} preferences")
            self.delete_record(key)
            return None

    def save_record(self, key: str, value: Any) -> None:
        conn = self.get_connection()
        conn.execute(
            "INSERT OR REPLACE INTO preferences (key, value) VALUES (?, ?)",
            (key, json.dumps(value)),
        )
        conn.commit()
        conn.close()

    def delete_record(self, key: str) -> None:
        conn = self.get_connection()
        conn.execute("DELETE FROM preferences WHERE key = ?", (key,))
        conn.commit()
        conn.close()

    # --- Session ---

    def load_session(self) -> AuthSession:
        """Stored session, or a signed-out session if none is usable."""
        return AuthSession.from_payload(self.load_record(SESSION_KEY))

    def save_session(self, auth: AuthSession) -> None:
        if auth.access_token:
            self.save_record(SESSION_KEY, auth.to_payload())
        else:
            self.clear_session()

    def clear_session(self) -> None:
        self.delete_record(SESSION_KEY)

    # --- Salary ---

    def load_compensation(self) -> CompensationConfig:
        data = self.load_record(SALARY_KEY)
        if not isinstance(data, dict):
            return CompensationConfig()

        return CompensationConfig(
            base_salary=_non_negative(data.get("baseSalary")),
            hourly_rate=_non_negative(data.get("hourlyRate")),
            currency=normalise_currency(data.get("currency")),
            enable_salary=bool(data.get("enableSalary")),
            enable_attendance_bonus=bool(data.get("enableAttendanceBonus")),
            enable_time_management_bonus=bool(data.get("enableTimeManagementBonus")),
            enable_client_bonus=bool(data.get("enableClientBonus")),
            enable_performance_bonus=bool(data.get("enablePerformanceBonus")),
        )

    def save_compensation(self, config: CompensationConfig) -> None:
        self.save_record(SALARY_KEY, {
            "baseSalary": "" if config.base_salary is None else str(config.base_salary),
            "hourlyRate": "" if config.hourly_rate is None else str(config.hourly_rate),
            "currency": normalise_currency(config.currency),
            "enableSalary": config.enable_salary,
            "enableAttendanceBonus": config.enable_attendance_bonus,
            "enableTimeManagementBonus": config.enable_time_management_bonus,
            "enableClientBonus": config.enable_client_bonus,
            "enablePerformanceBonus": config.enable_performance_bonus,
        })

    # --- Calendar ---

    def load_calendar(self) -> CalendarConfig:
        data = self.load_record(CALENDAR_KEY)
        if not isinstance(data, dict):
            return CalendarConfig()

        defaults = CalendarConfig()
        daily = _non_negative(data.get("dailyTargetHours"))
        try:
            return CalendarConfig(
                weekend_days=frozenset(data.get("weekendDays", defaults.weekend_days)),
                holidays=frozenset(data.get("holidays", [])),
                daily_target_hours=defaults.daily_target_hours if daily is None else daily,
            )
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid calendar preferences")
            return defaults

    def save_calendar(self, config: CalendarConfig) -> None:
        self.save_record(CALENDAR_KEY, {
            "weekendDays": sorted(config.weekend_days),
            "holidays": config.sorted_holidays,
            "dailyTargetHours": str(config.daily_target_hours),
        })


def _non_negative(val: Any) -> Decimal | None:
    parsed = parse_decimal(val)
    if parsed is None or parsed < 0:
        return None
    return parsed
