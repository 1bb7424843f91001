"""Shared fixtures for tests."""

from __future__ import annotations

import os
import sys
import tempfile
from decimal import Decimal
from pathlib import Path

import pytest

# Top-level modules live in the project root
sys.path.insert(0, str(Path(__file__).parent.parent))

# Point the preference store at a throwaway database before storage is imported
_test_db_fd, _test_db_path = tempfile.mkstemp(suffix=".db")
os.environ["WORKHOURS_DB"] = _test_db_path


@pytest.fixture
def store(tmp_path):
    """A fresh, initialised preference store."""
    from storage import PreferenceStore

    preference_store = PreferenceStore(tmp_path / "workhours.db")
    preference_store.init_db()
    return preference_store


@pytest.fixture
def calendar_160():
    """A month with 20 working days of 8 hours, 10 of them elapsed."""
    from models import CalendarResult

    return CalendarResult(
        total_working_days=20,
        working_days_to_date=10,
        total_target_hours=Decimal("160"),
        expected_hours_by_today=Decimal("80"),
    )


@pytest.fixture
def salary_config():
    """Base salary 4000 with every bonus switched on."""
    from models import CompensationConfig

    return CompensationConfig(
        base_salary=Decimal("4000"),
        hourly_rate=None,
        currency="USD",
        enable_salary=True,
        enable_attendance_bonus=True,
        enable_time_management_bonus=True,
        enable_client_bonus=True,
        enable_performance_bonus=True,
    )


@pytest.fixture
def report_payload():
    """A report payload shaped like the service's monthly report."""
    return {
        "employeeTimeReport": {
            "timeReportItems": [
                {
                    "title": "Jane Doe",
                    "email": "jane@example.com",
                    "totalHours": 151.5,
                    "activeMinutesRatio": 0.82,
                    "activeSecondsRatio": 0.8,
                    "totalSecondsCount": 545400,
                    "activeSecondsCount": 436320,
                    "inactiveSecondsCount": 109080,
                    "breakHours": 6.25,
                    "spanHours": 160.0,
                    "onComputerHours": 150.0,
                    "meetingHours": 12,
                    "idleHours": None,
                    "las": {
                        "tStatus": "running",
                        "uStatus": "active",
                        "idleSecs": 30,
                        "cVersion": "5.2.1",
                        "ts": 1760000000000,
                    },
                }
            ]
        }
    }
