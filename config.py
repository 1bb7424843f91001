"""Configuration constants and environment setup."""

from __future__ import annotations

import os
from decimal import Decimal

# =============================================================================
# REPORT SERVICE
# =============================================================================

API_BASE_URL = os.environ.get("WORKHOURS_API_BASE_URL", "https://api2.teamlogger.com/api")
REQUEST_TIMEOUT = float(os.environ.get("WORKHOURS_REQUEST_TIMEOUT", "15"))

DEFAULT_TOKEN_TYPE = "Bearer"
DEFAULT_GRANT_TYPE = "password"
DEFAULT_DAY_START_CUTOFF = 0
DEFAULT_DAY_END_CUTOFF = -1
DEFAULT_SUPPRESS_DETAILS = False

# =============================================================================
# CALENDAR
# =============================================================================

# Weekday indices: 0 = Sunday ... 6 = Saturday
DEFAULT_WEEKEND_DAYS = frozenset({0, 6})
DEFAULT_DAILY_TARGET_HOURS = Decimal("8")
HOLIDAY_COUNTRY = os.environ.get("WORKHOURS_HOLIDAY_COUNTRY", "US")

# =============================================================================
# COMPENSATION
# =============================================================================

DEFAULT_CURRENCY = "USD"
CURRENCY_LOCALE = "en_US"
TARGET_TOLERANCE_HOURS = Decimal("0.01")

ATTENDANCE_BONUS_RATE = Decimal("0.05")
TIME_MANAGEMENT_BONUS_RATE = Decimal("0.05")
CLIENT_BONUS_RATE = Decimal("0.03")
PERFORMANCE_BONUS_RATE = Decimal("0.03")

# =============================================================================
# LOGGING
# =============================================================================

LOG_FILE = os.environ.get("WORKHOURS_LOG_FILE", "")
LOG_LEVEL = os.environ.get("WORKHOURS_LOG_LEVEL", "INFO").upper()
