"""Salary and bonus breakdown for the current month."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from babel.numbers import UnknownCurrencyError, format_currency as babel_format_currency
from babel.numbers import validate_currency

from config import (
    ATTENDANCE_BONUS_RATE,
    CLIENT_BONUS_RATE,
    CURRENCY_LOCALE,
    DEFAULT_CURRENCY,
    PERFORMANCE_BONUS_RATE,
    TARGET_TOLERANCE_HOURS,
    TIME_MANAGEMENT_BONUS_RATE,
)
from models import BonusLine, CalendarResult, CompensationConfig, CompensationResult
from utils import parse_decimal

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

BONUS_LABELS = {
    "attendance": "Attendance bonus",
    "time_management": "Time management bonus",
    "client": "Client bonus",
    "performance": "Performance bonus",
}


def normalise_currency(code: Any) -> str:
    """Trim, keep the first three characters and uppercase; USD when empty."""
    if not isinstance(code, str):
        return DEFAULT_CURRENCY
    return code.strip()[:3].upper() or DEFAULT_CURRENCY


def format_currency(amount: Any, code: Any = DEFAULT_CURRENCY) -> str:
    """Format with the locale's currency rules, falling back to USD for unknown codes."""
    currency = normalise_currency(code)
    try:
        validate_currency(currency)
    except UnknownCurrencyError:
        logger.debug(f"Unknown currency {currency!r}, formatting as {DEFAULT_CURRENCY}")
        currency = DEFAULT_CURRENCY
    return babel_format_currency(Decimal(str(amount)), currency, locale=CURRENCY_LOCALE)


def _positive(value: Decimal | None) -> Decimal:
    return value if value is not None and value > 0 else ZERO


def _base_pay(
    target: Decimal,
    logged: Decimal,
    base_salary: Decimal,
    expected_monthly_base: Decimal,
    effective_rate: Decimal,
    capped_hours: Decimal,
    meets_target: bool,
) -> Decimal:
    if target <= 0:
        if base_salary > 0:
            return base_salary
        return effective_rate * logged if effective_rate > 0 else ZERO

    if meets_target:
        if expected_monthly_base > 0:
            return expected_monthly_base
        return effective_rate * logged if effective_rate > 0 else ZERO

    if effective_rate > 0:
        computed = effective_rate * capped_hours
        # Prorated pay never exceeds the full monthly salary
        if expected_monthly_base > 0:
            return min(expected_monthly_base, computed)
        return computed

    return ZERO


def compute_compensation(
    calendar: CalendarResult,
    logged_hours: Any,
    config: CompensationConfig,
) -> CompensationResult:
    """Compute base pay, bonuses and total for the month.

    Bonuses only apply when logged hours match the monthly target to within
    0.01 h; over-target hours are capped rather than rewarded. The performance
    bonus additionally requires the other three bonuses to be active.
    """
    logged = parse_decimal(logged_hours) or ZERO
    target = Decimal(calendar.total_target_hours)
    if target < 0:
        target = ZERO
    base_salary = _positive(config.base_salary)
    hourly_rate = _positive(config.hourly_rate)
    currency = normalise_currency(config.currency)
    enabled = config.enable_salary

    if base_salary > 0:
        expected_monthly_base = base_salary
    elif hourly_rate > 0 and target > 0:
        expected_monthly_base = hourly_rate * target
    else:
        expected_monthly_base = ZERO

    if base_salary > 0 and target > 0:
        effective_rate = base_salary / target
    else:
        effective_rate = hourly_rate

    meets_target = target > 0 and abs(logged - target) < TARGET_TOLERANCE_HOURS
    capped_hours = min(logged, target) if target > 0 else logged

    if enabled:
        base_pay = _base_pay(
            target, logged, base_salary, expected_monthly_base,
            effective_rate, capped_hours, meets_target,
        )
    else:
        base_pay = ZERO

    qualifies = enabled and meets_target and expected_monthly_base > 0
    attendance = qualifies and config.enable_attendance_bonus
    time_management = qualifies and config.enable_time_management_bonus
    client = qualifies and config.enable_client_bonus
    performance = (
        qualifies
        and config.enable_performance_bonus
        and attendance
        and time_management
        and client
    )

    bonuses = tuple(
        BonusLine(
            name=name,
            rate=rate,
            active=active,
            amount=expected_monthly_base * rate if active else ZERO,
        )
        for name, rate, active in (
            ("attendance", ATTENDANCE_BONUS_RATE, attendance),
            ("time_management", TIME_MANAGEMENT_BONUS_RATE, time_management),
            ("client", CLIENT_BONUS_RATE, client),
            ("performance", PERFORMANCE_BONUS_RATE, performance),
        )
    )
    bonus_subtotal = sum((line.amount for line in bonuses), ZERO)

    return CompensationResult(
        currency=currency,
        expected_monthly_base=expected_monthly_base if enabled else ZERO,
        effective_hourly_rate=effective_rate if enabled else ZERO,
        meets_monthly_target=meets_target,
        capped_hours=capped_hours,
        base_pay=base_pay,
        bonuses=bonuses,
        bonus_subtotal=bonus_subtotal,
        total_compensation=base_pay + bonus_subtotal if enabled else ZERO,
        hour_delta=logged - Decimal(calendar.expected_hours_by_today),
        hours_to_target=max(target - logged, ZERO),
    )
