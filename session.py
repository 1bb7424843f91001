"""Dashboard session state and the stale-fetch guard."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from models import AuthSession, ReportTotals, TimeReportStats
from utils import parse_decimal

logger = logging.getLogger(__name__)

Identity = tuple[str, Any, Any]


@dataclass(frozen=True)
class FetchTicket:
    """Tag handed out when a fetch starts; only the newest ticket may apply its result."""

    generation: int
    identity: Identity


class DashboardSession:
    """State for one signed-in user: auth, last report, logged hours and status flags."""

    def __init__(self, auth: AuthSession | None = None):
        self.auth = auth or AuthSession()
        self.generation = 0
        self.totals: ReportTotals | None = None
        self.logged_hours_text = ""
        self.error = ""
        self.loading = False
        self.last_synced_at: datetime | None = None

    @property
    def identity(self) -> Identity:
        return self._identity_of(self.auth)

    @property
    def stats(self) -> TimeReportStats | None:
        return self.totals.stats if self.totals else None

    @property
    def logged_hours(self) -> Decimal:
        return parse_decimal(self.logged_hours_text) or Decimal("0")

    def set_logged_hours(self, value: Any) -> None:
        self.logged_hours_text = "" if value is None else str(value).strip()

    def sign_in(self, auth: AuthSession) -> None:
        if self._identity_of(auth) != self.identity:
            self.generation += 1
        self.auth = auth

    def sign_out(self) -> None:
        """Forget the user and every value derived from their reports."""
        self.generation += 1
        self.auth = AuthSession()
        self.totals = None
        self.logged_hours_text = ""
        self.error = ""
        self.loading = False
        self.last_synced_at = None

    def begin_fetch(self) -> FetchTicket:
        self.generation += 1
        self.loading = True
        self.error = ""
        return FetchTicket(self.generation, self.identity)

    def is_current(self, ticket: FetchTicket) -> bool:
        return ticket.generation == self.generation and ticket.identity == self.identity

    def complete_fetch(self, ticket: FetchTicket, totals: ReportTotals) -> bool:
        """Apply a fetch result. Returns False if the result was superseded."""
        if not self.is_current(ticket):
            logger.debug(f"Discarding stale report for generation {ticket.generation}")
            return False

        self.totals = totals
        self.loading = False
        self.last_synced_at = datetime.now()
        on_computer = totals.stats.on_computer_hours if totals.stats else None
        if on_computer is not None:
            self.logged_hours_text = str(on_computer)
        return True

    def fail_fetch(self, ticket: FetchTicket, error: Exception | str) -> bool:
        """Record a fetch error, keeping previously fetched data."""
        if not self.is_current(ticket):
            logger.debug(f"Discarding stale error for generation {ticket.generation}")
            return False

        self.error = str(error)
        self.loading = False
        logger.warning(f"Report fetch failed: {self.error}")
        return True

    @staticmethod
    def _identity_of(auth: AuthSession) -> Identity:
        account = auth.account
        return (
            auth.access_token,
            account.company_id if account else None,
            account.id if account else None,
        )
