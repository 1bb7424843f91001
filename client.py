"""
Report service client - authentication and monthly report retrieval.

This module is responsible for:
- Exchanging credentials for an access token
- Fetching the monthly report for one account
- Turning non-2xx responses into a single readable error

It does NOT handle:
- Retrying failed calls
- Persisting the session
- Deciding whether a result is still wanted (see session.py)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any

import requests

from config import (
    API_BASE_URL,
    DEFAULT_DAY_END_CUTOFF,
    DEFAULT_DAY_START_CUTOFF,
    DEFAULT_GRANT_TYPE,
    DEFAULT_SUPPRESS_DETAILS,
    DEFAULT_TOKEN_TYPE,
    REQUEST_TIMEOUT,
)
from models import ReportTotals
from report import build_report_totals
from utils import month_range_ms

logger = logging.getLogger(__name__)


class ReportValidationError(ValueError):
    """Request rejected before any network call."""


class ReportClientError(RuntimeError):
    """The report service answered with an error, or could not be reached."""

    def __init__(self, message: str, status: int | None = None, reason: str = "", body: str = ""):
        super().__init__(message)
        self.status = status
        self.reason = reason
        self.body = body

    @classmethod
    def from_response(cls, operation: str, response: requests.Response) -> ReportClientError:
        body = response.text
        message = f"{operation} failed with {response.status_code} {response.reason}. {body}"
        return cls(message, status=response.status_code, reason=response.reason or "", body=body)


def normalise_suppression_flag(flag: Any) -> bool:
    """Accept a bool or the strings 'true'/'false'; anything else is False."""
    if isinstance(flag, bool):
        return flag
    if isinstance(flag, str):
        value = flag.strip().lower()
        if value == "true":
            return True
        if value == "false":
            return False
    return False


@dataclass(frozen=True)
class ReportRequest:
    token: str
    company_id: Any
    account_id: Any
    token_type: str = DEFAULT_TOKEN_TYPE
    start_time: int | None = None
    end_time: int | None = None
    day_start_cutoff: int | None = DEFAULT_DAY_START_CUTOFF
    day_end_cutoff: int | None = DEFAULT_DAY_END_CUTOFF
    suppress_details: Any = DEFAULT_SUPPRESS_DETAILS

    @classmethod
    def for_month(cls, today: date, **kwargs) -> ReportRequest:
        """Request covering the whole calendar month containing today."""
        start_time, end_time = month_range_ms(today)
        return cls(start_time=start_time, end_time=end_time, **kwargs)

    def validate(self) -> None:
        if not self.token:
            raise ReportValidationError("A valid API token is required.")
        if not self.company_id or not self.account_id:
            raise ReportValidationError("Both companyId and accountId must be provided.")

    def params(self) -> dict[str, str]:
        params = {"accountId": str(self.account_id)}
        if self.start_time:
            params["startTime"] = str(self.start_time)
        if self.end_time:
            params["endTime"] = str(self.end_time)
        if self.day_start_cutoff is not None:
            params["dayStartCutOff"] = str(self.day_start_cutoff)
        if self.day_end_cutoff is not None:
            params["dayEndCutOff"] = str(self.day_end_cutoff)
        params["suppressDetails"] = "true" if normalise_suppression_flag(self.suppress_details) else "false"
        return params

    def headers(self) -> dict[str, str]:
        return {"Authorization": f"{self.token_type or DEFAULT_TOKEN_TYPE} {self.token}"}


class ReportClient:
    """Thin HTTP client for the time-tracking report service."""

    def __init__(self, base_url: str = API_BASE_URL, timeout: float = REQUEST_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def authenticate(self, username: str, password: str, grant_type: str = DEFAULT_GRANT_TYPE) -> dict:
        """Exchange credentials for a token payload containing at least accessToken."""
        if not username or not password:
            raise ReportValidationError("Both username and password are required.")

        logger.info(f"Authenticating {username} against {self.base_url}")
        try:
            response = requests.post(
                f"{self.base_url}/Token",
                json={"username": username, "password": password, "grantType": grant_type},
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ReportClientError(f"Authentication request failed. {e}") from e

        if not response.ok:
            logger.warning(f"Authentication rejected with {response.status_code}")
            raise ReportClientError.from_response("Authentication", response)

        payload = self._json(response, "Authentication")
        if not isinstance(payload, dict) or not payload.get("accessToken"):
            raise ReportClientError("Authentication response did not include an access token.")
        return payload

    def fetch_report(self, request: ReportRequest) -> Any:
        """GET the raw report payload for one account."""
        request.validate()
        url = f"{self.base_url}/companies/{request.company_id}/reports_new2"

        logger.info(f"Fetching report for account {request.account_id} in company {request.company_id}")
        try:
            response = requests.get(
                url,
                params=request.params(),
                headers=request.headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ReportClientError(f"Report request failed. {e}") from e

        if not response.ok:
            logger.warning(f"Report request rejected with {response.status_code}")
            raise ReportClientError.from_response("Report request", response)

        return self._json(response, "Report request")

    def fetch_total_time(self, request: ReportRequest) -> ReportTotals:
        """Fetch the report and resolve its total worked time and stats."""
        payload = self.fetch_report(request)
        totals = build_report_totals(payload)
        logger.debug(f"Resolved {totals.total_worked_ms} ms worked")
        return totals

    @staticmethod
    def _json(response: requests.Response, operation: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ReportClientError(
                f"{operation} returned a response that is not JSON.",
                status=response.status_code,
                reason=response.reason or "",
                body=response.text,
            ) from e
