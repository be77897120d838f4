"""Client for the remote batch payroll calculation service.

The service accepts a BatchPayrollRequest and returns a BatchPayrollResponse
computed with the same rules as the local calculator. Any failure (network
error, timeout, non-success status, unreadable body) is raised as
RemoteCalculationError; deciding what to do about it is the caller's job.
"""

from __future__ import annotations

import logging
from typing import Any

import requests
from pydantic import ValidationError

from .config import get_setting
from .schemas import BatchPayrollRequest, BatchPayrollResponse

logger = logging.getLogger(__name__)

CALCULATE_PATH = "/functions/payroll/calculate"
DEFAULT_TIMEOUT_SECONDS = 30


class RemoteCalculationError(RuntimeError):
    """Raised when the remote calculation service cannot produce a result."""
    pass


class RemotePayrollClient:
    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        api_token: str | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._api_token = api_token

    @classmethod
    def from_settings(cls) -> RemotePayrollClient | None:
        """Build a client from settings, or None if no remote URL is configured."""
        base_url = get_setting("remote_base_url")
        if not base_url:
            return None
        return cls(
            base_url=base_url,
            timeout_seconds=get_setting("remote_timeout_seconds", DEFAULT_TIMEOUT_SECONDS),
            api_token=get_setting("remote_api_token"),
        )

    @property
    def url(self) -> str:
        return f"{self._base_url}{CALCULATE_PATH}"

    @property
    def timeout_seconds(self) -> float:
        return self._timeout_seconds

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._api_token:
            headers["Authorization"] = f"Bearer {self._api_token}"
        return headers

    def calculate_batch(self, request: BatchPayrollRequest) -> BatchPayrollResponse:
        """POST a pay run to the service and return its results.

        Raises:
            RemoteCalculationError: On any transport, HTTP or payload failure
        """
        payload: dict[str, Any] = request.to_wire()
        try:
            resp = requests.post(
                self.url,
                json=payload,
                headers=self._headers(),
                timeout=self._timeout_seconds,
            )
        except requests.Timeout as e:
            raise RemoteCalculationError(
                f"Timed out after {self._timeout_seconds}s calling {self.url}"
            ) from e
        except requests.RequestException as e:
            raise RemoteCalculationError(f"Request to {self.url} failed: {e}") from e

        if resp.status_code < 200 or resp.status_code >= 300:
            raise RemoteCalculationError(f"HTTP {resp.status_code}: {resp.text}")

        try:
            return BatchPayrollResponse.model_validate(resp.json())
        except ValueError as e:
            # ValidationError is a ValueError; so is a JSON decode error
            kind = "invalid" if isinstance(e, ValidationError) else "unreadable"
            raise RemoteCalculationError(f"Remote service returned {kind} response: {e}") from e
