"""Pay run orchestration: remote calculation with local fallback.

Small pay runs are always calculated in-process. Pay runs at or above the
batch threshold are sent to the remote calculation service; if that fails
the run is calculated locally and the service is skipped until the
availability check interval has passed. Callers always get a complete
result set; the response's source field says which path produced it.

Availability is tracked per orchestrator, so orchestrators for different
tenants or services do not affect each other.
"""

import logging
import threading
import time
from enum import Enum
from typing import Callable, Optional

from .config import get_setting
from .pay_stub import calculate_batch_locally
from .remote import RemoteCalculationError, RemotePayrollClient
from .schemas import BatchPayrollRequest, BatchPayrollResponse
from .taxes import TaxTableProvider, get_tax_tables

logger = logging.getLogger(__name__)

DEFAULT_BATCH_THRESHOLD = 50
DEFAULT_CHECK_INTERVAL_SECONDS = 60.0


class Availability(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class AvailabilityTracker:
    """Thread-safe record of whether the remote service was last reachable.

    Starts available. After a failure the service is skipped until
    check_interval_seconds have passed since the failed attempt.
    """

    def __init__(
        self,
        check_interval_seconds: float = DEFAULT_CHECK_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.check_interval_seconds = check_interval_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._state = Availability.AVAILABLE
        self._last_check: Optional[float] = None

    @property
    def state(self) -> Availability:
        with self._lock:
            return self._state

    @property
    def last_check(self) -> Optional[float]:
        with self._lock:
            return self._last_check

    def now(self) -> float:
        return self._clock()

    def should_attempt(self) -> bool:
        """True unless the service recently failed and the interval has not passed."""
        with self._lock:
            if self._state is Availability.AVAILABLE or self._last_check is None:
                return True
            return self._clock() - self._last_check >= self.check_interval_seconds

    def mark_available(self, checked_at: float) -> None:
        with self._lock:
            self._state = Availability.AVAILABLE
            self._last_check = checked_at

    def mark_unavailable(self, checked_at: float) -> None:
        with self._lock:
            self._state = Availability.UNAVAILABLE
            self._last_check = checked_at

    def reset(self) -> None:
        with self._lock:
            self._state = Availability.AVAILABLE
            self._last_check = None


class BatchOrchestrator:
    """Chooses remote or local calculation for each pay run."""

    def __init__(
        self,
        remote_client: Optional[RemotePayrollClient] = None,
        *,
        batch_threshold: int = DEFAULT_BATCH_THRESHOLD,
        availability: Optional[AvailabilityTracker] = None,
        tables: Optional[TaxTableProvider] = None,
    ):
        self._remote_client = remote_client
        self._batch_threshold = batch_threshold
        self._availability = availability or AvailabilityTracker()
        self._tables = tables

    @classmethod
    def from_settings(cls) -> "BatchOrchestrator":
        """Build an orchestrator from settings (see sdk.config)."""
        return cls(
            RemotePayrollClient.from_settings(),
            batch_threshold=get_setting("batch_threshold", DEFAULT_BATCH_THRESHOLD),
            availability=AvailabilityTracker(
                get_setting("availability_check_interval_seconds", DEFAULT_CHECK_INTERVAL_SECONDS)
            ),
        )

    @property
    def batch_threshold(self) -> int:
        """Minimum employee count for a pay run to be sent to the remote service."""
        return self._batch_threshold

    def get_batch_threshold(self) -> int:
        return self._batch_threshold

    @property
    def availability(self) -> AvailabilityTracker:
        return self._availability

    def is_remote_available(self) -> bool:
        """Whether the remote service was reachable on the last attempt."""
        return self._availability.state is Availability.AVAILABLE

    def reset_availability(self) -> None:
        """Mark the remote service available again, e.g. after connectivity is confirmed."""
        self._availability.reset()
        logger.info("remote calculation service availability reset")

    def _local(self, request: BatchPayrollRequest, started_at: float) -> BatchPayrollResponse:
        return calculate_batch_locally(
            request, started_at=started_at, tables=self._tables or get_tax_tables()
        )

    def calculate_batch(self, request: BatchPayrollRequest) -> BatchPayrollResponse:
        """Calculate a pay run, remotely when worthwhile and possible.

        Never raises for remote failures; they fall back to local calculation.
        """
        started_at = time.perf_counter()
        employee_count = len(request.employees)

        if employee_count < self._batch_threshold:
            logger.debug(
                f"pay run {request.pay_run_id}: {employee_count} employees "
                f"below threshold {self._batch_threshold}, calculating locally"
            )
            return self._local(request, started_at)

        if self._remote_client is None:
            logger.debug(f"pay run {request.pay_run_id}: no remote service configured")
            return self._local(request, started_at)

        if not self._availability.should_attempt():
            logger.info(
                f"pay run {request.pay_run_id}: remote service recently unavailable, "
                f"calculating locally"
            )
            return self._local(request, started_at)

        checked_at = self._availability.now()
        try:
            response = self._remote_client.calculate_batch(request)
        except RemoteCalculationError as e:
            self._availability.mark_unavailable(checked_at)
            logger.warning(
                f"pay run {request.pay_run_id}: remote calculation failed, "
                f"falling back to local calculation: {e}"
            )
            return self._local(request, started_at)

        self._availability.mark_available(checked_at)
        logger.info(
            f"pay run {request.pay_run_id}: {employee_count} employees calculated remotely "
            f"in {response.summary.processing_time_ms}ms"
        )
        return response.model_copy(update={"source": "remote"})
