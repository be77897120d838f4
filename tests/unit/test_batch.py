"""Tests for pay run routing between the remote service and local calculation.

A fake remote client and a fake clock stand in for the calculation service
and time.monotonic, so availability transitions are deterministic.
"""

from datetime import date

import pytest

from payrollcalc.sdk import (
    Availability,
    AvailabilityTracker,
    BatchOrchestrator,
    BatchPayrollRequest,
    RemoteCalculationError,
    RemotePayrollClient,
    calculate_batch_locally,
    set_setting,
)

PAY_DATE = date(2025, 1, 15)


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeRemoteClient:
    """Computes locally and tags the result, or raises when told to fail."""

    def __init__(self, tables, fail=False):
        self.tables = tables
        self.fail = fail
        self.calls = 0

    def calculate_batch(self, request):
        self.calls += 1
        if self.fail:
            raise RemoteCalculationError("connection refused")
        response = calculate_batch_locally(request, tables=self.tables)
        return response.model_copy(update={"source": None})


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_request(make_pay_input, make_employee):
    def _make(count, pay_run_id="PR20250115-001"):
        return BatchPayrollRequest(
            pay_run_id=pay_run_id,
            pay_date=PAY_DATE,
            employees=[make_pay_input(make_employee(id=f"emp-{i}")) for i in range(count)],
        )
    return _make


def make_orchestrator(remote, clock, tables, threshold=50, interval=60):
    return BatchOrchestrator(
        remote,
        batch_threshold=threshold,
        availability=AvailabilityTracker(interval, clock=clock),
        tables=tables,
    )


class TestThreshold:

    def test_below_threshold_stays_local(self, tables, clock, make_request):
        remote = FakeRemoteClient(tables)
        response = make_orchestrator(remote, clock, tables).calculate_batch(make_request(49))
        assert response.source == "local"
        assert remote.calls == 0
        assert len(response.results) == 49

    def test_at_threshold_goes_remote(self, tables, clock, make_request):
        remote = FakeRemoteClient(tables)
        response = make_orchestrator(remote, clock, tables).calculate_batch(make_request(50))
        assert response.source == "remote"
        assert remote.calls == 1
        assert len(response.results) == 50

    def test_no_remote_configured(self, tables, clock, make_request):
        response = make_orchestrator(None, clock, tables).calculate_batch(make_request(60))
        assert response.source == "local"

    def test_custom_threshold(self, tables, clock, make_request):
        remote = FakeRemoteClient(tables)
        orchestrator = make_orchestrator(remote, clock, tables, threshold=2)
        assert orchestrator.get_batch_threshold() == 2
        assert orchestrator.calculate_batch(make_request(2)).source == "remote"

    def test_remote_and_local_results_agree(self, tables, clock, make_request):
        request = make_request(50)
        remote = make_orchestrator(FakeRemoteClient(tables), clock, tables).calculate_batch(request)
        local = calculate_batch_locally(request, tables=tables)
        assert remote.results == local.results


class TestFallback:

    def test_failure_falls_back_to_local(self, tables, clock, make_request):
        remote = FakeRemoteClient(tables, fail=True)
        orchestrator = make_orchestrator(remote, clock, tables)

        response = orchestrator.calculate_batch(make_request(50))

        assert response.source == "local"
        assert len(response.results) == 50
        assert remote.calls == 1
        assert orchestrator.is_remote_available() is False
        assert orchestrator.availability.state is Availability.UNAVAILABLE

    def test_failure_is_logged(self, tables, clock, make_request, caplog):
        orchestrator = make_orchestrator(FakeRemoteClient(tables, fail=True), clock, tables)
        orchestrator.calculate_batch(make_request(50))
        assert "connection refused" in caplog.text

    def test_skips_remote_within_check_interval(self, tables, clock, make_request):
        remote = FakeRemoteClient(tables, fail=True)
        orchestrator = make_orchestrator(remote, clock, tables)
        orchestrator.calculate_batch(make_request(50))

        clock.advance(30)
        remote.fail = False
        response = orchestrator.calculate_batch(make_request(50))

        assert response.source == "local"
        assert remote.calls == 1

    def test_retries_after_check_interval(self, tables, clock, make_request):
        remote = FakeRemoteClient(tables, fail=True)
        orchestrator = make_orchestrator(remote, clock, tables)
        orchestrator.calculate_batch(make_request(50))

        clock.advance(60)
        remote.fail = False
        response = orchestrator.calculate_batch(make_request(50))

        assert response.source == "remote"
        assert remote.calls == 2
        assert orchestrator.is_remote_available() is True

    def test_failed_retry_restarts_interval(self, tables, clock, make_request):
        remote = FakeRemoteClient(tables, fail=True)
        orchestrator = make_orchestrator(remote, clock, tables)
        orchestrator.calculate_batch(make_request(50))
        clock.advance(61)
        orchestrator.calculate_batch(make_request(50))
        clock.advance(30)
        orchestrator.calculate_batch(make_request(50))
        assert remote.calls == 2

    def test_reset_availability(self, tables, clock, make_request):
        remote = FakeRemoteClient(tables, fail=True)
        orchestrator = make_orchestrator(remote, clock, tables)
        orchestrator.calculate_batch(make_request(50))

        orchestrator.reset_availability()
        remote.fail = False

        assert orchestrator.is_remote_available() is True
        assert orchestrator.calculate_batch(make_request(50)).source == "remote"

    def test_small_runs_unaffected_by_outage(self, tables, clock, make_request):
        remote = FakeRemoteClient(tables, fail=True)
        orchestrator = make_orchestrator(remote, clock, tables)
        orchestrator.calculate_batch(make_request(50))
        assert orchestrator.calculate_batch(make_request(3)).source == "local"
        assert remote.calls == 1

    def test_orchestrators_track_availability_separately(self, tables, clock, make_request):
        failing = make_orchestrator(FakeRemoteClient(tables, fail=True), clock, tables)
        healthy = make_orchestrator(FakeRemoteClient(tables), clock, tables)
        failing.calculate_batch(make_request(50))
        assert healthy.is_remote_available() is True
        assert healthy.calculate_batch(make_request(50)).source == "remote"


class TestAvailabilityTracker:

    def test_starts_available(self, clock):
        tracker = AvailabilityTracker(60, clock=clock)
        assert tracker.state is Availability.AVAILABLE
        assert tracker.last_check is None
        assert tracker.should_attempt() is True

    def test_unavailable_until_interval(self, clock):
        tracker = AvailabilityTracker(60, clock=clock)
        tracker.mark_unavailable(clock())
        assert tracker.should_attempt() is False
        clock.advance(59)
        assert tracker.should_attempt() is False
        clock.advance(1)
        assert tracker.should_attempt() is True

    def test_reset(self, clock):
        tracker = AvailabilityTracker(60, clock=clock)
        tracker.mark_unavailable(clock())
        tracker.reset()
        assert tracker.state is Availability.AVAILABLE
        assert tracker.last_check is None


class TestFromSettings:

    def test_defaults_without_remote(self):
        orchestrator = BatchOrchestrator.from_settings()
        assert orchestrator.batch_threshold == 50
        assert orchestrator.availability.check_interval_seconds == 60

    def test_configured(self):
        set_setting("remote_base_url", "https://payroll.example.com")
        set_setting("batch_threshold", "10")
        set_setting("availability_check_interval_seconds", "5")

        orchestrator = BatchOrchestrator.from_settings()

        assert orchestrator.batch_threshold == 10
        assert orchestrator.availability.check_interval_seconds == 5
        assert isinstance(orchestrator._remote_client, RemotePayrollClient)
