"""Regression tests for the fixed-interval poll scheduler."""

from __future__ import annotations

import asyncio

import pytest

from report_jobs.polling import JobHandle, PollScheduler, StatusReport


class _CountingTransport:
    """Transport stub answering `processing` and counting status checks."""

    def __init__(self) -> None:
        self.status_calls = 0

    async def transport_submit(self, request):
        raise AssertionError("scheduler must not submit")

    async def transport_fetch_status(self, handle: JobHandle) -> StatusReport:
        self.status_calls += 1
        return StatusReport(status="processing")


@pytest.mark.asyncio
async def test_scheduler_rejects_second_active_loop() -> None:
    """Refuse to start a second loop while one is active.

    Returns:
        None: Assertions validate single-loop ownership.

    Raises:
        AssertionError: Raised when two loops can run at once.
    """

    scheduler = PollScheduler(transport=_CountingTransport(), interval_seconds=60.0)
    scheduler.scheduler_start(JobHandle(job_id="job-1"), on_report=lambda _report: None, on_exhausted=lambda _n: None)

    with pytest.raises(RuntimeError, match="already active"):
        scheduler.scheduler_start(
            JobHandle(job_id="job-2"),
            on_report=lambda _report: None,
            on_exhausted=lambda _n: None,
        )

    scheduler.scheduler_stop()
    scheduler.scheduler_stop()
    assert not scheduler.scheduler_is_active()


@pytest.mark.asyncio
async def test_scheduler_reports_each_tick_until_attempts_run_out() -> None:
    """Deliver every report and signal exhaustion once after the last attempt.

    Returns:
        None: Assertions validate tick delivery and exhaustion callback.

    Raises:
        AssertionError: Raised when ticks or exhaustion differ.
    """

    transport = _CountingTransport()
    scheduler = PollScheduler(transport=transport, interval_seconds=0, max_attempts=2)
    reports: list[StatusReport] = []
    exhausted = asyncio.Event()
    exhausted_attempts: list[int] = []

    def _on_exhausted(attempts: int) -> None:
        exhausted_attempts.append(attempts)
        exhausted.set()

    scheduler.scheduler_start(JobHandle(job_id="job-1"), on_report=reports.append, on_exhausted=_on_exhausted)
    await asyncio.wait_for(exhausted.wait(), 1.0)
    await asyncio.sleep(0)

    assert reports == [StatusReport(status="processing")] * 2
    assert exhausted_attempts == [2]
    assert transport.status_calls == 2
    assert not scheduler.scheduler_is_active()
