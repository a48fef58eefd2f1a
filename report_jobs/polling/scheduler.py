"""Fixed-interval poll scheduler for one pending job."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from .errors import JobTransportError
from .interfaces import JobHandle, JobTransportPort, StatusReport

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 2.0


class PollScheduler:
    """Owned timer issuing one status check per interval until told to stop.

    The scheduler runs as one asyncio task. It waits for each status response
    before starting the next interval, so at most one request is in flight.
    Transport errors on a status check are logged and polling continues.
    """

    def __init__(
        self,
        transport: JobTransportPort,
        interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        max_attempts: int | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ):
        """Initialize poll scheduler.

        Args:
            transport: Backend transport used for status checks.
            interval_seconds: Fixed wait before each status check.
            max_attempts: Optional bound on status checks; None polls until terminal.
            sleep: Optional awaitable sleep used between ticks.

        Raises:
            ValueError: Raised when configuration values are invalid.
        """

        if transport is None:
            raise ValueError("transport must not be None")
        if interval_seconds < 0:
            raise ValueError("interval_seconds must be >= 0")
        if max_attempts is not None and max_attempts < 1:
            raise ValueError("max_attempts must be >= 1 when provided")

        self._transport = transport
        self._interval_seconds = float(interval_seconds)
        self._max_attempts = max_attempts
        self._sleep = sleep or asyncio.sleep
        self._task: asyncio.Task[None] | None = None

    def scheduler_is_active(self) -> bool:
        """Return whether a poll loop is currently running."""

        return self._task is not None and not self._task.done()

    def scheduler_start(
        self,
        handle: JobHandle,
        on_report: Callable[[StatusReport], None],
        on_exhausted: Callable[[int], None],
    ) -> None:
        """Start the poll loop for one job handle.

        Args:
            handle: Pending job handle.
            on_report: Callback receiving every successfully parsed status report.
            on_exhausted: Callback receiving the attempt count when `max_attempts` runs out.

        Raises:
            RuntimeError: Raised when a loop is already active or no event loop is running.
        """

        if self.scheduler_is_active():
            raise RuntimeError("poll loop already active; stop it before starting another")

        loop = asyncio.get_running_loop()
        self._task = loop.create_task(
            self._scheduler_run(handle=handle, on_report=on_report, on_exhausted=on_exhausted),
            name=f"job-poll-{handle.job_id}",
        )

    def scheduler_stop(self) -> None:
        """Stop the active poll loop immediately; no-op when idle.

        A status request in flight at this point is cancelled and its answer
        never reaches `on_report`.
        """

        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()

    async def _scheduler_run(
        self,
        handle: JobHandle,
        on_report: Callable[[StatusReport], None],
        on_exhausted: Callable[[int], None],
    ) -> None:
        attempt = 0
        try:
            while True:
                await self._sleep(self._interval_seconds)
                attempt += 1
                try:
                    report = await self._transport.transport_fetch_status(handle)
                except JobTransportError as error:
                    logger.warning(
                        "transient status check failure job_id=%s attempt=%s: %s",
                        handle.job_id,
                        attempt,
                        error,
                    )
                except Exception:  # pylint: disable=broad-exception-caught
                    logger.exception("status check raised unexpectedly job_id=%s attempt=%s", handle.job_id, attempt)
                else:
                    on_report(report)
                    if report.report_is_terminal():
                        return

                if self._max_attempts is not None and attempt >= self._max_attempts:
                    logger.warning("poll attempts exhausted job_id=%s attempts=%s", handle.job_id, attempt)
                    on_exhausted(attempt)
                    return
        finally:
            if self._task is asyncio.current_task():
                self._task = None
