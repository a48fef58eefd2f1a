"""Async job poller: submission, polling and lifecycle state behind one observer API."""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Awaitable, Callable

from .interfaces import JobHandle, JobRequest, JobTransportPort, StatusReport
from .scheduler import DEFAULT_POLL_INTERVAL_SECONDS, PollScheduler
from .state_machine import JobStateMachine, StateObserver
from .states import (
    Cancelled,
    Completed,
    Failed,
    JobState,
    Pending,
    Submitting,
    job_state_is_terminal,
)
from .submission import JobSubmissionClient

logger = logging.getLogger(__name__)


class AsyncJobPoller:
    """Track one asynchronous backend job from submission to terminal state.

    Every `submit()` starts a new lifecycle identified by a generation number.
    Answers that belong to an older generation, or that arrive after the
    lifecycle left `Pending`, are discarded.

    Usage::

        poller = AsyncJobPoller(transport=transport)
        poller.on_state_change(print)
        poller.submit(JobRequest({"status": "pending"}))
        final_state = await poller.wait_for_terminal()
    """

    def __init__(
        self,
        transport: JobTransportPort,
        interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        max_poll_attempts: int | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ):
        """Initialize poller components.

        Args:
            transport: Backend transport shared by submission and status checks.
            interval_seconds: Fixed poll interval.
            max_poll_attempts: Optional bound on status checks per lifecycle.
            sleep: Optional awaitable sleep override for the poll timer.

        Raises:
            ValueError: Raised when configuration values are invalid.
        """

        self._machine = JobStateMachine()
        self._submission_client = JobSubmissionClient(transport=transport)
        self._scheduler = PollScheduler(
            transport=transport,
            interval_seconds=interval_seconds,
            max_attempts=max_poll_attempts,
            sleep=sleep,
        )
        self._generation = 0
        self._submission_task: asyncio.Task[None] | None = None

    def get_state(self) -> JobState:
        """Return the current lifecycle state."""

        return self._machine.machine_state()

    def on_state_change(self, callback: StateObserver) -> Callable[[], None]:
        """Register a callback invoked with the new state after every transition.

        Args:
            callback: Observer callback.

        Returns:
            Callable[[], None]: Callable that unregisters the callback.
        """

        return self._machine.machine_subscribe(callback)

    def poll_is_active(self) -> bool:
        """Return whether a poll loop is running for the current lifecycle."""

        return self._scheduler.scheduler_is_active()

    def submit(self, request: JobRequest) -> None:
        """Start a fresh lifecycle for `request`.

        Any running poll loop is cancelled first and an in-flight submission of
        the previous lifecycle is abandoned.

        Args:
            request: Caller-validated job request.

        Raises:
            RuntimeError: Raised when called outside a running event loop.
        """

        loop = asyncio.get_running_loop()
        self._poller_abandon_lifecycle()

        self._generation += 1
        generation = self._generation
        self._machine.machine_transition(Submitting())
        self._submission_task = loop.create_task(
            self._poller_run_submission(generation=generation, request=request),
            name=f"job-submit-{generation}",
        )

    def cancel(self) -> None:
        """Cancel a `Pending` lifecycle; no-op in every other state."""

        if not isinstance(self.get_state(), Pending):
            return
        self._scheduler.scheduler_stop()
        self._machine.machine_transition(Cancelled())
        logger.info("job polling cancelled generation=%s", self._generation)

    async def wait_for_terminal(self) -> JobState:
        """Wait until the lifecycle reaches `Completed`, `Failed` or `Cancelled`.

        Returns:
            JobState: The terminal state that was reached.
        """

        current_state = self.get_state()
        if job_state_is_terminal(current_state):
            return current_state

        future: asyncio.Future[JobState] = asyncio.get_running_loop().create_future()

        def _resolve(state: JobState) -> None:
            if job_state_is_terminal(state) and not future.done():
                future.set_result(state)

        unsubscribe = self.on_state_change(_resolve)
        try:
            return await future
        finally:
            unsubscribe()

    async def aclose(self) -> None:
        """Stop background work owned by the poller.

        A `Pending` lifecycle ends as `Cancelled`.
        """

        self._poller_abandon_lifecycle()
        await asyncio.sleep(0)

    def _poller_abandon_lifecycle(self) -> None:
        if isinstance(self.get_state(), Pending):
            self.cancel()
        self._scheduler.scheduler_stop()

        submission_task = self._submission_task
        self._submission_task = None
        if submission_task is not None and not submission_task.done():
            submission_task.cancel()

    def _poller_is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def _poller_run_submission(self, generation: int, request: JobRequest) -> None:
        state = await self._submission_client.submission_execute(request)
        if not self._poller_is_current(generation) or not isinstance(self.get_state(), Submitting):
            logger.debug("discarding stale submission outcome generation=%s", generation)
            return

        self._machine.machine_transition(state)
        # Observers may have cancelled or resubmitted while being notified.
        current_state = self.get_state()
        if self._poller_is_current(generation) and isinstance(current_state, Pending):
            self._scheduler.scheduler_start(
                handle=JobHandle(job_id=current_state.job_id),
                on_report=partial(self._poller_apply_report, generation),
                on_exhausted=partial(self._poller_apply_exhausted, generation),
            )

    def _poller_apply_report(self, generation: int, report: StatusReport) -> None:
        current_state = self.get_state()
        if not self._poller_is_current(generation) or not isinstance(current_state, Pending):
            logger.debug("discarding stale status report generation=%s status=%s", generation, report.status)
            return

        if report.report_is_completed():
            self._machine.machine_transition(Completed(result=report.data))
        elif report.report_is_failed():
            self._machine.machine_transition(Failed(error_message=report.error or "job failed"))
        else:
            self._machine.machine_transition(Pending(job_id=current_state.job_id, last_known_status=report.status))

    def _poller_apply_exhausted(self, generation: int, attempts: int) -> None:
        if not self._poller_is_current(generation) or not isinstance(self.get_state(), Pending):
            return
        self._machine.machine_transition(
            Failed(error_message=f"report job polling gave up after {attempts} attempts")
        )
