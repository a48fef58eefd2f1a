"""Job submission client: one request resolving to a lifecycle state."""

from __future__ import annotations

import logging

from .errors import JobTransportError
from .interfaces import (
    JobRequest,
    JobTransportPort,
    SubmissionAccepted,
    SubmissionCompleted,
    SubmissionRejected,
)
from .states import Completed, Failed, JobState, Pending

logger = logging.getLogger(__name__)


class JobSubmissionClient:
    """Perform exactly one submission call and express its outcome as a state."""

    def __init__(self, transport: JobTransportPort):
        """Initialize submission client.

        Args:
            transport: Backend transport used for the submission call.

        Raises:
            ValueError: Raised when transport is None.
        """

        if transport is None:
            raise ValueError("transport must not be None")
        self._transport = transport

    async def submission_execute(self, request: JobRequest) -> JobState:
        """Submit one job request and map the answer to a lifecycle state.

        No retries are made here. Transport failures are reported as `Failed`
        rather than raised.

        Args:
            request: Caller-validated job request.

        Returns:
            JobState: `Completed`, `Pending` or `Failed`.
        """

        try:
            outcome = await self._transport.transport_submit(request)
        except JobTransportError as error:
            logger.warning("job submission failed: %s", error)
            return Failed(error_message=str(error) or type(error).__name__)
        except Exception as error:  # pylint: disable=broad-exception-caught
            logger.exception("job submission raised unexpectedly")
            return Failed(error_message=str(error) or type(error).__name__)

        if isinstance(outcome, SubmissionCompleted):
            return Completed(result=outcome.result)
        if isinstance(outcome, SubmissionAccepted):
            logger.info("job accepted job_id=%s status=%s", outcome.handle.job_id, outcome.initial_status)
            return Pending(job_id=outcome.handle.job_id, last_known_status=outcome.initial_status)
        if isinstance(outcome, SubmissionRejected):
            return Failed(error_message=outcome.error_message)

        return Failed(error_message=f"unexpected submission outcome: {type(outcome).__name__}")
