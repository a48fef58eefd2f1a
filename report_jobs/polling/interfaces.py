"""Typed contracts between the job poller and its backend transport."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Protocol, Union


@dataclass(frozen=True)
class JobRequest:
    """Opaque parameters describing the work to submit.

    Attributes:
        parameters: Read-only request parameters sent to the submission endpoint.
    """

    parameters: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))


@dataclass(frozen=True)
class JobHandle:
    """Identifier of one accepted unit of backend work.

    Attributes:
        job_id: Backend-issued job identifier.
    """

    job_id: str


@dataclass(frozen=True)
class SubmissionCompleted:
    """Submission answered synchronously with the final result."""

    result: Any


@dataclass(frozen=True)
class SubmissionAccepted:
    """Submission accepted for asynchronous processing.

    Attributes:
        handle: Handle for the accepted job.
        initial_status: Status label reported with the acceptance.
    """

    handle: JobHandle
    initial_status: str = "processing"


@dataclass(frozen=True)
class SubmissionRejected:
    """Submission answered with an error status."""

    error_message: str


SubmissionOutcome = Union[SubmissionCompleted, SubmissionAccepted, SubmissionRejected]


@dataclass(frozen=True)
class StatusReport:
    """One status-check answer for a pending job.

    Attributes:
        status: Raw backend status label.
        data: Result payload when status is `completed`.
        error: Failure message when status is `failed`.
    """

    status: str
    data: Any = None
    error: str | None = None

    def report_is_completed(self) -> bool:
        return self.status == "completed"

    def report_is_failed(self) -> bool:
        return self.status == "failed"

    def report_is_terminal(self) -> bool:
        return self.report_is_completed() or self.report_is_failed()


class JobTransportPort(Protocol):
    """Port definition for the job-processing backend consumed by the poller."""

    async def transport_submit(self, request: JobRequest) -> SubmissionOutcome:
        """Send one job submission request.

        Args:
            request: Job request parameters.

        Returns:
            SubmissionOutcome: Completed, accepted or rejected outcome.

        Raises:
            JobTransportError: Raised for network failures and malformed responses.
        """

    async def transport_fetch_status(self, handle: JobHandle) -> StatusReport:
        """Fetch the current status of one accepted job.

        Args:
            handle: Accepted job handle.

        Returns:
            StatusReport: Parsed status answer.

        Raises:
            JobTransportError: Raised for network failures and malformed responses.
        """
