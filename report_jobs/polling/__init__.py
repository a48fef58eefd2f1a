"""Client-side async job polling: submission, fixed-interval polling and lifecycle state."""

from .errors import (
	InvalidJobTransitionError,
	JobTransportConnectionError,
	JobTransportError,
	JobTransportProtocolError,
	JobTransportTimeoutError,
)
from .interfaces import (
	JobHandle,
	JobRequest,
	JobTransportPort,
	StatusReport,
	SubmissionAccepted,
	SubmissionCompleted,
	SubmissionOutcome,
	SubmissionRejected,
)
from .poller import AsyncJobPoller
from .scheduler import DEFAULT_POLL_INTERVAL_SECONDS, PollScheduler
from .state_machine import JobStateMachine
from .states import (
	Cancelled,
	Completed,
	Failed,
	Idle,
	JobState,
	Pending,
	Submitting,
	job_state_is_terminal,
	job_state_label,
)
from .submission import JobSubmissionClient

__all__ = [
	"AsyncJobPoller",
	"Cancelled",
	"Completed",
	"DEFAULT_POLL_INTERVAL_SECONDS",
	"Failed",
	"Idle",
	"InvalidJobTransitionError",
	"JobHandle",
	"JobRequest",
	"JobState",
	"JobStateMachine",
	"JobSubmissionClient",
	"JobTransportConnectionError",
	"JobTransportError",
	"JobTransportPort",
	"JobTransportProtocolError",
	"JobTransportTimeoutError",
	"Pending",
	"PollScheduler",
	"StatusReport",
	"SubmissionAccepted",
	"SubmissionCompleted",
	"SubmissionOutcome",
	"SubmissionRejected",
	"Submitting",
	"job_state_is_terminal",
	"job_state_label",
]
