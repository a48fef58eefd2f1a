"""Tagged job lifecycle states exposed by the async job poller.

Each lifecycle state is its own immutable dataclass so a state carries only the
fields that are meaningful for it. A result and an error message can never be
set at the same time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Idle:
    """No job has been submitted yet."""


@dataclass(frozen=True)
class Submitting:
    """Submission request is in flight."""


@dataclass(frozen=True)
class Pending:
    """Job accepted by the backend and awaiting completion.

    Attributes:
        job_id: Backend-issued job identifier.
        last_known_status: Free-form status label for display only.
    """

    job_id: str
    last_known_status: str


@dataclass(frozen=True)
class Completed:
    """Job finished successfully.

    Attributes:
        result: Opaque result payload returned by the backend.
    """

    result: Any


@dataclass(frozen=True)
class Failed:
    """Job finished unsuccessfully or its submission could not be made.

    Attributes:
        error_message: Human-readable failure cause.
    """

    error_message: str


@dataclass(frozen=True)
class Cancelled:
    """Caller stopped polling before a terminal state was reached."""


JobState = Union[Idle, Submitting, Pending, Completed, Failed, Cancelled]

TERMINAL_JOB_STATE_TYPES: tuple[type, ...] = (Completed, Failed, Cancelled)


def job_state_is_terminal(state: JobState) -> bool:
    """Return whether no further automatic transition can leave the state.

    Args:
        state: Job lifecycle state.

    Returns:
        bool: True for `Completed`, `Failed` and `Cancelled`.
    """

    return isinstance(state, TERMINAL_JOB_STATE_TYPES)


def job_state_label(state: JobState) -> str:
    """Return a short lowercase label for logs and CLI output."""

    return type(state).__name__.lower()
