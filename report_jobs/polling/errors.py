"""Project-native typed exceptions for job polling and its transports."""

from __future__ import annotations


class JobTransportError(Exception):
    """Base exception for failures talking to the job-processing backend.

    Attributes:
        status_code: Optional HTTP status code of the failed exchange.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class JobTransportConnectionError(JobTransportError, ConnectionError):
    """Transport-level connectivity failure."""


class JobTransportTimeoutError(JobTransportError, TimeoutError):
    """Transport request exceeded its timeout."""


class JobTransportProtocolError(JobTransportError, ValueError):
    """Backend answered with a body that does not match the expected contract."""


class InvalidJobTransitionError(RuntimeError):
    """Raised when a lifecycle transition is not allowed by the state machine."""
