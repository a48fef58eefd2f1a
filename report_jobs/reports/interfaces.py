"""Typed interfaces for report-layer collaborators."""

from typing import Protocol


class ReportNotificationPort(Protocol):
    """Port definition for report-ready notifications sent after a job completes."""

    def report_notify_ready(self, job_id: str, user_id: str) -> None:
        """Notify the owning admin that a report job finished successfully.

        Args:
            job_id: Completed report job id.
            user_id: Owning admin user id.

        Raises:
            Exception: Any delivery failure; callers log it and keep the job completed.
        """
