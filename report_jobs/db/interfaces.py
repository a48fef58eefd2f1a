"""Typed interfaces for database-layer services.

All SQL access must remain in the db package and its submodules.
"""

from typing import Any, Protocol

from report_jobs.domain import HealthStatus, OrderSummary, ReportFilters, ReportJobRecord


class DatabaseHealthPort(Protocol):
    """Port definition for database connectivity verification."""

    def db_connection_label(self) -> str:
        """Return a stable label for the active database connection target.

        Returns:
            str: Database target label for diagnostics.

        Raises:
            RuntimeError: Raised when connection metadata is unavailable.
        """

    def db_check_health(self) -> HealthStatus:
        """Check database connectivity and return deterministic health payload.

        Returns:
            HealthStatus: Database health status payload.

        Raises:
            ConnectionError: Raised when database cannot be reached.
        """


class OrderReadRepositoryPort(Protocol):
    """Port definition for read-only order queries used by reports."""

    def db_order_count(self, filters: ReportFilters) -> int:
        """Count orders matching report filters.

        Args:
            filters: Report filters.

        Returns:
            int: Matching order count.

        Raises:
            RuntimeError: Raised when the query fails.
        """

    def db_order_list(self, filters: ReportFilters) -> list[OrderSummary]:
        """Return orders matching report filters ordered by creation time.

        Args:
            filters: Report filters.

        Returns:
            list[OrderSummary]: Matching orders.

        Raises:
            RuntimeError: Raised when the query fails.
        """


class ReportJobRepositoryPort(Protocol):
    """Port definition for report job lifecycle persistence."""

    def db_report_job_create(self, user_id: str, filters: dict[str, Any]) -> ReportJobRecord:
        """Create a `pending` job owned by `user_id`."""

    def db_report_job_mark_processing(self, job_id: str) -> None:
        """Move a job to `processing` and stamp its start time."""

    def db_report_job_mark_completed(self, job_id: str, result: dict[str, Any]) -> None:
        """Move a job to `completed` with its result payload."""

    def db_report_job_mark_failed(self, job_id: str, error_message: str) -> None:
        """Move a job to `failed` with its error message."""

    def db_report_job_get(self, job_id: str, user_id: str | None = None) -> ReportJobRecord | None:
        """Return one job, optionally scoped to its owner."""

    def db_report_job_list(self, user_id: str, limit: int) -> list[ReportJobRecord]:
        """Return the newest jobs owned by `user_id`."""

    def db_report_job_delete_finished_before(self, cutoff_utc: str) -> int:
        """Delete completed and failed jobs finished before `cutoff_utc`; return the count."""
