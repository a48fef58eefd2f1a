"""Database service for report job lifecycle persistence."""

from __future__ import annotations

import json
from typing import Any
from uuid import uuid4

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError

from report_jobs.domain import ReportJobRecord, ReportJobStatus, domain_format_utc, domain_utc_now

from .interfaces import ReportJobRepositoryPort

_REPORT_JOB_COLUMNS = (
    "report_job_id, user_id, status, filters_json, result_json, error_message, "
    "created_at_utc, started_at_utc, completed_at_utc"
)


class SQLAlchemyReportJobRepository(ReportJobRepositoryPort):
    """SQLAlchemy-backed report job repository.

    Timestamps are stored as ISO-8601 UTC text so ordering and cutoff
    comparisons behave the same on SQLite and PostgreSQL.
    """

    def __init__(self, engine: Engine):
        """Initialize report job repository.

        Args:
            engine: SQLAlchemy engine used for all persistence operations.

        Raises:
            ValueError: Raised when engine is None.
        """

        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

    def db_report_job_create(self, user_id: str, filters: dict[str, Any]) -> ReportJobRecord:
        """Create a pending report job.

        Args:
            user_id: Owning admin user id.
            filters: JSON-serializable filter payload.

        Returns:
            ReportJobRecord: Newly created job.

        Raises:
            ValueError: Raised when user_id is blank.
            RuntimeError: Raised when persistence fails.
        """

        normalized_user_id = self._validate_non_empty_text(user_id, "user_id")
        job_id = str(uuid4())
        created_at_utc = domain_format_utc(domain_utc_now())

        try:
            with self._engine.begin() as connection:
                connection.execute(
                    text(
                        "INSERT INTO report_job ("
                        "report_job_id, user_id, status, filters_json, created_at_utc"
                        ") VALUES ("
                        ":report_job_id, :user_id, :status, :filters_json, :created_at_utc"
                        ")"
                    ),
                    {
                        "report_job_id": job_id,
                        "user_id": normalized_user_id,
                        "status": ReportJobStatus.PENDING.value,
                        "filters_json": json.dumps(filters, sort_keys=True),
                        "created_at_utc": created_at_utc,
                    },
                )
        except SQLAlchemyError as error:
            raise RuntimeError("failed to create report job") from error

        return ReportJobRecord(
            job_id=job_id,
            user_id=normalized_user_id,
            status=ReportJobStatus.PENDING.value,
            filters=dict(filters),
            result=None,
            error_message=None,
            created_at_utc=created_at_utc,
            started_at_utc=None,
            completed_at_utc=None,
        )

    def db_report_job_mark_processing(self, job_id: str) -> None:
        self._db_update_job(
            job_id=job_id,
            assignments="status = :status, started_at_utc = :started_at_utc",
            parameters={
                "status": ReportJobStatus.PROCESSING.value,
                "started_at_utc": domain_format_utc(domain_utc_now()),
            },
            action_label="mark report job processing",
        )

    def db_report_job_mark_completed(self, job_id: str, result: dict[str, Any]) -> None:
        self._db_update_job(
            job_id=job_id,
            assignments="status = :status, result_json = :result_json, completed_at_utc = :completed_at_utc",
            parameters={
                "status": ReportJobStatus.COMPLETED.value,
                "result_json": json.dumps(result, sort_keys=True),
                "completed_at_utc": domain_format_utc(domain_utc_now()),
            },
            action_label="mark report job completed",
        )

    def db_report_job_mark_failed(self, job_id: str, error_message: str) -> None:
        self._db_update_job(
            job_id=job_id,
            assignments="status = :status, error_message = :error_message, completed_at_utc = :completed_at_utc",
            parameters={
                "status": ReportJobStatus.FAILED.value,
                "error_message": error_message,
                "completed_at_utc": domain_format_utc(domain_utc_now()),
            },
            action_label="mark report job failed",
        )

    def db_report_job_get(self, job_id: str, user_id: str | None = None) -> ReportJobRecord | None:
        """Fetch one report job by id.

        Args:
            job_id: Report job id.
            user_id: Optional owner scope; a job owned by another user is not returned.

        Returns:
            ReportJobRecord | None: Matching job or None.

        Raises:
            RuntimeError: Raised when the query fails.
        """

        query = f"SELECT {_REPORT_JOB_COLUMNS} FROM report_job WHERE report_job_id = :report_job_id"
        parameters: dict[str, Any] = {"report_job_id": job_id.strip()}
        if user_id is not None:
            query = f"{query} AND user_id = :user_id"
            parameters["user_id"] = user_id.strip()

        try:
            with self._engine.connect() as connection:
                row = connection.execute(text(query), parameters).mappings().first()
        except SQLAlchemyError as error:
            raise RuntimeError("failed to fetch report job by id") from error

        if row is None:
            return None
        return self._map_report_job_record(row)

    def db_report_job_list(self, user_id: str, limit: int) -> list[ReportJobRecord]:
        """List the newest report jobs for one user.

        Args:
            user_id: Owning admin user id.
            limit: Max rows to return.

        Returns:
            list[ReportJobRecord]: Jobs ordered by creation time, newest first.

        Raises:
            ValueError: Raised when limit is not positive.
            RuntimeError: Raised when the query fails.
        """

        if limit < 1:
            raise ValueError("limit must be >= 1")

        try:
            with self._engine.connect() as connection:
                rows = connection.execute(
                    text(
                        f"SELECT {_REPORT_JOB_COLUMNS} FROM report_job "
                        "WHERE user_id = :user_id "
                        "ORDER BY created_at_utc DESC, report_job_id DESC "
                        "LIMIT :limit"
                    ),
                    {"user_id": user_id.strip(), "limit": limit},
                ).mappings().all()
        except SQLAlchemyError as error:
            raise RuntimeError("failed to list report jobs") from error

        return [self._map_report_job_record(row) for row in rows]

    def db_report_job_delete_finished_before(self, cutoff_utc: str) -> int:
        """Delete finished jobs whose completion time is older than the cutoff.

        Args:
            cutoff_utc: ISO-8601 UTC cutoff timestamp.

        Returns:
            int: Number of deleted jobs.

        Raises:
            RuntimeError: Raised when the delete fails.
        """

        try:
            with self._engine.begin() as connection:
                result = connection.execute(
                    text(
                        "DELETE FROM report_job "
                        "WHERE status IN (:completed_status, :failed_status) "
                        "AND completed_at_utc < :cutoff_utc"
                    ),
                    {
                        "completed_status": ReportJobStatus.COMPLETED.value,
                        "failed_status": ReportJobStatus.FAILED.value,
                        "cutoff_utc": cutoff_utc,
                    },
                )
                return int(result.rowcount or 0)
        except SQLAlchemyError as error:
            raise RuntimeError("failed to delete finished report jobs") from error

    def _db_update_job(
        self,
        job_id: str,
        assignments: str,
        parameters: dict[str, Any],
        action_label: str,
    ) -> None:
        """Apply one status update and fail when the job does not exist.

        Raises:
            LookupError: Raised when no job matches `job_id`.
            RuntimeError: Raised when the update fails.
        """

        try:
            with self._engine.begin() as connection:
                result = connection.execute(
                    text(f"UPDATE report_job SET {assignments} WHERE report_job_id = :report_job_id"),
                    {**parameters, "report_job_id": job_id.strip()},
                )
        except SQLAlchemyError as error:
            raise RuntimeError(f"failed to {action_label}") from error

        if not result.rowcount:
            raise LookupError(f"report job not found: {job_id}")

    def _map_report_job_record(self, row: Any) -> ReportJobRecord:
        result_json = row["result_json"]
        return ReportJobRecord(
            job_id=row["report_job_id"],
            user_id=row["user_id"],
            status=row["status"],
            filters=json.loads(row["filters_json"]),
            result=json.loads(result_json) if result_json is not None else None,
            error_message=row["error_message"],
            created_at_utc=row["created_at_utc"],
            started_at_utc=row["started_at_utc"],
            completed_at_utc=row["completed_at_utc"],
        )

    def _validate_non_empty_text(self, value: str, field_name: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError(f"{field_name} must not be blank")
        return stripped_value
