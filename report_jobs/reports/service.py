"""Report generation service with synchronous and background-job paths."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from report_jobs.db import OrderReadRepositoryPort, ReportJobRepositoryPort
from report_jobs.domain import (
    ReportFilters,
    ReportJobRecord,
    ReportMetrics,
    domain_format_utc,
    domain_utc_now,
)

from .interfaces import ReportNotificationPort
from .metrics import reports_calculate_metrics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportGenerationResult:
    """Outcome of one report request.

    Attributes:
        kind: `sync` when metrics were computed inline, `async` when a job was created.
        metrics: Computed metrics for the sync path.
        job_id: Created job id for the async path.
    """

    kind: str
    metrics: ReportMetrics | None = None
    job_id: str | None = None


class ReportService:
    """Generate order reports inline or as background jobs.

    Reports whose matching order count exceeds `async_threshold`, or that
    request it explicitly, are persisted as `pending` jobs. The caller is
    responsible for scheduling `report_process_job` for the returned job id.
    """

    def __init__(
        self,
        order_repository: OrderReadRepositoryPort,
        job_repository: ReportJobRepositoryPort,
        async_threshold: int = 1000,
        notifier: ReportNotificationPort | None = None,
    ):
        """Initialize report service dependencies.

        Args:
            order_repository: Read-only order query service.
            job_repository: Report job persistence service.
            async_threshold: Order count above which reports run as background jobs.
            notifier: Optional report-ready notifier called after a job completes.

        Raises:
            ValueError: Raised when dependencies or config values are invalid.
        """

        if order_repository is None:
            raise ValueError("order_repository must not be None")
        if job_repository is None:
            raise ValueError("job_repository must not be None")
        if async_threshold < 0:
            raise ValueError("async_threshold must be >= 0")

        self._order_repository = order_repository
        self._job_repository = job_repository
        self._async_threshold = async_threshold
        self._notifier = notifier

    def report_generate(self, filters: ReportFilters, user_id: str) -> ReportGenerationResult:
        """Generate metrics inline or create a background job.

        Args:
            filters: Report filters.
            user_id: Requesting admin user id.

        Returns:
            ReportGenerationResult: Sync metrics or async job id.

        Raises:
            RuntimeError: Raised when persistence queries fail.
        """

        order_count = self._order_repository.db_order_count(filters)
        if filters.force_async or order_count > self._async_threshold:
            job = self._job_repository.db_report_job_create(user_id=user_id, filters=filters.filters_to_payload())
            logger.info("report job created job_id=%s order_count=%s", job.job_id, order_count)
            return ReportGenerationResult(kind="async", job_id=job.job_id)

        metrics = reports_calculate_metrics(self._order_repository.db_order_list(filters))
        return ReportGenerationResult(kind="sync", metrics=metrics)

    def report_process_job(self, job_id: str) -> None:
        """Run one report job to completion, recording failure on the job.

        This is the background-task entrypoint; failures are stored on the job
        and logged, not raised.

        Args:
            job_id: Pending report job id.
        """

        try:
            self._job_repository.db_report_job_mark_processing(job_id)
            job = self._job_repository.db_report_job_get(job_id)
            if job is None:
                raise LookupError("Report job not found")

            filters = ReportFilters.filters_from_payload(job.filters)
            metrics = reports_calculate_metrics(self._order_repository.db_order_list(filters))
            self._job_repository.db_report_job_mark_completed(job_id, metrics.metrics_to_payload())
            logger.info("report job completed job_id=%s total_orders=%s", job_id, metrics.total_orders)
        except Exception as error:  # pylint: disable=broad-exception-caught
            logger.exception("report job failed job_id=%s", job_id)
            self._report_record_failure(job_id=job_id, error=error)
        else:
            self._report_notify_ready(job_id=job_id, user_id=job.user_id)

    def report_get_job(self, job_id: str, user_id: str) -> ReportJobRecord | None:
        """Return one job owned by `user_id`, or None."""

        return self._job_repository.db_report_job_get(job_id, user_id=user_id)

    def report_list_jobs(self, user_id: str, limit: int = 20) -> list[ReportJobRecord]:
        """Return the newest jobs owned by `user_id`."""

        return self._job_repository.db_report_job_list(user_id=user_id, limit=limit)

    def report_cleanup_old_jobs(self, days_old: int = 30) -> int:
        """Delete completed and failed jobs finished more than `days_old` days ago.

        Args:
            days_old: Retention window in days.

        Returns:
            int: Number of deleted jobs.

        Raises:
            ValueError: Raised when days_old is negative.
        """

        if days_old < 0:
            raise ValueError("days_old must be >= 0")
        cutoff_utc = domain_format_utc(domain_utc_now() - timedelta(days=days_old))
        deleted_count = self._job_repository.db_report_job_delete_finished_before(cutoff_utc)
        logger.info("deleted %s finished report jobs older than %s days", deleted_count, days_old)
        return deleted_count

    def _report_notify_ready(self, job_id: str, user_id: str) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier.report_notify_ready(job_id, user_id)
        except Exception:  # pylint: disable=broad-exception-caught
            # The job stays completed when delivery fails.
            logger.exception("failed to send report ready notification job_id=%s", job_id)

    def _report_record_failure(self, job_id: str, error: Exception) -> None:
        error_message = str(error) or type(error).__name__
        try:
            self._job_repository.db_report_job_mark_failed(job_id, error_message)
        except (LookupError, RuntimeError):
            logger.exception("could not record failure for report job job_id=%s", job_id)
