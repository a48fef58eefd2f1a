"""Report-ready notification implementations."""

import logging

from .interfaces import ReportNotificationPort

logger = logging.getLogger(__name__)


class LoggingReportNotifier(ReportNotificationPort):
    """Notifier that records report-ready events in the application log."""

    def report_notify_ready(self, job_id: str, user_id: str) -> None:
        logger.info("report ready job_id=%s user_id=%s", job_id, user_id)
