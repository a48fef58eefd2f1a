"""Report layer package for order metrics and report job orchestration."""

from .interfaces import ReportNotificationPort
from .metrics import reports_calculate_metrics
from .notifications import LoggingReportNotifier
from .service import ReportGenerationResult, ReportService

__all__ = [
    "LoggingReportNotifier",
    "ReportGenerationResult",
    "ReportNotificationPort",
    "ReportService",
    "reports_calculate_metrics",
]
