"""Domain models used across application layer boundaries."""

from .models import (
    ORDER_STATUSES,
    HealthStatus,
    OrderStatusBreakdown,
    OrderSummary,
    ReportFilters,
    ReportJobRecord,
    ReportJobStatus,
    ReportMetrics,
    domain_format_utc,
    domain_parse_optional_datetime,
    domain_utc_now,
)

__all__ = [
    "HealthStatus",
    "ORDER_STATUSES",
    "OrderStatusBreakdown",
    "OrderSummary",
    "ReportFilters",
    "ReportJobRecord",
    "ReportJobStatus",
    "ReportMetrics",
    "domain_format_utc",
    "domain_parse_optional_datetime",
    "domain_utc_now",
]
