"""Typed domain models shared across runtime layers.

This module provides the report filter, metrics and job contracts used by the
report backend, its HTTP API and the polling client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Final, Mapping

ORDER_STATUSES: Final[tuple[str, ...]] = (
    "pending",
    "confirmed",
    "processing",
    "shipped",
    "delivered",
    "cancelled",
)

_TRUE_FLAG_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes"})


@dataclass(frozen=True)
class HealthStatus:
    """Health response contract used by health-check surfaces.

    Attributes:
        status: Overall status text for service health.
        detail: Additional message suitable for operational diagnostics.
    """

    status: str
    detail: str


class ReportJobStatus(str, Enum):
    """Lifecycle statuses persisted for server-side report jobs."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class ReportFilters:
    """Order filters applied to one report.

    Attributes:
        date_from: Inclusive lower bound on order creation time (UTC).
        date_to: Inclusive upper bound on order creation time (UTC).
        statuses: Order statuses to include; empty means all.
        product_id: Optional product that must appear in the order.
        force_async: Whether to process as a background job regardless of size.
    """

    date_from: datetime | None = None
    date_to: datetime | None = None
    statuses: tuple[str, ...] = ()
    product_id: str | None = None
    force_async: bool = False

    def filters_to_query_parameters(self) -> dict[str, str]:
        """Serialize filters to the report endpoint query parameter names.

        Returns:
            dict[str, str]: Query parameters; unset filters are omitted.
        """

        parameters: dict[str, str] = {}
        if self.date_from is not None:
            parameters["dateFrom"] = domain_format_utc(self.date_from)
        if self.date_to is not None:
            parameters["dateTo"] = domain_format_utc(self.date_to)
        if self.statuses:
            parameters["status"] = ",".join(self.statuses)
        if self.product_id:
            parameters["product_id"] = self.product_id
        if self.force_async:
            parameters["async"] = "true"
        return parameters

    def filters_to_payload(self) -> dict[str, Any]:
        """Return a JSON-serializable representation for persistence."""

        return {
            "dateFrom": domain_format_utc(self.date_from) if self.date_from else None,
            "dateTo": domain_format_utc(self.date_to) if self.date_to else None,
            "status": list(self.statuses),
            "product_id": self.product_id,
        }

    @classmethod
    def filters_from_query_parameters(cls, parameters: Mapping[str, str | None]) -> "ReportFilters":
        """Parse filters from report endpoint query parameters.

        Args:
            parameters: Raw query parameters.

        Returns:
            ReportFilters: Parsed filters.

        Raises:
            ValueError: Raised for malformed dates or unknown order statuses.
        """

        raw_statuses = (parameters.get("status") or "").strip()
        statuses = tuple(value.strip() for value in raw_statuses.split(",") if value.strip())
        unknown_statuses = sorted(set(statuses) - set(ORDER_STATUSES))
        if unknown_statuses:
            raise ValueError(f"unknown order status: {', '.join(unknown_statuses)}")

        product_id = (parameters.get("product_id") or "").strip() or None
        force_async = (parameters.get("async") or "").strip().lower() in _TRUE_FLAG_VALUES
        return cls(
            date_from=domain_parse_optional_datetime(parameters.get("dateFrom"), "dateFrom"),
            date_to=domain_parse_optional_datetime(parameters.get("dateTo"), "dateTo"),
            statuses=statuses,
            product_id=product_id,
            force_async=force_async,
        )

    @classmethod
    def filters_from_payload(cls, payload: Mapping[str, Any]) -> "ReportFilters":
        """Rebuild filters from their persisted representation."""

        return cls(
            date_from=domain_parse_optional_datetime(payload.get("dateFrom"), "dateFrom"),
            date_to=domain_parse_optional_datetime(payload.get("dateTo"), "dateTo"),
            statuses=tuple(str(value) for value in payload.get("status") or ()),
            product_id=payload.get("product_id") or None,
        )


@dataclass(frozen=True)
class OrderStatusBreakdown:
    """Per-status order count and revenue."""

    status: str
    count: int
    total_revenue: float


@dataclass(frozen=True)
class ReportMetrics:
    """Aggregated order metrics for one report.

    Attributes:
        total_orders: Number of matching orders.
        total_revenue: Sum of matching order totals.
        average_order_value: Revenue divided by order count, 0 when empty.
        status_breakdown: Per-status counts in first-seen order.
    """

    total_orders: int
    total_revenue: float
    average_order_value: float
    status_breakdown: tuple[OrderStatusBreakdown, ...] = field(default_factory=tuple)

    def metrics_to_payload(self) -> dict[str, Any]:
        """Return the JSON payload served by the report endpoints."""

        return {
            "total_orders": self.total_orders,
            "total_revenue": self.total_revenue,
            "average_order_value": self.average_order_value,
            "status_breakdown": [
                {"status": item.status, "count": item.count, "total_revenue": item.total_revenue}
                for item in self.status_breakdown
            ],
        }


@dataclass(frozen=True)
class OrderSummary:
    """Order fields needed for report metrics."""

    order_id: str
    total: float
    status: str
    created_at_utc: str


@dataclass(frozen=True)
class ReportJobRecord:
    """Persisted server-side report job.

    Timestamps are ISO-8601 UTC strings.
    """

    job_id: str
    user_id: str
    status: str
    filters: dict[str, Any]
    result: dict[str, Any] | None
    error_message: str | None
    created_at_utc: str
    started_at_utc: str | None
    completed_at_utc: str | None

    def record_to_payload(self) -> dict[str, Any]:
        return {
            "id": self.job_id,
            "user_id": self.user_id,
            "status": self.status,
            "filters": self.filters,
            "result": self.result,
            "error_message": self.error_message,
            "created_at": self.created_at_utc,
            "started_at": self.started_at_utc,
            "completed_at": self.completed_at_utc,
        }


def domain_utc_now() -> datetime:
    return datetime.now(timezone.utc)


def domain_format_utc(value: datetime) -> str:
    """Format a datetime as ISO-8601 in UTC; naive values are treated as UTC.

    Args:
        value: Datetime value.

    Returns:
        str: ISO-8601 string with `+00:00` offset.
    """

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def domain_parse_optional_datetime(value: str | None, field_name: str) -> datetime | None:
    """Parse an optional ISO-8601 date or datetime string into aware UTC.

    Args:
        value: Candidate value; blank or None returns None.
        field_name: Field name used in error messages.

    Returns:
        datetime | None: Parsed UTC datetime.

    Raises:
        ValueError: Raised when the value is not ISO-8601.
    """

    normalized_value = (value or "").strip()
    if not normalized_value:
        return None
    if normalized_value.endswith("Z"):
        normalized_value = f"{normalized_value[:-1]}+00:00"
    try:
        parsed_value = datetime.fromisoformat(normalized_value)
    except ValueError as error:
        raise ValueError(f"{field_name} must be an ISO-8601 date") from error
    if parsed_value.tzinfo is None:
        parsed_value = parsed_value.replace(tzinfo=timezone.utc)
    return parsed_value.astimezone(timezone.utc)
