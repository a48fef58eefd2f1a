"""Pure order metrics calculation for admin reports."""

from __future__ import annotations

from typing import Iterable

from report_jobs.domain import OrderStatusBreakdown, OrderSummary, ReportMetrics


def reports_calculate_metrics(orders: Iterable[OrderSummary]) -> ReportMetrics:
    """Aggregate order totals into report metrics.

    Status breakdown entries keep the order in which each status first appears.

    Args:
        orders: Orders already filtered for the report.

    Returns:
        ReportMetrics: Totals, average order value and per-status breakdown.
    """

    total_orders = 0
    total_revenue = 0.0
    breakdown_counts: dict[str, int] = {}
    breakdown_revenue: dict[str, float] = {}

    for order in orders:
        total_orders += 1
        total_revenue += order.total
        breakdown_counts[order.status] = breakdown_counts.get(order.status, 0) + 1
        breakdown_revenue[order.status] = breakdown_revenue.get(order.status, 0.0) + order.total

    average_order_value = total_revenue / total_orders if total_orders > 0 else 0.0
    return ReportMetrics(
        total_orders=total_orders,
        total_revenue=total_revenue,
        average_order_value=average_order_value,
        status_breakdown=tuple(
            OrderStatusBreakdown(status=status, count=count, total_revenue=breakdown_revenue[status])
            for status, count in breakdown_counts.items()
        ),
    )
