"""Read-only order queries over the storefront `orders` and `order_items` tables."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Engine, TextClause, bindparam, text
from sqlalchemy.exc import SQLAlchemyError

from report_jobs.domain import OrderSummary, ReportFilters, domain_format_utc

from .interfaces import OrderReadRepositoryPort


class SQLAlchemyOrderReadRepository(OrderReadRepositoryPort):
    """SQLAlchemy-backed order reader applying report filters in SQL.

    Order creation times are expected as ISO-8601 UTC text, matching the
    format produced by `domain_format_utc`.
    """

    def __init__(self, engine: Engine):
        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

    def db_order_count(self, filters: ReportFilters) -> int:
        """Count orders matching report filters.

        Args:
            filters: Report filters.

        Returns:
            int: Matching order count.

        Raises:
            RuntimeError: Raised when the query fails.
        """

        statement, parameters = self._db_build_filtered_statement(
            select_clause="SELECT COUNT(*) AS order_count FROM orders o",
            filters=filters,
        )
        try:
            with self._engine.connect() as connection:
                row = connection.execute(statement, parameters).mappings().one()
        except SQLAlchemyError as error:
            raise RuntimeError("failed to count orders") from error
        return int(row["order_count"] or 0)

    def db_order_list(self, filters: ReportFilters) -> list[OrderSummary]:
        """Return orders matching report filters ordered by creation time.

        Args:
            filters: Report filters.

        Returns:
            list[OrderSummary]: Matching orders.

        Raises:
            RuntimeError: Raised when the query fails.
        """

        statement, parameters = self._db_build_filtered_statement(
            select_clause="SELECT o.order_id, o.total, o.status, o.created_at_utc FROM orders o",
            filters=filters,
            order_clause=" ORDER BY o.created_at_utc ASC, o.order_id ASC",
        )
        try:
            with self._engine.connect() as connection:
                rows = connection.execute(statement, parameters).mappings().all()
        except SQLAlchemyError as error:
            raise RuntimeError("failed to list orders") from error

        return [
            OrderSummary(
                order_id=str(row["order_id"]),
                total=float(row["total"] or 0),
                status=str(row["status"]),
                created_at_utc=str(row["created_at_utc"]),
            )
            for row in rows
        ]

    def _db_build_filtered_statement(
        self,
        select_clause: str,
        filters: ReportFilters,
        order_clause: str = "",
    ) -> tuple[TextClause, dict[str, Any]]:
        """Build a filtered order query with bound parameters.

        Returns:
            tuple[TextClause, dict[str, Any]]: Statement and its parameters.
        """

        conditions: list[str] = []
        parameters: dict[str, Any] = {}

        if filters.date_from is not None:
            conditions.append("o.created_at_utc >= :date_from")
            parameters["date_from"] = domain_format_utc(filters.date_from)
        if filters.date_to is not None:
            conditions.append("o.created_at_utc <= :date_to")
            parameters["date_to"] = domain_format_utc(filters.date_to)
        if filters.statuses:
            conditions.append("o.status IN :statuses")
            parameters["statuses"] = list(filters.statuses)
        if filters.product_id:
            conditions.append(
                "EXISTS (SELECT 1 FROM order_items oi WHERE oi.order_id = o.order_id AND oi.product_id = :product_id)"
            )
            parameters["product_id"] = filters.product_id

        where_clause = f" WHERE {' AND '.join(conditions)}" if conditions else ""
        statement = text(f"{select_clause}{where_clause}{order_clause}")
        if filters.statuses:
            statement = statement.bindparams(bindparam("statuses", expanding=True))
        return statement, parameters
