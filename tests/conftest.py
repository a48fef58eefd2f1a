"""Shared fixtures for storefront-backed report tests."""

from __future__ import annotations

import pytest
from sqlalchemy import Engine, text

from report_jobs.db import db_create_engine, db_ensure_schema

_STOREFRONT_SCHEMA_STATEMENTS = (
    "CREATE TABLE orders ("
    "order_id TEXT PRIMARY KEY, "
    "total REAL NOT NULL, "
    "status TEXT NOT NULL, "
    "created_at_utc TEXT NOT NULL"
    ")",
    "CREATE TABLE order_items (order_id TEXT NOT NULL, product_id TEXT NOT NULL)",
)

STOREFRONT_ORDERS = (
    ("o-1", 100.0, "pending", "2026-01-05T10:00:00+00:00", ("ring-1",)),
    ("o-2", 250.0, "shipped", "2026-01-10T10:00:00+00:00", ("ring-1", "necklace-1")),
    ("o-3", 50.0, "pending", "2026-02-01T10:00:00+00:00", ("necklace-1",)),
    ("o-4", 400.0, "delivered", "2026-02-15T10:00:00+00:00", ("bracelet-1",)),
)


@pytest.fixture()
def storefront_engine() -> Engine:
    """Create an in-memory database with report jobs and seeded storefront orders.

    Returns:
        Engine: Engine holding `report_job`, `orders` and `order_items` tables.
    """

    engine = db_create_engine("sqlite://")
    db_ensure_schema(engine)
    with engine.begin() as connection:
        for statement in _STOREFRONT_SCHEMA_STATEMENTS:
            connection.execute(text(statement))
        for order_id, total, status, created_at_utc, product_ids in STOREFRONT_ORDERS:
            connection.execute(
                text(
                    "INSERT INTO orders (order_id, total, status, created_at_utc) "
                    "VALUES (:order_id, :total, :status, :created_at_utc)"
                ),
                {"order_id": order_id, "total": total, "status": status, "created_at_utc": created_at_utc},
            )
            for product_id in product_ids:
                connection.execute(
                    text("INSERT INTO order_items (order_id, product_id) VALUES (:order_id, :product_id)"),
                    {"order_id": order_id, "product_id": product_id},
                )
    return engine
