"""Tests for report filter parsing and serialization."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from report_jobs.domain import ReportFilters, domain_format_utc, domain_parse_optional_datetime


def test_domain_filters_parse_query_parameters() -> None:
    """Parse dates, comma-separated statuses, product and async flag.

    Returns:
        None: Assertions validate query parsing.

    Raises:
        AssertionError: Raised when any filter is misparsed.
    """

    filters = ReportFilters.filters_from_query_parameters(
        {
            "dateFrom": "2026-01-01",
            "dateTo": "2026-01-31T23:59:59Z",
            "status": "pending, shipped,",
            "product_id": " ring-1 ",
            "async": "TRUE",
        }
    )

    assert filters == ReportFilters(
        date_from=datetime(2026, 1, 1, tzinfo=timezone.utc),
        date_to=datetime(2026, 1, 31, 23, 59, 59, tzinfo=timezone.utc),
        statuses=("pending", "shipped"),
        product_id="ring-1",
        force_async=True,
    )


def test_domain_filters_round_trip_through_query_parameters() -> None:
    """Serialize filters to the names the report endpoint reads.

    Returns:
        None: Assertions validate query serialization.

    Raises:
        AssertionError: Raised when parameter names or values differ.
    """

    filters = ReportFilters(
        date_from=datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc),
        statuses=("delivered", "cancelled"),
        force_async=True,
    )

    assert filters.filters_to_query_parameters() == {
        "dateFrom": "2026-03-01T12:00:00+00:00",
        "status": "delivered,cancelled",
        "async": "true",
    }
    assert ReportFilters().filters_to_query_parameters() == {}


def test_domain_filters_payload_excludes_async_flag() -> None:
    """Persist filters without the transport-only async flag.

    Returns:
        None: Assertions validate persisted payload.

    Raises:
        AssertionError: Raised when payload shape differs.
    """

    filters = ReportFilters(statuses=("pending",), product_id="ring-1", force_async=True)

    payload = filters.filters_to_payload()

    assert payload == {"dateFrom": None, "dateTo": None, "status": ["pending"], "product_id": "ring-1"}
    assert ReportFilters.filters_from_payload(payload) == ReportFilters(statuses=("pending",), product_id="ring-1")


@pytest.mark.parametrize(
    "parameters",
    [{"status": "pending,teleported"}, {"dateFrom": "01/02/2026"}, {"dateTo": "tomorrow"}],
)
def test_domain_filters_reject_invalid_query_parameters(parameters: dict[str, str]) -> None:
    """Reject unknown statuses and non-ISO dates.

    Args:
        parameters: Invalid query parameters.

    Returns:
        None: Assertions validate filter validation.

    Raises:
        AssertionError: Raised when invalid input is accepted.
    """

    with pytest.raises(ValueError):
        ReportFilters.filters_from_query_parameters(parameters)


def test_domain_datetime_helpers_normalize_to_utc() -> None:
    """Normalize naive and offset datetimes to UTC.

    Returns:
        None: Assertions validate datetime helpers.

    Raises:
        AssertionError: Raised when normalization is wrong.
    """

    assert domain_format_utc(datetime(2026, 1, 1, 8, 30)) == "2026-01-01T08:30:00+00:00"
    assert domain_parse_optional_datetime("2026-01-01T10:00:00+02:00", "dateFrom") == datetime(
        2026, 1, 1, 8, 0, tzinfo=timezone.utc
    )
    assert domain_parse_optional_datetime("  ", "dateFrom") is None
