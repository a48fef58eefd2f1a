"""Regression tests for the HTTP report job transport."""

from __future__ import annotations

import httpx
import pytest

from report_jobs.adapters import HttpReportJobTransport
from report_jobs.polling import (
    JobHandle,
    JobRequest,
    JobTransportConnectionError,
    JobTransportProtocolError,
    JobTransportTimeoutError,
    StatusReport,
    SubmissionAccepted,
    SubmissionCompleted,
    SubmissionRejected,
)

_BASE_URL = "https://shop.example.test"


def _build_transport(handler, api_token: str | None = "admin-token") -> HttpReportJobTransport:
    """Build transport whose client is served by a mock handler.

    Args:
        handler: Callable receiving `httpx.Request` and returning `httpx.Response`.
        api_token: Optional bearer token.

    Returns:
        HttpReportJobTransport: Transport under test.
    """

    client = httpx.AsyncClient(base_url=_BASE_URL, transport=httpx.MockTransport(handler))
    return HttpReportJobTransport(base_url=_BASE_URL, api_token=api_token, client=client)


@pytest.mark.asyncio
async def test_report_http_submit_unwraps_synchronous_data_envelope() -> None:
    """Return the `data` member of a 200 answer as the completed result.

    Returns:
        None: Assertions validate sync mapping and request shape.

    Raises:
        AssertionError: Raised when envelope, query or headers are wrong.
    """

    captured_requests: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        captured_requests.append(request)
        return httpx.Response(200, json={"data": {"totalOrders": 4, "totalRevenue": 120.5}})

    transport = _build_transport(_handler)
    outcome = await transport.transport_submit(JobRequest({"status": "pending,shipped", "product_id": "ring-1"}))

    assert outcome == SubmissionCompleted(result={"totalOrders": 4, "totalRevenue": 120.5})
    assert captured_requests[0].url.path == "/api/admin/reports"
    assert captured_requests[0].url.params["status"] == "pending,shipped"
    assert captured_requests[0].url.params["product_id"] == "ring-1"
    assert captured_requests[0].headers["Authorization"] == "Bearer admin-token"


@pytest.mark.asyncio
async def test_report_http_injected_client_headers_are_left_untouched() -> None:
    """Send auth headers per request without mutating a caller-owned client.

    Returns:
        None: Assertions validate header isolation.

    Raises:
        AssertionError: Raised when the injected client is modified or auth is missing.
    """

    captured_requests: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        captured_requests.append(request)
        return httpx.Response(202, json={"status": "processing"})

    client = httpx.AsyncClient(base_url=_BASE_URL, transport=httpx.MockTransport(_handler))
    transport = HttpReportJobTransport(base_url=_BASE_URL, api_token="admin-token", client=client)

    await transport.transport_fetch_status(JobHandle(job_id="job-1"))
    await transport.aclose()

    assert "Authorization" not in client.headers
    assert captured_requests[0].headers["Authorization"] == "Bearer admin-token"
    assert captured_requests[0].headers["User-Agent"].startswith("report-jobs/")
    assert not client.is_closed
    await client.aclose()


@pytest.mark.asyncio
async def test_report_http_submit_without_envelope_returns_whole_body() -> None:
    """Treat a 200 body without `data` as the result itself.

    Returns:
        None: Assertions validate fallback mapping.

    Raises:
        AssertionError: Raised when body is not returned as-is.
    """

    transport = _build_transport(lambda _request: httpx.Response(200, json={"totalOrders": 0}), api_token=None)

    assert await transport.transport_submit(JobRequest({})) == SubmissionCompleted(result={"totalOrders": 0})


@pytest.mark.asyncio
async def test_report_http_submit_accepted_returns_job_handle() -> None:
    """Map a 202 answer with `jobId` to an accepted submission.

    Returns:
        None: Assertions validate accepted mapping.

    Raises:
        AssertionError: Raised when handle or status is lost.
    """

    transport = _build_transport(
        lambda _request: httpx.Response(
            202,
            json={"jobId": "job-1", "status": "processing", "message": "Report is being generated."},
        )
    )

    outcome = await transport.transport_submit(JobRequest({"async": "true"}))

    assert outcome == SubmissionAccepted(handle=JobHandle(job_id="job-1"), initial_status="processing")


@pytest.mark.asyncio
async def test_report_http_submit_accepted_without_job_id_is_protocol_error() -> None:
    """Reject a 202 answer that carries no job id.

    Returns:
        None: Assertions validate protocol error mapping.

    Raises:
        AssertionError: Raised when a malformed acceptance is accepted.
    """

    transport = _build_transport(lambda _request: httpx.Response(202, json={"status": "processing"}))

    with pytest.raises(JobTransportProtocolError, match="jobId"):
        await transport.transport_submit(JobRequest({}))


@pytest.mark.asyncio
async def test_report_http_submit_error_status_is_rejected_with_backend_message() -> None:
    """Map non-2xx submission answers to a rejected outcome.

    Returns:
        None: Assertions validate rejection message extraction.

    Raises:
        AssertionError: Raised when error text is not extracted.
    """

    bad_request = _build_transport(lambda _request: httpx.Response(400, json={"error": "Invalid status filter"}))
    server_error = _build_transport(lambda _request: httpx.Response(503, json={"detail": "down"}))

    assert await bad_request.transport_submit(JobRequest({})) == SubmissionRejected(
        error_message="Invalid status filter"
    )
    assert await server_error.transport_submit(JobRequest({})) == SubmissionRejected(
        error_message="report request failed with HTTP 503"
    )


@pytest.mark.asyncio
async def test_report_http_status_reads_body_regardless_of_http_code() -> None:
    """Parse pending (202), failed (500) and completed (200) status answers.

    Returns:
        None: Assertions validate status report parsing.

    Raises:
        AssertionError: Raised when a status body is misread.
    """

    answers = {
        "/api/admin/reports/job-pending": httpx.Response(202, json={"status": "processing", "startedAt": "x"}),
        "/api/admin/reports/job-failed": httpx.Response(500, json={"status": "failed", "error": "boom"}),
        "/api/admin/reports/job-done": httpx.Response(200, json={"status": "completed", "data": {"count": 9001}}),
    }
    transport = _build_transport(lambda request: answers[request.url.path])

    assert await transport.transport_fetch_status(JobHandle(job_id="job-pending")) == StatusReport(
        status="processing"
    )
    assert await transport.transport_fetch_status(JobHandle(job_id="job-failed")) == StatusReport(
        status="failed",
        error="boom",
    )
    assert await transport.transport_fetch_status(JobHandle(job_id="job-done")) == StatusReport(
        status="completed",
        data={"count": 9001},
    )


@pytest.mark.asyncio
async def test_report_http_status_without_status_field_is_protocol_error() -> None:
    """Raise a protocol error when the status body has no status field.

    Returns:
        None: Assertions validate missing-status handling.

    Raises:
        AssertionError: Raised when a malformed body is accepted.
    """

    transport = _build_transport(lambda _request: httpx.Response(404, json={"error": "Report job not found"}))

    with pytest.raises(JobTransportProtocolError, match="Report job not found") as error_info:
        await transport.transport_fetch_status(JobHandle(job_id="job-missing"))
    assert error_info.value.status_code == 404


@pytest.mark.asyncio
async def test_report_http_non_json_body_is_protocol_error() -> None:
    """Raise a protocol error for HTML gateway pages.

    Returns:
        None: Assertions validate non-JSON handling.

    Raises:
        AssertionError: Raised when a non-JSON body is accepted.
    """

    transport = _build_transport(lambda _request: httpx.Response(502, text="<html>Bad Gateway</html>"))

    with pytest.raises(JobTransportProtocolError, match="non-JSON"):
        await transport.transport_fetch_status(JobHandle(job_id="job-1"))


@pytest.mark.asyncio
async def test_report_http_network_failures_map_to_transport_errors() -> None:
    """Map httpx timeouts and connection errors to project transport errors.

    Returns:
        None: Assertions validate error mapping.

    Raises:
        AssertionError: Raised when raw httpx errors leak.
    """

    def _timeout_handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    def _connect_handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(JobTransportTimeoutError):
        await _build_transport(_timeout_handler).transport_fetch_status(JobHandle(job_id="job-1"))
    with pytest.raises(JobTransportConnectionError, match="connection refused"):
        await _build_transport(_connect_handler).transport_submit(JobRequest({}))


@pytest.mark.parametrize(
    ("base_url", "request_timeout_seconds"),
    [("   ", 30.0), (_BASE_URL, 0.0)],
)
def test_report_http_rejects_invalid_configuration(base_url: str, request_timeout_seconds: float) -> None:
    """Reject blank base URLs and non-positive timeouts.

    Args:
        base_url: Candidate base URL.
        request_timeout_seconds: Candidate timeout.

    Returns:
        None: Assertions validate constructor guards.

    Raises:
        AssertionError: Raised when invalid config is accepted.
    """

    with pytest.raises(ValueError):
        HttpReportJobTransport(base_url=base_url, request_timeout_seconds=request_timeout_seconds)
