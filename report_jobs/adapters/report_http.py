"""HTTP transport for the admin report job endpoints."""

from __future__ import annotations

import json
from typing import Any, Final
from urllib.parse import quote

import httpx

from report_jobs.polling import (
    JobHandle,
    JobRequest,
    JobTransportConnectionError,
    JobTransportPort,
    JobTransportProtocolError,
    JobTransportTimeoutError,
    StatusReport,
    SubmissionAccepted,
    SubmissionCompleted,
    SubmissionOutcome,
    SubmissionRejected,
)


class HttpReportJobTransport(JobTransportPort):
    """Transport for `GET /api/admin/reports` submission and `/{jobId}` status flow.

    One pooled `httpx.AsyncClient` is reused for submission and every status
    check. Status bodies are read regardless of HTTP status code because the
    backend answers `202` while a job is pending and `500` for a failed job.
    """

    _USER_AGENT: Final[str] = "report-jobs/1.0 (Python/httpx)"
    _REPORTS_PATH: Final[str] = "/api/admin/reports"
    _ACCEPTED_STATUS_CODE: Final[int] = 202

    def __init__(
        self,
        base_url: str,
        api_token: str | None = None,
        request_timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize report job transport.

        Args:
            base_url: Base URL of the report backend.
            api_token: Optional bearer token sent with every request.
            request_timeout_seconds: HTTP request timeout in seconds.
            client: Optional preconfigured async client; the transport then does not own it.

        Raises:
            ValueError: Raised when config values are invalid.
        """

        normalized_base_url = base_url.strip()
        if not normalized_base_url:
            raise ValueError("base_url must not be blank")
        if request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")

        headers = {"User-Agent": self._USER_AGENT, "Accept": "application/json"}
        normalized_api_token = (api_token or "").strip()
        if normalized_api_token:
            headers["Authorization"] = f"Bearer {normalized_api_token}"

        self._request_headers = headers
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=normalized_base_url.rstrip("/"),
            timeout=request_timeout_seconds,
        )

    async def __aenter__(self) -> "HttpReportJobTransport":
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying client when this transport created it."""

        if self._owns_client:
            await self._client.aclose()

    async def transport_submit(self, request: JobRequest) -> SubmissionOutcome:
        """Submit report filters and classify the immediate answer.

        Args:
            request: Report filter query parameters.

        Returns:
            SubmissionOutcome: Completed for 2xx, accepted for 202, rejected otherwise.

        Raises:
            JobTransportConnectionError: Raised for network failures.
            JobTransportTimeoutError: Raised when the request times out.
            JobTransportProtocolError: Raised for malformed response bodies.
        """

        response = await self._transport_get(self._REPORTS_PATH, query_parameters=dict(request.parameters))
        body = self._transport_parse_json(response)

        if response.status_code == self._ACCEPTED_STATUS_CODE:
            if not isinstance(body, dict):
                raise JobTransportProtocolError("accepted response body must be a JSON object", response.status_code)
            job_id = str(body.get("jobId") or "").strip()
            if not job_id:
                raise JobTransportProtocolError("accepted response missing jobId", response.status_code)
            initial_status = str(body.get("status") or "processing")
            return SubmissionAccepted(handle=JobHandle(job_id=job_id), initial_status=initial_status)

        if response.is_success:
            if isinstance(body, dict) and "data" in body:
                return SubmissionCompleted(result=body["data"])
            return SubmissionCompleted(result=body)

        return SubmissionRejected(
            error_message=self._transport_extract_error(body, fallback=f"report request failed with HTTP {response.status_code}")
        )

    async def transport_fetch_status(self, handle: JobHandle) -> StatusReport:
        """Fetch one job status answer.

        Args:
            handle: Accepted job handle.

        Returns:
            StatusReport: Parsed status report.

        Raises:
            JobTransportConnectionError: Raised for network failures.
            JobTransportTimeoutError: Raised when the request times out.
            JobTransportProtocolError: Raised when the body carries no status.
        """

        status_path = f"{self._REPORTS_PATH}/{quote(handle.job_id, safe='')}"
        response = await self._transport_get(status_path, query_parameters=None)
        body = self._transport_parse_json(response)
        if not isinstance(body, dict) or not str(body.get("status") or "").strip():
            raise JobTransportProtocolError(
                self._transport_extract_error(body, fallback="status response missing status field"),
                response.status_code,
            )

        status_value = str(body["status"]).strip()
        error_value = body.get("error")
        return StatusReport(
            status=status_value,
            data=body.get("data"),
            error=str(error_value) if error_value is not None else None,
        )

    async def _transport_get(self, path: str, query_parameters: dict[str, str] | None) -> httpx.Response:
        try:
            return await self._client.get(path, params=query_parameters, headers=self._request_headers)
        except httpx.TimeoutException as error:
            raise JobTransportTimeoutError("report transport request timed out") from error
        except httpx.TransportError as error:
            raise JobTransportConnectionError(f"report transport request failed: {error}") from error

    def _transport_parse_json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as error:
            raise JobTransportProtocolError(
                f"report backend returned a non-JSON body with HTTP {response.status_code}",
                response.status_code,
            ) from error

    def _transport_extract_error(self, body: Any, fallback: str) -> str:
        if isinstance(body, dict):
            error_value = body.get("error") or body.get("message")
            if error_value:
                return str(error_value)
        return fallback
