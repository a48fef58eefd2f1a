"""Admin report API router: report generation, job status and job history."""

from __future__ import annotations

import logging
from typing import Mapping

from fastapi import APIRouter, BackgroundTasks, Header, Query, Request, status
from fastapi.responses import JSONResponse

from report_jobs.config import AppSettings
from report_jobs.domain import ReportFilters, ReportJobRecord, ReportJobStatus
from report_jobs.reports import ReportService

logger = logging.getLogger(__name__)

_BEARER_PREFIX = "bearer "
_ADMIN_ROLE = "admin"
_USER_ROLE = "user"


def api_resolve_token_identity(
    authorization: str | None,
    admin_api_tokens: Mapping[str, str],
    user_api_tokens: Mapping[str, str],
) -> tuple[str, str] | None:
    """Resolve user id and role for an `Authorization: Bearer` header.

    Args:
        authorization: Raw Authorization header value.
        admin_api_tokens: Configured admin token to user id map.
        user_api_tokens: Configured non-admin token to user id map.

    Returns:
        tuple[str, str] | None: `(user_id, role)` with role `admin` or `user`, or None
        when the header is missing or the token is unknown.
    """

    raw_value = (authorization or "").strip()
    if not raw_value.lower().startswith(_BEARER_PREFIX):
        return None
    token = raw_value[len(_BEARER_PREFIX):].strip()
    if not token:
        return None
    if token in admin_api_tokens:
        return admin_api_tokens[token], _ADMIN_ROLE
    if token in user_api_tokens:
        return user_api_tokens[token], _USER_ROLE
    return None


def api_build_job_status_response(job: ReportJobRecord) -> JSONResponse:
    """Map one persisted job to its status endpoint response.

    Args:
        job: Persisted report job.

    Returns:
        JSONResponse: `200` completed, `500` failed, `202` processing or pending, `500` otherwise.
    """

    if job.status == ReportJobStatus.COMPLETED.value:
        return JSONResponse(
            content={"status": job.status, "data": job.result, "completedAt": job.completed_at_utc},
            status_code=status.HTTP_200_OK,
        )
    if job.status == ReportJobStatus.FAILED.value:
        return JSONResponse(
            content={
                "status": job.status,
                "error": job.error_message or "Report generation failed",
                "completedAt": job.completed_at_utc,
            },
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    if job.status == ReportJobStatus.PROCESSING.value:
        return JSONResponse(
            content={
                "status": job.status,
                "startedAt": job.started_at_utc,
                "message": "Report is being generated. Please check back shortly.",
            },
            status_code=status.HTTP_202_ACCEPTED,
        )
    if job.status == ReportJobStatus.PENDING.value:
        return JSONResponse(
            content={
                "status": job.status,
                "createdAt": job.created_at_utc,
                "message": "Report job is queued and will start processing soon.",
            },
            status_code=status.HTTP_202_ACCEPTED,
        )
    return JSONResponse(
        content={"status": job.status, "message": "Unknown job status"},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def api_create_reports_router(settings: AppSettings, report_service: ReportService) -> APIRouter:
    """Create admin report router.

    Every route answers `401` for a missing or unknown bearer token and `403`
    for a token from `user_api_tokens` (signed in, not an admin).

    Args:
        settings: Runtime settings used for auth tokens and pagination limits.
        report_service: Report generation and job service.

    Returns:
        APIRouter: Router exposing `/api/admin/reports` endpoints.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")
    if report_service is None:
        raise ValueError("report_service must not be None")

    router = APIRouter(prefix="/api/admin/reports", tags=["reports"])

    def _authorize_admin(authorization: str | None) -> tuple[str | None, JSONResponse | None]:
        identity = api_resolve_token_identity(authorization, settings.admin_api_tokens, settings.user_api_tokens)
        if identity is None:
            return None, JSONResponse(content={"error": "Unauthorized"}, status_code=status.HTTP_401_UNAUTHORIZED)
        user_id, role = identity
        if role != _ADMIN_ROLE:
            return None, JSONResponse(
                content={"error": "Forbidden: Admin access required"},
                status_code=status.HTTP_403_FORBIDDEN,
            )
        return user_id, None

    @router.get("")
    def api_report_generate(
        request: Request,
        background_tasks: BackgroundTasks,
        authorization: str | None = Header(default=None),
    ) -> JSONResponse:
        """Generate a report inline or accept it as a background job.

        Query parameters: `dateFrom`, `dateTo`, `status` (comma-separated),
        `product_id`, `async`.

        Returns:
            JSONResponse: `200 {"data": metrics}` or `202 {"jobId", "status", "message"}`.
        """

        user_id, denial_response = _authorize_admin(authorization)
        if denial_response is not None:
            return denial_response

        try:
            filters = ReportFilters.filters_from_query_parameters(request.query_params)
        except ValueError as error:
            return JSONResponse(content={"error": str(error)}, status_code=status.HTTP_400_BAD_REQUEST)

        try:
            generation_result = report_service.report_generate(filters=filters, user_id=user_id)
        except RuntimeError as error:
            logger.exception("report generation failed")
            return JSONResponse(content={"error": str(error)}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

        if generation_result.kind == "async" and generation_result.job_id is not None:
            background_tasks.add_task(report_service.report_process_job, generation_result.job_id)
            return JSONResponse(
                content={
                    "jobId": generation_result.job_id,
                    "status": ReportJobStatus.PROCESSING.value,
                    "message": "Report is being generated. Use the job ID to check status.",
                },
                status_code=status.HTTP_202_ACCEPTED,
            )

        metrics_payload = generation_result.metrics.metrics_to_payload() if generation_result.metrics else None
        return JSONResponse(content={"data": metrics_payload}, status_code=status.HTTP_200_OK)

    @router.get("/jobs")
    def api_report_job_list(
        limit: int = Query(default=settings.report_jobs_default_limit, ge=1),
        authorization: str | None = Header(default=None),
    ) -> JSONResponse:
        """Return the newest report jobs of the calling admin.

        Returns:
            JSONResponse: `{"jobs": [...], "total": n}`.
        """

        user_id, denial_response = _authorize_admin(authorization)
        if denial_response is not None:
            return denial_response

        bounded_limit = min(limit, settings.report_jobs_max_limit)
        try:
            jobs = report_service.report_list_jobs(user_id=user_id, limit=bounded_limit)
        except RuntimeError as error:
            logger.exception("report job listing failed")
            return JSONResponse(content={"error": str(error)}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

        payload = {"jobs": [job.record_to_payload() for job in jobs], "total": len(jobs)}
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.get("/{job_id}")
    def api_report_job_status(
        job_id: str,
        authorization: str | None = Header(default=None),
    ) -> JSONResponse:
        """Return status, and result when finished, of one report job.

        Returns:
            JSONResponse: Status payload; `404` when the job is unknown to the caller.
        """

        user_id, denial_response = _authorize_admin(authorization)
        if denial_response is not None:
            return denial_response

        try:
            job = report_service.report_get_job(job_id=job_id, user_id=user_id)
        except RuntimeError as error:
            logger.exception("report job lookup failed job_id=%s", job_id)
            return JSONResponse(content={"error": str(error)}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

        if job is None:
            return JSONResponse(content={"error": "Report job not found"}, status_code=status.HTTP_404_NOT_FOUND)
        return api_build_job_status_response(job)

    return router
