"""FastAPI application factory for the admin report service."""

from fastapi import FastAPI

from report_jobs.config import AppSettings
from report_jobs.db import DatabaseHealthPort
from report_jobs.reports import ReportService

from .routers import api_create_health_router, api_create_reports_router


def create_api_application(
    settings: AppSettings,
    db_health_service: DatabaseHealthPort,
    report_service: ReportService,
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings used for runtime metadata.
        db_health_service: Database health service used by health endpoints.
        report_service: Report generation and job service.

    Returns:
        FastAPI: Framework application instance.
    """

    application = FastAPI(title="Admin Report Jobs")

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, str]:
        return {
            "service": "report-jobs",
            "status": "ready",
            "environment": settings.environment_name,
        }

    application.include_router(api_create_health_router(db_health_service=db_health_service))
    application.include_router(api_create_reports_router(settings=settings, report_service=report_service))

    return application
