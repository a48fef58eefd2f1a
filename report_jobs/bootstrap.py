"""Application bootstrap wiring for startup validation and dependency assembly."""

from fastapi import FastAPI
from sqlalchemy import Engine

from report_jobs.adapters import HttpReportJobTransport
from report_jobs.api import create_api_application
from report_jobs.config import AppSettings, config_load_settings
from report_jobs.db import (
    SQLAlchemyDatabaseHealthService,
    SQLAlchemyOrderReadRepository,
    SQLAlchemyReportJobRepository,
    db_create_engine,
    db_ensure_schema,
)
from report_jobs.polling import AsyncJobPoller
from report_jobs.reports import LoggingReportNotifier, ReportService


def _bootstrap_build_report_service(settings: AppSettings) -> tuple[Engine, ReportService]:
    """Create the engine, migrate the schema and assemble the report service.

    Args:
        settings: Resolved runtime settings.

    Returns:
        tuple[Engine, ReportService]: Shared engine and report service built on it.

    Raises:
        RuntimeError: Raised when schema migration fails.
    """

    engine = db_create_engine(database_url=settings.database_url)
    db_ensure_schema(engine)
    report_service = ReportService(
        order_repository=SQLAlchemyOrderReadRepository(engine=engine),
        job_repository=SQLAlchemyReportJobRepository(engine=engine),
        async_threshold=settings.report_async_threshold,
        notifier=LoggingReportNotifier(),
    )
    return engine, report_service


def bootstrap_create_report_service(settings: AppSettings | None = None) -> ReportService:
    """Build the report service over the configured database.

    Args:
        settings: Optional preloaded settings.

    Returns:
        ReportService: Report service with schema migrated.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    _, report_service = _bootstrap_build_report_service(settings or config_load_settings())
    return report_service


def bootstrap_create_application(settings: AppSettings | None = None) -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    Args:
        settings: Optional preloaded settings.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    engine, report_service = _bootstrap_build_report_service(resolved_settings)
    return create_api_application(
        settings=resolved_settings,
        db_health_service=SQLAlchemyDatabaseHealthService(engine=engine),
        report_service=report_service,
    )


def bootstrap_create_report_transport(settings: AppSettings | None = None) -> HttpReportJobTransport:
    """Build the HTTP transport the polling client uses against the report API."""

    resolved_settings = settings or config_load_settings()
    return HttpReportJobTransport(
        base_url=resolved_settings.report_api_base_url,
        api_token=resolved_settings.report_api_token,
        request_timeout_seconds=resolved_settings.report_request_timeout_seconds,
    )


def bootstrap_create_report_poller(
    transport: HttpReportJobTransport,
    settings: AppSettings | None = None,
) -> AsyncJobPoller:
    """Build an async job poller using configured interval and attempt bound.

    Args:
        transport: Report job transport owned by the caller.
        settings: Optional preloaded settings.

    Returns:
        AsyncJobPoller: Poller in `Idle` state.
    """

    resolved_settings = settings or config_load_settings()
    return AsyncJobPoller(
        transport=transport,
        interval_seconds=resolved_settings.report_poll_interval_seconds,
        max_poll_attempts=resolved_settings.report_poll_max_attempts,
    )
