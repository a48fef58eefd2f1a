"""Database layer package for all SQL and persistence boundaries."""

from .health import SQLAlchemyDatabaseHealthService
from .interfaces import DatabaseHealthPort, OrderReadRepositoryPort, ReportJobRepositoryPort
from .orders import SQLAlchemyOrderReadRepository
from .report_jobs import SQLAlchemyReportJobRepository
from .session import db_build_migration_config, db_create_engine, db_ensure_schema

__all__ = [
	"DatabaseHealthPort",
	"OrderReadRepositoryPort",
	"ReportJobRepositoryPort",
	"SQLAlchemyDatabaseHealthService",
	"SQLAlchemyOrderReadRepository",
	"SQLAlchemyReportJobRepository",
	"db_build_migration_config",
	"db_create_engine",
	"db_ensure_schema",
]
