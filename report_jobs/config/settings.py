"""Typed runtime settings with dotenv support and startup validation."""

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Application settings for the report API runtime and the polling client.

    Environment variable names map directly to field names in uppercase.
    Example: `report_poll_interval_seconds` reads from `REPORT_POLL_INTERVAL_SECONDS`.

    Attributes:
        environment_name: Runtime environment label.
        application_host: Host interface for web server binding.
        application_port: Web server port.
        database_url: SQLAlchemy DSN for report job and order access.
        log_level: Root logging level name.
        admin_api_tokens: Bearer token to admin user id map (JSON in env).
        user_api_tokens: Bearer token to user id map for signed-in non-admin users; these get 403.
        report_async_threshold: Matching order count above which reports run as background jobs.
        report_jobs_default_limit: Default job list endpoint limit.
        report_jobs_max_limit: Maximum allowed job list endpoint limit.
        report_cleanup_days: Age in days after which finished jobs are deleted.
        report_api_base_url: Base URL the polling client submits reports to.
        report_api_token: Bearer token used by the polling client.
        report_poll_interval_seconds: Fixed wait between status checks.
        report_poll_max_attempts: Optional bound on status checks; unset polls until terminal.
        report_request_timeout_seconds: HTTP request timeout for the polling client.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment_name: str = Field(default="development")
    application_host: str = Field(default="0.0.0.0")
    application_port: int = Field(default=8000, ge=1, le=65535)
    database_url: str = Field(default="sqlite:///./report_jobs.db", min_length=1)
    log_level: str = Field(default="INFO")
    admin_api_tokens: dict[str, str] = Field(default_factory=dict)
    user_api_tokens: dict[str, str] = Field(default_factory=dict)
    report_async_threshold: int = Field(default=1000, ge=0)
    report_jobs_default_limit: int = Field(default=20, ge=1)
    report_jobs_max_limit: int = Field(default=100, ge=1)
    report_cleanup_days: int = Field(default=30, ge=1)
    report_api_base_url: str = Field(default="http://localhost:8000", min_length=1)
    report_api_token: str | None = Field(default=None)
    report_poll_interval_seconds: float = Field(default=2.0, gt=0)
    report_poll_max_attempts: int | None = Field(default=None, ge=1)
    report_request_timeout_seconds: float = Field(default=30.0, gt=0)

    @field_validator("database_url", "report_api_base_url")
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_value = value.strip().upper()
        if normalized_value not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(sorted(_LOG_LEVELS))}")
        return normalized_value

    @field_validator("admin_api_tokens", "user_api_tokens")
    @classmethod
    def _validate_api_tokens(cls, value: dict[str, str]) -> dict[str, str]:
        normalized_tokens: dict[str, str] = {}
        for token, user_id in value.items():
            normalized_token = token.strip()
            normalized_user_id = user_id.strip()
            if not normalized_token or not normalized_user_id:
                raise ValueError("api token entries must not be blank")
            normalized_tokens[normalized_token] = normalized_user_id
        return normalized_tokens

    @field_validator("report_jobs_max_limit")
    @classmethod
    def _validate_limit_bounds(cls, value: int, info) -> int:
        default_limit = info.data.get("report_jobs_default_limit", 20)
        if value < default_limit:
            raise ValueError("report_jobs_max_limit must be greater than or equal to report_jobs_default_limit")
        return value


class DatabaseUrlSettings(BaseSettings):
    """Minimal settings used by migration tooling.

    Attributes:
        database_url: SQLAlchemy DSN the migrations run against.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    database_url: str = Field(default="sqlite:///./report_jobs.db")


def config_load_settings() -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when required settings are missing or invalid.
    """

    try:
        return AppSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error


def config_load_database_url() -> str:
    """Load and validate only the database URL setting.

    Returns:
        str: Non-empty database URL for migration tooling.

    Raises:
        SettingsLoadError: Raised when database URL cannot be loaded.
    """

    try:
        database_settings = DatabaseUrlSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Database URL configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error

    database_url = database_settings.database_url.strip()
    if not database_url:
        raise SettingsLoadError("Database URL configuration validation failed. DATABASE_URL must not be blank.")
    return database_url
