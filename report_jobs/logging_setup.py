"""Standard-library logging configuration for runtime entrypoints."""

from logging.config import dictConfig


def logging_configure(level: str = "INFO") -> None:
    """Configure root logging once at process startup.

    Args:
        level: Root log level name.

    Returns:
        None: Logging is configured as a side effect.
    """

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "stream": "ext://sys.stderr",
                },
            },
            "root": {"level": level.upper(), "handlers": ["console"]},
            "loggers": {
                "httpx": {"level": "WARNING"},
                "uvicorn.access": {"level": "WARNING"},
            },
        }
    )
