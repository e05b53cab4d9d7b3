"""Structured logging for the pricing service.

structlog over stdlib logging, one line per event on stdout. LOG_FORMAT picks
the renderer: ``json`` in deployed environments, ``console`` while developing.
Anything bound with structlog.contextvars (the middleware binds request_id)
rides along on every event of that request, and every event is stamped with
the service name so shared log sinks can tell us apart.
"""

import logging
import logging.config
import sys
from datetime import UTC, datetime
from typing import Any, Literal

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from structlog.stdlib import BoundLogger
from structlog.typing import EventDict, Processor

SERVICE_NAME = "tripbook-pricing"


class LoggingSettings(BaseSettings):
    """LOG_* environment variables."""

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: Literal["json", "console"] = Field(default="json", alias="LOG_FORMAT")
    # SQL echo and per-request access lines are noise at INFO.
    log_sql_level: str = Field(default="WARNING", alias="LOG_SQL_LEVEL")
    log_access_level: str = Field(default="WARNING", alias="LOG_ACCESS_LEVEL")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


def _stamp(_logger: object, _method_name: str, event_dict: EventDict) -> EventDict:
    event_dict["timestamp"] = datetime.now(UTC).isoformat()
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _pre_chain() -> list[Processor]:
    # Shared by structlog events and foreign stdlib records (uvicorn, sqlalchemy).
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _stamp,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _renderer(log_format: str) -> Processor:
    if log_format == "console":
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def _stdlib_config(settings: LoggingSettings, pre_chain: list[Processor]) -> dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structured": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processor": _renderer(settings.log_format),
                "foreign_pre_chain": pre_chain,
            },
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "structured",
                "stream": sys.stdout,
            },
        },
        "loggers": {
            "": {"handlers": ["stdout"], "level": settings.log_level},
            "sqlalchemy.engine": {"level": settings.log_sql_level},
            "uvicorn.access": {"level": settings.log_access_level},
        },
    }


def configure_logging(settings: LoggingSettings) -> None:
    """Wire structlog and the root stdlib logger to the same stdout handler.

    Runs once, at import of this module.
    """
    pre_chain = _pre_chain()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.config.dictConfig(_stdlib_config(settings, pre_chain))


configure_logging(LoggingSettings())


def get_logger(name: str) -> BoundLogger:
    """Module logger. Log snake_case event names with keyword context:

        logger = get_logger(__name__)
        logger.info("stay_quoted", accommodation_id=..., nights=3)
    """
    return structlog.get_logger(name)  # type: ignore[no-any-return]
