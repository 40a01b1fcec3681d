"""Environment-aware logging setup.

Configuration Logic:
- Development: verbose coloured console logging
- Staging: structured console logging, optional rotating file
- Production: JSON console logging at WARNING, quiet third-party loggers
- Test: null handler at ERROR so test output stays clean
"""

import contextvars
import logging
import uuid
from typing import List

from ..config.settings import EnvironmentOption, Settings, get_settings
from .handlers import (
    create_console_handler,
    create_file_handler,
    create_null_handler,
)

correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("correlation_id")


def setup_logging_configuration() -> None:
    """Configure the root logger for the current deployment mode.

    Called once, lazily, the first time a logger is requested through
    :func:`~docvault.infrastructure.logging.get_logger`.
    """
    settings = get_settings()

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    if settings.ENVIRONMENT == EnvironmentOption.TEST:
        configure_testing_logging()
        return

    if settings.ENVIRONMENT == EnvironmentOption.PRODUCTION:
        handlers = _production_handlers(settings)
    elif settings.ENVIRONMENT == EnvironmentOption.STAGING:
        handlers = _staging_handlers(settings)
    else:
        handlers = _development_handlers(settings)

    for handler in handlers:
        if settings.LOG_CORRELATION_ID:
            handler.addFilter(CorrelationIdFilter())
        root_logger.addHandler(handler)

    root_logger.setLevel(settings.LOG_LEVEL_INT)

    if settings.ENVIRONMENT == EnvironmentOption.PRODUCTION:
        _configure_noisy_loggers()


def _file_handler(settings: Settings) -> logging.Handler:
    return create_file_handler(
        filepath=settings.LOG_FILE_PATH,
        format_type="structured",
        level=logging.DEBUG,
        max_bytes=settings.LOG_FILE_MAX_SIZE,
        backup_count=settings.LOG_FILE_BACKUP_COUNT,
    )


def _development_handlers(settings: Settings) -> List[logging.Handler]:
    handlers = []

    if settings.LOG_CONSOLE_ENABLED:
        console_level = logging.DEBUG if settings.LOG_DEVELOPMENT_VERBOSE else settings.LOG_LEVEL_INT
        handlers.append(create_console_handler(format_type="detailed", level=console_level, use_colors=True))

    if settings.LOG_FILE_ENABLED:
        handlers.append(_file_handler(settings))

    return handlers


def _staging_handlers(settings: Settings) -> List[logging.Handler]:
    handlers = []

    if settings.LOG_CONSOLE_ENABLED:
        handlers.append(
            create_console_handler(format_type=settings.LOG_FORMAT, level=settings.LOG_LEVEL_INT, use_colors=False)
        )

    if settings.LOG_FILE_ENABLED:
        handlers.append(_file_handler(settings))

    return handlers


def _production_handlers(settings: Settings) -> List[logging.Handler]:
    handlers = []

    if settings.LOG_CONSOLE_ENABLED:
        console_level = logging.WARNING if settings.LOG_PRODUCTION_OPTIMIZE else settings.LOG_LEVEL_INT
        handlers.append(create_console_handler(format_type="json", level=console_level, use_colors=False))

    return handlers


def _configure_noisy_loggers() -> None:
    """Keep driver and pool chatter out of production logs."""
    noisy_loggers = {
        "asyncpg": logging.WARNING,
        "sqlalchemy.engine": logging.WARNING,
        "sqlalchemy.dialects": logging.WARNING,
        "sqlalchemy.pool": logging.WARNING,
        "uvicorn.access": logging.WARNING,
    }

    for logger_name, level in noisy_loggers.items():
        logging.getLogger(logger_name).setLevel(level)


def configure_testing_logging() -> None:
    """Configure minimal logging for test runs.

    Records still propagate to the root logger, so pytest's ``caplog``
    fixture can capture them.
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(create_null_handler())
    root_logger.setLevel(logging.ERROR)

    for logger_name in ("sqlalchemy.engine", "asyncpg", "aiosqlite"):
        logging.getLogger(logger_name).setLevel(logging.ERROR)


class CorrelationIdFilter(logging.Filter):
    """Stamp each record with the id of the request being served.

    Attached to handlers rather than the root logger, because logger-level
    filters do not see records propagated from child loggers.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "no-correlation"
        return True


def set_correlation_id(correlation_id: str) -> contextvars.Token[str]:
    """Set the correlation id for the current request context."""
    return correlation_id_var.set(correlation_id)


def reset_correlation_id(token: contextvars.Token[str]) -> None:
    correlation_id_var.reset(token)


def get_correlation_id() -> str | None:
    """Get the current correlation id, if a request is being served."""
    try:
        return correlation_id_var.get()
    except LookupError:
        return None


def generate_correlation_id() -> str:
    return str(uuid.uuid4())
