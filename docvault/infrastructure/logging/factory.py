"""Logger factory with lazy, settings-driven configuration.

This module is the interface for obtaining loggers throughout the
application. The first call configures the root logger from the settings;
later calls just hand out named loggers.
"""

import logging
from threading import Lock
from typing import Optional, Union

from ..config.settings import get_settings
from .config import setup_logging_configuration

_logging_configured = False
_configuration_lock = Lock()


def get_logger(name: Optional[str] = None, **extra_context) -> Union[logging.Logger, logging.LoggerAdapter]:
    """Get a configured logger.

    Args:
        name: Logger name, typically ``__name__``. Defaults to "docvault".
        **extra_context: Context merged into every record logged through the
            returned adapter.

    Example:
        ```python
        logger = get_logger(__name__)
        logger.info("Document created", extra={"document_id": str(document.id)})

        repo_logger = get_logger(__name__, component="repository")
        ```
    """
    _ensure_logging_configured()

    base_logger = logging.getLogger(name or "docvault")

    if extra_context:
        return logging.LoggerAdapter(base_logger, extra_context)

    return base_logger


def configure_logging(force: bool = False) -> None:
    """Configure logging now instead of on first use.

    Args:
        force: Re-run the configuration even if it already happened, e.g.
            after the settings changed.
    """
    global _logging_configured

    with _configuration_lock:
        if _logging_configured and not force:
            return

        setup_logging_configuration()
        _logging_configured = True

        settings = get_settings()
        logging.getLogger(__name__).info(
            f"Logging configured for {settings.ENVIRONMENT.value} environment",
            extra={
                "log_level": settings.LOG_LEVEL,
                "console_enabled": settings.LOG_CONSOLE_ENABLED,
                "file_enabled": settings.LOG_FILE_ENABLED,
            },
        )


def _ensure_logging_configured() -> None:
    if not _logging_configured:
        configure_logging()
