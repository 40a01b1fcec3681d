"""Centralized logging infrastructure for DocVault.

Every module obtains its logger through :func:`get_logger`, which configures
the root logger from the application settings on first use (handlers,
formatters and levels per deployment mode) and stamps records with the id of
the request being served.

Usage:
    ```python
    from docvault.infrastructure.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Document soft-deleted", extra={"document_id": document_id})
    ```
"""

from .config import (
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
    setup_logging_configuration,
)
from .factory import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "generate_correlation_id",
    "get_correlation_id",
    "get_logger",
    "reset_correlation_id",
    "set_correlation_id",
    "setup_logging_configuration",
]
