"""Central mapping of failures to HTTP error responses.

Every failure raised while serving a request ends up in
:func:`build_error_response`, either through the exception handlers
registered on the app or, for anything they do not cover, through
:class:`CatchAllExceptionMiddleware`. This is the only place that decides
the status code of a failed request.
"""

import traceback
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from ....infrastructure.config.settings import EnvironmentOption, get_settings
from ....infrastructure.logging import get_logger
from ..constants import EXCEPTION_MAPPING, SQLSTATE_MAPPING, ErrorMapping
from ..exceptions import DomainError
from ..schemas import ErrorResponse
from ..validation import format_validation_errors

logger = get_logger(__name__)

INTERNAL_SERVER_ERROR = "Internal Server Error"

# Message fragments SQLite uses in place of SQLSTATE codes.
_SQLITE_INTEGRITY_MESSAGES = {
    "UNIQUE constraint failed": "23505",
    "FOREIGN KEY constraint failed": "23503",
    "NOT NULL constraint failed": "23502",
    "CHECK constraint failed": "23514",
}


@dataclass
class ErrorResolution:
    """Outcome of mapping an exception: status, error title and what may be shown."""

    status_code: int
    error: str
    message: Optional[str] = None
    details: Optional[List[Dict[str, Any]]] = field(default=None)

    @property
    def is_server_error(self) -> bool:
        return self.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR


def sqlstate_of(error: DBAPIError) -> Optional[str]:
    """Extract the SQLSTATE code from a wrapped driver error.

    asyncpg exposes it as ``sqlstate`` (psycopg as ``pgcode``), possibly on the
    driver exception chained behind SQLAlchemy's adapter. SQLite has no codes,
    so its messages are matched instead.
    """
    orig = error.orig
    candidates = [orig, getattr(orig, "__cause__", None)]
    for candidate in candidates:
        if candidate is None:
            continue
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code:
            return str(code)

    text = str(orig)
    for fragment, code in _SQLITE_INTEGRITY_MESSAGES.items():
        if fragment in text:
            return code
    return None


def resolve_exception(exc: Exception) -> ErrorResolution:
    """Map any exception to its HTTP status, error title and client-facing detail."""
    if isinstance(exc, RequestValidationError):
        return ErrorResolution(
            status_code=status.HTTP_400_BAD_REQUEST,
            error="Validation failed",
            details=format_validation_errors(exc.errors()),
        )

    if isinstance(exc, DomainError):
        for exception_class, mapping in EXCEPTION_MAPPING.items():
            if isinstance(exc, exception_class):
                return ErrorResolution(
                    status_code=mapping.status_code,
                    error=mapping.error,
                    message=exc.message or None,
                    details=exc.details,
                )

    if isinstance(exc, DBAPIError):
        code = sqlstate_of(exc)
        mapping = SQLSTATE_MAPPING.get(code) if code else None
        if mapping is not None:
            return ErrorResolution(status_code=mapping.status_code, error=mapping.error, message=mapping.error)

    if isinstance(exc, StarletteHTTPException):
        return ErrorResolution(status_code=exc.status_code, error=str(exc.detail))

    fallback = ErrorMapping(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_SERVER_ERROR)
    return ErrorResolution(status_code=fallback.status_code, error=fallback.error, message=str(exc) or None)


def render_error(resolution: ErrorResolution, exc: Exception, environment: EnvironmentOption) -> Dict[str, Any]:
    """Build the JSON body for a resolved error.

    Server errors never expose the raw message in production; development
    additionally gets the stack trace.
    """
    message = resolution.message
    stack = None

    if resolution.is_server_error:
        if environment == EnvironmentOption.PRODUCTION:
            message = INTERNAL_SERVER_ERROR
        elif environment == EnvironmentOption.DEVELOPMENT:
            stack = traceback.format_exception(type(exc), exc, exc.__traceback__)

    body = ErrorResponse(
        error=resolution.error,
        message=message,
        details=resolution.details,
        stack=stack,
    )
    return body.model_dump(mode="json", exclude_none=True)


def build_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Log the original failure and turn it into the error envelope."""
    resolution = resolve_exception(exc)
    log_context = {
        "path": request.url.path,
        "method": request.method,
        "status_code": resolution.status_code,
        "error_type": type(exc).__name__,
    }

    if resolution.is_server_error:
        logger.error(f"Unhandled {type(exc).__name__}: {exc}", exc_info=exc, extra=log_context)
    else:
        logger.warning(f"{resolution.error}: {exc}", extra=log_context)

    content = render_error(resolution, exc, get_settings().ENVIRONMENT)
    headers = getattr(exc, "headers", None) if isinstance(exc, StarletteHTTPException) else None
    return JSONResponse(status_code=resolution.status_code, content=content, headers=headers)


class CatchAllExceptionMiddleware(BaseHTTPMiddleware):
    """Route exceptions no registered handler claimed to the error mapper."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return build_error_response(request, exc)


def register_exception_handlers(app: FastAPI) -> None:
    """Register the error mapper for validation, domain, database and HTTP errors."""

    async def error_handler(request: Request, exc: Exception) -> JSONResponse:
        return build_error_response(request, exc)

    app.add_exception_handler(RequestValidationError, error_handler)
    app.add_exception_handler(DomainError, error_handler)
    app.add_exception_handler(SQLAlchemyError, error_handler)
    app.add_exception_handler(StarletteHTTPException, error_handler)
    app.add_middleware(CatchAllExceptionMiddleware)
