"""HTTP middleware: request correlation and handler timeouts."""

import asyncio
import time
from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..modules.common.schemas import ErrorResponse
from .config.settings import get_settings
from .logging import generate_correlation_id, get_logger, reset_correlation_id, set_correlation_id

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Attach a request id to the logging context and echo it back.

    The id comes from the ``X-Request-ID`` header when the client sends one
    and is generated otherwise.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_correlation_id()
        token = set_correlation_id(request_id)
        request.state.request_id = request_id

        start_time = time.perf_counter()
        try:
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.info(
                f"{request.method} {request.url.path} {response.status_code}",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": round(duration_ms, 2),
                },
            )

            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            reset_correlation_id(token)


class RequestTimeoutMiddleware:
    """Caps total handler execution time. If exceeded, returns a 504 error envelope."""

    def __init__(self, app: ASGIApp, timeout_seconds: Optional[float] = None) -> None:
        self.app = app
        self.timeout_seconds = timeout_seconds or get_settings().REQUEST_TIMEOUT_SECONDS

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await asyncio.wait_for(self.app(scope, receive, send_wrapper), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            request = Request(scope, receive=receive)
            logger.error(
                f"Request timed out after {self.timeout_seconds}s",
                extra={"method": request.method, "path": request.url.path},
            )
            # Headers are already on the wire; nothing sensible can be sent.
            if response_started:
                return

            body = ErrorResponse(
                error="Gateway Timeout",
                message="The request took too long to complete",
            )
            response = JSONResponse(
                status_code=status.HTTP_504_GATEWAY_TIMEOUT,
                content=body.model_dump(mode="json", exclude_none=True),
            )
            await response(scope, receive, send)
