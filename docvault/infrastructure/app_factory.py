from asyncio import Event
from collections.abc import AsyncGenerator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any, Dict, List, Optional

import anyio
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from ..modules.common.utils.error_handler import register_exception_handlers
from .config.settings import (
    DatabaseSettings,
    EnvironmentOption,
    EnvironmentSettings,
    Settings,
    get_settings,
)
from .database.session import create_tables, engine
from .logging import configure_logging, get_logger
from .middleware import RequestContextMiddleware, RequestTimeoutMiddleware

logger = get_logger(__name__)


async def set_threadpool_tokens(number_of_tokens: int = 100) -> None:
    """Configure the number of threadpool tokens for anyio."""
    limiter = anyio.to_thread.current_default_thread_limiter()
    limiter.total_tokens = number_of_tokens


def lifespan_factory(
    settings: Settings,
    create_tables_on_startup: bool = True,
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """Factory to create a lifespan async context manager for a FastAPI app.

    Args:
        settings: Application settings
        create_tables_on_startup: Whether to create database tables on startup

    Returns:
        An async context manager for FastAPI's lifespan
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        initialization_complete = Event()
        app.state.initialization_complete = initialization_complete

        await set_threadpool_tokens()

        try:
            if isinstance(settings, DatabaseSettings) and create_tables_on_startup:
                await create_tables()
                logger.info(f"Database tables ready on {settings.DATABASE_NAME}")

            initialization_complete.set()
            logger.info(f"{settings.APP_NAME} started in {settings.ENVIRONMENT.value} mode")
            yield

        finally:
            await engine.dispose()

    return lifespan


def create_application(
    router: APIRouter,
    settings: Optional[Settings] = None,
    lifespan: Optional[Callable[[FastAPI], AbstractAsyncContextManager[None]]] = None,
    create_tables_on_startup: Optional[bool] = None,
    enable_cors: Optional[bool] = None,
    cors_origins: Optional[List[str]] = None,
    enable_docs_in_production: Optional[bool] = None,
    enable_gzip: Optional[bool] = None,
    request_timeout: Optional[float] = None,
    # OpenAPI metadata
    title: Optional[str] = None,
    summary: Optional[str] = None,
    description: Optional[str] = None,
    version: Optional[str] = None,
    **kwargs: Any,
) -> FastAPI:
    """Creates and configures a FastAPI application based on the provided settings.

    Middleware runs, from the outside in: request context, handler timeout,
    CORS, GZip, the catch-all error mapper, then FastAPI's own exception
    handlers around the routes.

    Args:
        router: The APIRouter containing the routes for the application
        settings: Application settings (uses get_settings() if None)
        lifespan: Optional lifespan function for the FastAPI app. If None, uses the default
            lifespan_factory which creates tables and tunes the thread pool.
        create_tables_on_startup: Whether to create database tables on startup.
            Defaults to settings.CREATE_TABLES_ON_STARTUP if None.
        enable_cors: Whether to enable CORS middleware.
            Defaults to settings.CORS_ENABLED if None.
        cors_origins: List of allowed origins for CORS.
            Defaults to settings.CORS_ORIGINS if None.
        enable_docs_in_production: Whether to enable API docs in production.
            Defaults to settings.ENABLE_DOCS_IN_PRODUCTION if None.
        enable_gzip: Whether to enable GZip compression middleware.
            Defaults to settings.GZIP_ENABLED if None.
        request_timeout: Seconds a handler may run before a 504 is returned.
            Defaults to settings.REQUEST_TIMEOUT_SECONDS if None.
        title: The title of the API.
        summary: A short summary of the API.
        description: A detailed description of the API (supports Markdown).
        version: The version of the API.
        **kwargs: Additional keyword arguments passed to FastAPI constructor

    Returns:
        A configured FastAPI application
    """

    if settings is None:
        settings = get_settings()

    configure_logging()

    _create_tables_on_startup = True
    if create_tables_on_startup is not None:
        _create_tables_on_startup = create_tables_on_startup
    elif hasattr(settings, "CREATE_TABLES_ON_STARTUP"):
        _create_tables_on_startup = settings.CREATE_TABLES_ON_STARTUP

    _enable_cors = True
    if enable_cors is not None:
        _enable_cors = enable_cors
    elif hasattr(settings, "CORS_ENABLED"):
        _enable_cors = settings.CORS_ENABLED

    _cors_origins: List[str] = ["*"]
    if cors_origins is not None:
        _cors_origins = cors_origins
    elif hasattr(settings, "CORS_ORIGINS_LIST"):
        _cors_origins = settings.CORS_ORIGINS_LIST

    _enable_docs_in_production = False
    if enable_docs_in_production is not None:
        _enable_docs_in_production = enable_docs_in_production
    elif hasattr(settings, "ENABLE_DOCS_IN_PRODUCTION"):
        _enable_docs_in_production = settings.ENABLE_DOCS_IN_PRODUCTION

    _enable_gzip = True
    if enable_gzip is not None:
        _enable_gzip = enable_gzip
    elif hasattr(settings, "GZIP_ENABLED"):
        _enable_gzip = settings.GZIP_ENABLED

    _request_timeout = request_timeout or settings.REQUEST_TIMEOUT_SECONDS

    metadata: Dict[str, Any] = {}

    if title is not None:
        metadata["title"] = title
    elif settings.API_TITLE:
        metadata["title"] = settings.API_TITLE
    else:
        metadata["title"] = settings.APP_NAME

    if summary is not None:
        metadata["summary"] = summary
    elif settings.API_SUMMARY:
        metadata["summary"] = settings.API_SUMMARY

    if description is not None:
        metadata["description"] = description
    elif settings.API_DESCRIPTION:
        metadata["description"] = settings.API_DESCRIPTION
    else:
        metadata["description"] = settings.APP_DESCRIPTION

    if version is not None:
        metadata["version"] = version
    elif settings.API_VERSION:
        metadata["version"] = settings.API_VERSION
    else:
        metadata["version"] = settings.VERSION

    metadata["docs_url"] = settings.DOCS_URL
    metadata["redoc_url"] = settings.REDOC_URL
    metadata["openapi_url"] = settings.OPENAPI_URL

    kwargs.update(metadata)

    hide_docs = (
        isinstance(settings, EnvironmentSettings)
        and settings.ENVIRONMENT == EnvironmentOption.PRODUCTION
        and not _enable_docs_in_production
    )
    if hide_docs:
        kwargs.update({"docs_url": None, "redoc_url": None, "openapi_url": None})

    if lifespan is None:
        lifespan = lifespan_factory(settings, create_tables_on_startup=_create_tables_on_startup)

    application = FastAPI(lifespan=lifespan, **kwargs)

    application.include_router(router)

    register_exception_handlers(application)

    if _enable_gzip:
        application.add_middleware(GZipMiddleware, minimum_size=settings.GZIP_MINIMUM_SIZE)

    if _enable_cors:
        cors_settings_dict: Dict[str, Any] = {
            "allow_origins": _cors_origins,
            "allow_credentials": settings.CORS_ALLOW_CREDENTIALS,
            "allow_methods": settings.CORS_ALLOW_METHODS.split(","),
            "allow_headers": settings.CORS_ALLOW_HEADERS.split(","),
            "expose_headers": ["X-Request-ID"],
        }
        application.add_middleware(CORSMiddleware, **cors_settings_dict)

    application.add_middleware(RequestTimeoutMiddleware, timeout_seconds=_request_timeout)
    application.add_middleware(RequestContextMiddleware)

    return application
