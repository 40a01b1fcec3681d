from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, MappedAsDataclass

from ..config.settings import Settings, settings


def build_engine(app_settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured database profile.

    Pool sizing only applies to server databases; SQLite engines use the
    dialect's default pool.
    """
    url = app_settings.DATABASE_URL
    engine_kwargs: Dict[str, Any] = {"echo": app_settings.LOG_SQL_QUERIES, "future": True}
    if not url.startswith("sqlite"):
        engine_kwargs["pool_size"] = app_settings.POSTGRES_POOL_SIZE
        engine_kwargs["max_overflow"] = app_settings.POSTGRES_MAX_OVERFLOW
        engine_kwargs["pool_pre_ping"] = True
    return create_async_engine(url, **engine_kwargs)


engine = build_engine(settings)

local_session = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase, MappedAsDataclass):
    """Base class for all database models.

    Combines SQLAlchemy's DeclarativeBase with MappedAsDataclass so every
    model gets dataclass-style ``__init__``/``__repr__`` generated from its
    ``Mapped`` annotations. All tables in the application hang off this
    metadata, which is what :func:`create_tables` materialises.
    """

    pass


async def async_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for database session management with proper lifecycle.

    Yields one session per request and closes it when the request finishes.
    Tests replace this dependency through ``app.dependency_overrides``.

    Example:
        ```python
        @router.get("/documents")
        async def list_documents(db: AsyncSession = Depends(async_session)):
            ...
        ```
    """
    async_get_db = local_session
    async with async_get_db() as db:
        yield db


async def create_tables(bind: AsyncEngine | None = None) -> None:
    """Create all tables in the database if they don't exist.

    This is idempotent: existing tables are left unchanged. It covers the
    ``documents`` table as well as the ``document_versions`` and
    ``document_shares`` tables, with their indexes and constraints.

    Args:
        bind: Engine to create the tables on. Defaults to the application engine.
    """
    # Importing the models registers their tables on Base.metadata.
    from ...modules.document import models  # noqa: F401

    target = bind or engine
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables(bind: AsyncEngine | None = None) -> None:
    """Drop every table known to the metadata."""
    from ...modules.document import models  # noqa: F401

    target = bind or engine
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
