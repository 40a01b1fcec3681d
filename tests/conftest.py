"""Test configuration and fixtures for the document API.

Tests run against an in-memory SQLite database by default. Set
``TEST_DATABASE_BACKEND=postgres`` to run them against a throwaway
PostgreSQL container instead (requires Docker).
"""

import os

# Settings are read at import time, so the environment must be in place first.
os.environ["ENVIRONMENT"] = "test"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite://")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from docvault.infrastructure.config.settings import get_settings  # noqa: E402
from docvault.infrastructure.database.session import async_session, create_tables, drop_tables  # noqa: E402
from docvault.interfaces.main import app  # noqa: E402
from docvault.modules.common.constants import ClassificationLevel  # noqa: E402
from docvault.modules.document.models import Document  # noqa: E402
from docvault.modules.document.repository import DocumentRepository  # noqa: E402
from docvault.modules.document.services import DocumentService  # noqa: E402

USE_POSTGRES = os.environ.get("TEST_DATABASE_BACKEND", "sqlite").lower() == "postgres"


def is_docker_running() -> bool:
    """Check if Docker daemon is running."""
    from testcontainers.core.docker_client import DockerClient

    try:
        DockerClient()
        return True
    except Exception:
        return False


@pytest.fixture(scope="session")
def pg_container():
    """Create a PostgreSQL container for testing."""
    if not USE_POSTGRES:
        yield None
        return

    if not is_docker_running():
        pytest.skip("Docker is required, but not running")

    from testcontainers.postgres import PostgresContainer

    with PostgresContainer("postgres:16-alpine") as pg:
        yield pg


@pytest.fixture(scope="session")
def test_db_url(pg_container) -> str:
    """Build the async database URL for the selected backend."""
    if pg_container is None:
        return "sqlite+aiosqlite://"

    host = pg_container.get_container_host_ip()
    port = pg_container.get_exposed_port(5432)
    return (
        f"postgresql+asyncpg://{pg_container.username}:{pg_container.password}"
        f"@{host}:{port}/{pg_container.dbname}"
    )


@pytest_asyncio.fixture(scope="function")
async def test_db_engine(test_db_url: str):
    """Create a SQLAlchemy engine with a fresh schema for each test."""
    if test_db_url.startswith("sqlite"):
        engine = create_async_engine(
            test_db_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_async_engine(test_db_url, echo=False)

    await create_tables(bind=engine)
    yield engine
    await drop_tables(bind=engine)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_db_engine):
    """Create a test database session."""
    session_factory = async_sessionmaker(test_db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(test_db_engine):
    """Create a test client whose requests each get their own database session."""
    app.dependency_overrides = {}

    test_session_factory = async_sessionmaker(test_db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[async_session] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides = {}


@pytest.fixture
def placeholder_owner_id() -> str:
    return get_settings().PLACEHOLDER_OWNER_ID


@pytest.fixture
def document_repository(placeholder_owner_id: str) -> DocumentRepository:
    return DocumentRepository(placeholder_owner_id=placeholder_owner_id)


@pytest.fixture
def document_service(document_repository: DocumentRepository) -> DocumentService:
    return DocumentService(document_repository)


async def _insert_document(session: AsyncSession, **fields) -> dict:
    document = Document(**fields)
    session.add(document)
    await session.commit()
    return {
        "id": document.id,
        "title": document.title,
        "content": document.content,
        "classification": document.classification,
        "owner_id": document.owner_id,
        "created_at": document.created_at,
        "updated_at": document.updated_at,
    }


@pytest_asyncio.fixture
async def test_document(db_session: AsyncSession):
    """Create a test document."""
    return await _insert_document(
        db_session,
        title="Company Handbook",
        content="Policies and procedures that all employees must follow.",
        owner_id="user-1",
        classification=int(ClassificationLevel.INTERNAL),
    )


@pytest_asyncio.fixture
async def sample_documents(db_session: AsyncSession):
    """One document per classification level, spread over three owners."""
    specs = [
        ("Public API Documentation", "Endpoint descriptions and examples.", "user-2", ClassificationLevel.PUBLIC),
        ("Meeting Notes - Team Standup", "Sprint progress and blockers.", "user-2", ClassificationLevel.INTERNAL),
        ("Financial Report Q4 2024", "Revenue breakdowns and margins.", "user-1", ClassificationLevel.CONFIDENTIAL),
        ("Security Incident Response Plan", "Escalation procedures.", "user-3", ClassificationLevel.SECRET),
    ]
    documents = []
    for title, content, owner_id, level in specs:
        documents.append(
            await _insert_document(
                db_session, title=title, content=content, owner_id=owner_id, classification=int(level)
            )
        )
    return documents
