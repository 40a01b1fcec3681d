"""Tests for document service."""

import uuid
from typing import Any, Dict, List

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from docvault.modules.common.constants import ClassificationLevel
from docvault.modules.common.exceptions import DocumentNotFoundError, EmptyUpdateError, ValidationError
from docvault.modules.document.schemas import DocumentCreate, DocumentListQuery, DocumentUpdate
from docvault.modules.document.services import DocumentService, build_pagination


@pytest.mark.asyncio
async def test_create_document(document_service: DocumentService, db_session: AsyncSession):
    """Test creating a new document."""
    document_data = DocumentCreate(title="Test Document", content="Body", classification=ClassificationLevel.SECRET)

    result = await document_service.create_document(document_data, owner_id="user-5", db=db_session)

    assert result.title == "Test Document"
    assert result.classification == 4
    assert result.owner_id == "user-5"


@pytest.mark.asyncio
async def test_create_document_prefers_payload_owner(document_service: DocumentService, db_session: AsyncSession):
    document_data = DocumentCreate(title="Owned", content="Body", owner_id="user-8")

    result = await document_service.create_document(document_data, owner_id="user-5", db=db_session)

    assert result.owner_id == "user-8"


@pytest.mark.asyncio
async def test_get_document(document_service: DocumentService, db_session: AsyncSession, test_document: dict):
    """Test getting a specific document."""
    result = await document_service.get_document(test_document["id"], db_session)

    assert result.id == test_document["id"]
    assert result.title == test_document["title"]


@pytest.mark.asyncio
async def test_get_document_not_found(document_service: DocumentService, db_session: AsyncSession):
    """Test getting non-existent document."""
    missing_id = uuid.uuid4()

    with pytest.raises(DocumentNotFoundError) as exc_info:
        await document_service.get_document(missing_id, db_session)

    assert str(missing_id) in exc_info.value.message
    assert exc_info.value.document_id == missing_id


@pytest.mark.asyncio
async def test_update_document(document_service: DocumentService, db_session: AsyncSession, test_document: dict):
    result = await document_service.update_document(
        test_document["id"], DocumentUpdate(content="Revised body"), db_session
    )

    assert result.content == "Revised body"
    assert result.title == test_document["title"]


@pytest.mark.asyncio
async def test_update_document_without_fields(
    document_service: DocumentService, db_session: AsyncSession, test_document: dict
):
    update = DocumentUpdate.model_validate({"owner_id": "user-2"})

    with pytest.raises(EmptyUpdateError) as exc_info:
        await document_service.update_document(test_document["id"], update, db_session)

    assert isinstance(exc_info.value, ValidationError)


@pytest.mark.asyncio
async def test_update_document_not_found(document_service: DocumentService, db_session: AsyncSession):
    with pytest.raises(DocumentNotFoundError):
        await document_service.update_document(uuid.uuid4(), DocumentUpdate(title="Ghost"), db_session)


@pytest.mark.asyncio
async def test_delete_document(document_service: DocumentService, db_session: AsyncSession, test_document: dict):
    await document_service.delete_document(test_document["id"], db_session)

    with pytest.raises(DocumentNotFoundError):
        await document_service.get_document(test_document["id"], db_session)

    with pytest.raises(DocumentNotFoundError):
        await document_service.delete_document(test_document["id"], db_session)


@pytest.mark.asyncio
async def test_list_documents(
    document_service: DocumentService, db_session: AsyncSession, sample_documents: List[Dict[str, Any]]
):
    documents, pagination = await document_service.list_documents(DocumentListQuery(page=2, limit=3), db_session)

    assert len(documents) == 1
    assert pagination.page == 2
    assert pagination.total == 4
    assert pagination.total_pages == 2
    assert pagination.has_next is False
    assert pagination.has_prev is True


@pytest.mark.asyncio
async def test_list_documents_normalises_window(
    document_service: DocumentService, db_session: AsyncSession, sample_documents: List[Dict[str, Any]]
):
    documents, pagination = await document_service.list_documents(DocumentListQuery(page=-3, limit=500), db_session)

    assert len(documents) == 4
    assert pagination.page == 1
    assert pagination.limit == 100


@pytest.mark.asyncio
async def test_get_stats(
    document_service: DocumentService, db_session: AsyncSession, sample_documents: List[Dict[str, Any]]
):
    stats = await document_service.get_stats(db_session)

    assert stats.total == 4
    assert stats.by_classification.model_dump() == {"public": 1, "internal": 1, "confidential": 1, "secret": 1}

    owned = await document_service.get_stats(db_session, owner_id="user-1")
    assert owned.total == 1
    assert owned.by_classification.confidential == 1


@pytest.mark.parametrize(
    ("page", "limit", "total", "expected"),
    [
        (1, 10, 0, (0, False, False)),
        (1, 2, 3, (2, True, False)),
        (2, 2, 3, (2, False, True)),
        (3, 5, 10, (2, False, True)),
        (1, 100, 100, (1, False, False)),
    ],
)
def test_build_pagination(page, limit, total, expected):
    pagination = build_pagination(page, limit, total)

    assert (pagination.total_pages, pagination.has_next, pagination.has_prev) == expected
