"""Document API endpoints.

Handlers only translate between HTTP and the service layer. Failures are
raised as domain exceptions and mapped to responses by the central error
handler.
"""

import uuid as uuid_pkg
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.database.session import async_session
from ...modules.common.schemas import DataResponse, ErrorResponse, ListMeta, ListResponse
from ...modules.document.schemas import (
    DocumentCreate,
    DocumentListQuery,
    DocumentRead,
    DocumentStats,
    DocumentUpdate,
)
from ...modules.document.services import DocumentService
from .dependencies import (
    OwnerIdQuery,
    RequestedDocumentId,
    get_current_owner_id,
    get_document_service,
    get_list_query,
)

router = APIRouter(prefix="/documents", tags=["Documents"])

_VALIDATION_RESPONSE = {400: {"model": ErrorResponse, "description": "Validation failed"}}
_NOT_FOUND_RESPONSE = {404: {"model": ErrorResponse, "description": "Document not found"}}


@router.get(
    "/stats",
    response_model=DataResponse[DocumentStats],
    response_model_exclude_none=True,
    summary="Document Statistics",
    description="""
    Counts visible documents overall and per classification level.

    - **owner_id**: Optional owner to restrict the counts to
    """,
    responses={**_VALIDATION_RESPONSE},
)
async def get_document_stats(
    owner_id: OwnerIdQuery = None,
    document_service: DocumentService = Depends(get_document_service),
    db: AsyncSession = Depends(async_session),
) -> DataResponse[DocumentStats]:
    """Get the classification breakdown of visible documents."""
    stats = await document_service.get_stats(db, owner_id=owner_id)
    return DataResponse[DocumentStats](data=stats)


@router.get(
    "",
    response_model=ListResponse[DocumentRead],
    summary="List Documents",
    description="""
    Retrieves a page of documents, most recently updated first.

    Soft-deleted documents are never listed.

    - **page**: Page number (1-indexed, default: 1)
    - **limit**: Documents per page (default: 10, max: 100)
    - **owner_id**: Only documents owned by this principal
    - **classification**: Only documents at this level (1-4)
    - **search**: Case-insensitive substring of the title or content
    """,
    responses={**_VALIDATION_RESPONSE},
)
async def list_documents(
    query: Annotated[DocumentListQuery, Depends(get_list_query)],
    document_service: DocumentService = Depends(get_document_service),
    db: AsyncSession = Depends(async_session),
) -> ListResponse[DocumentRead]:
    """Get documents with pagination and optional filtering."""
    documents, pagination = await document_service.list_documents(query, db)
    return ListResponse[DocumentRead](data=documents, meta=ListMeta(pagination=pagination))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=DataResponse[DocumentRead],
    response_model_exclude_none=True,
    summary="Create New Document",
    description="""
    Creates a new document.

    - **title**: 1-255 characters, trimmed and HTML-escaped
    - **content**: Non-empty body of up to 1,000,000 characters
    - **classification**: Optional level 1-4, defaults to INTERNAL (2)
    - **owner_id**: Optional owner, defaults to the current principal
    """,
    responses={**_VALIDATION_RESPONSE},
)
async def create_document(
    document_data: DocumentCreate,
    owner_id: Annotated[str, Depends(get_current_owner_id)],
    document_service: DocumentService = Depends(get_document_service),
    db: AsyncSession = Depends(async_session),
) -> DataResponse[DocumentRead]:
    """Create a new document."""
    document = await document_service.create_document(document_data, owner_id, db)
    return DataResponse[DocumentRead](data=document, message="Document created successfully")


@router.get(
    "/{document_id}",
    response_model=DataResponse[DocumentRead],
    response_model_exclude_none=True,
    summary="Get Document Details",
    responses={**_VALIDATION_RESPONSE, **_NOT_FOUND_RESPONSE},
)
async def get_document(
    document_id: uuid_pkg.UUID,
    requested_id: RequestedDocumentId,
    document_service: DocumentService = Depends(get_document_service),
    db: AsyncSession = Depends(async_session),
) -> DataResponse[DocumentRead]:
    """Get a specific document by ID."""
    document = await document_service.get_document(document_id, db, requested_id=requested_id)
    return DataResponse[DocumentRead](data=document)


@router.put(
    "/{document_id}",
    response_model=DataResponse[DocumentRead],
    response_model_exclude_none=True,
    summary="Update Document",
    description="""
    Partially updates a document. Only supplied fields change.

    - **title**, **content**, **classification**: at least one is required
    - Any other field, including **owner_id**, is ignored
    """,
    responses={**_VALIDATION_RESPONSE, **_NOT_FOUND_RESPONSE},
)
async def update_document(
    document_id: uuid_pkg.UUID,
    requested_id: RequestedDocumentId,
    update_data: DocumentUpdate,
    document_service: DocumentService = Depends(get_document_service),
    db: AsyncSession = Depends(async_session),
) -> DataResponse[DocumentRead]:
    """Update a document."""
    document = await document_service.update_document(document_id, update_data, db, requested_id=requested_id)
    return DataResponse[DocumentRead](data=document, message="Document updated successfully")


@router.delete(
    "/{document_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Document",
    description="""Soft-deletes a document.

    The row is kept in storage but disappears from every read, count and
    update. Deleting it again reports 404.
    """,
    responses={**_VALIDATION_RESPONSE, **_NOT_FOUND_RESPONSE},
)
async def delete_document(
    document_id: uuid_pkg.UUID,
    requested_id: RequestedDocumentId,
    document_service: DocumentService = Depends(get_document_service),
    db: AsyncSession = Depends(async_session),
) -> Response:
    """Soft-delete a document."""
    await document_service.delete_document(document_id, db, requested_id=requested_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
