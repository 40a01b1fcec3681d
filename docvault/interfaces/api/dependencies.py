"""FastAPI dependencies for use in API endpoints."""

from typing import Annotated, Optional

from fastapi import Depends, Query, Request
from fastapi.exceptions import RequestValidationError
from pydantic_core import PydanticCustomError
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.config.settings import Settings, get_settings
from ...infrastructure.database import async_session
from ...modules.common.constants import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    OWNER_ID_MAX_LENGTH,
    SEARCH_MAX_LENGTH,
    ClassificationLevel,
)
from ...modules.document.repository import DocumentRepository
from ...modules.document.schemas import DocumentListQuery, clean_search_term
from ...modules.document.services import DocumentService

DbSession = Annotated[AsyncSession, Depends(async_session)]


def get_current_owner_id(settings: Annotated[Settings, Depends(get_settings)]) -> str:
    """Resolve the principal acting on the request.

    No identity provider is wired in, so every request acts as the configured
    placeholder owner. Swap this dependency to plug in real authentication.
    """
    return settings.PLACEHOLDER_OWNER_ID


CurrentOwnerId = Annotated[str, Depends(get_current_owner_id)]


def get_requested_document_id(request: Request) -> str:
    """The document id exactly as the client wrote it in the path."""
    return request.path_params["document_id"]


RequestedDocumentId = Annotated[str, Depends(get_requested_document_id)]


def get_document_repository(settings: Annotated[Settings, Depends(get_settings)]) -> DocumentRepository:
    """Dependency for providing a DocumentRepository instance."""
    return DocumentRepository(placeholder_owner_id=settings.PLACEHOLDER_OWNER_ID)


def get_document_service(
    repository: Annotated[DocumentRepository, Depends(get_document_repository)],
) -> DocumentService:
    """Dependency for providing a DocumentService instance."""
    return DocumentService(repository)


OwnerIdQuery = Annotated[
    Optional[str],
    Query(min_length=1, max_length=OWNER_ID_MAX_LENGTH, description="Only documents owned by this principal"),
]


def get_list_query(
    page: Annotated[int, Query(ge=1, description="Page number, starting at 1")] = DEFAULT_PAGE,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE, description="Page size")] = DEFAULT_PAGE_SIZE,
    owner_id: OwnerIdQuery = None,
    classification: Annotated[
        Optional[int], Query(ge=1, le=4, description="1=PUBLIC, 2=INTERNAL, 3=CONFIDENTIAL, 4=SECRET")
    ] = None,
    search: Annotated[
        Optional[str],
        Query(min_length=1, max_length=SEARCH_MAX_LENGTH, description="Case-insensitive match on title or content"),
    ] = None,
) -> DocumentListQuery:
    """Collect and sanitise the list-documents query string.

    Raises:
        RequestValidationError: If the search term is blank once trimmed.
    """
    if search is not None:
        try:
            search = clean_search_term(search)
        except PydanticCustomError as e:
            raise RequestValidationError(
                [{"type": e.type, "loc": ("query", "search"), "msg": e.message(), "input": search}]
            ) from e

    return DocumentListQuery(
        page=page,
        limit=limit,
        owner_id=owner_id,
        classification=ClassificationLevel(classification) if classification is not None else None,
        search=search,
    )
