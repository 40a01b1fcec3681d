"""Document management service."""

import math
import uuid as uuid_pkg
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.logging import get_logger
from ..common.constants import ClassificationLevel
from ..common.exceptions import DocumentNotFoundError, EmptyUpdateError
from ..common.schemas import PaginationMeta
from .repository import DocumentRepository
from .schemas import (
    ClassificationBreakdown,
    DocumentCreate,
    DocumentFilters,
    DocumentListQuery,
    DocumentRead,
    DocumentStats,
    DocumentUpdate,
)

logger = get_logger(__name__)


def build_pagination(page: int, limit: int, total: int) -> PaginationMeta:
    """Pagination block for a page of ``limit`` items out of ``total``.

    Example:
        >>> build_pagination(page=2, limit=2, total=3).model_dump(by_alias=True)
        {'page': 2, 'limit': 2, 'total': 3, 'totalPages': 2, 'hasNext': False, 'hasPrev': True}
    """
    total_pages = math.ceil(total / limit) if limit else 0
    return PaginationMeta(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )


class DocumentService:
    """Use cases behind the document endpoints.

    The service turns validated requests into repository calls and raises
    domain exceptions for outcomes the API reports as failures: a missing or
    soft-deleted document becomes :class:`DocumentNotFoundError`, an update
    without any mutable field becomes :class:`EmptyUpdateError`. It never
    decides HTTP status codes itself.
    """

    def __init__(self, repository: DocumentRepository) -> None:
        self.repository = repository

    async def list_documents(
        self, query: DocumentListQuery, db: AsyncSession
    ) -> Tuple[List[DocumentRead], PaginationMeta]:
        """Get one page of visible documents with pagination metadata.

        Args:
            query: Filters and requested page; page and limit are normalised
                to ``page >= 1`` and ``1 <= limit <= 100``
            db: Database session

        Returns:
            The documents on the page and the pagination block
        """
        filters = query.to_filters()

        documents = await self.repository.list(db, filters)
        total = await self.repository.count(db, filters.without_window())

        pagination = build_pagination(query.normalized_page, query.normalized_limit, total)
        logger.info(
            f"Retrieved {len(documents)} documents",
            extra={"page": pagination.page, "limit": pagination.limit, "total": total},
        )
        return documents, pagination

    async def get_document(
        self, document_id: uuid_pkg.UUID, db: AsyncSession, requested_id: Optional[str] = None
    ) -> DocumentRead:
        """Get a visible document.

        ``requested_id`` is the id as the client spelled it, used in the
        not-found message; it defaults to ``document_id``.

        Raises:
            DocumentNotFoundError: If the id is unknown or the document was deleted
        """
        document = await self.repository.get_by_id(db, document_id)
        if document is None:
            raise DocumentNotFoundError(requested_id or document_id)
        return document

    async def create_document(
        self, document_data: DocumentCreate, owner_id: str, db: AsyncSession
    ) -> DocumentRead:
        """Create a document.

        Args:
            document_data: Validated creation payload
            owner_id: Principal to attribute the document to when the payload
                does not name an owner
            db: Database session
        """
        document = await self.repository.create(
            db,
            title=document_data.title,
            content=document_data.content,
            classification=document_data.classification,
            owner_id=document_data.owner_id or owner_id,
        )
        logger.info(f"Created document {document.id} by owner {document.owner_id}")
        return document

    async def update_document(
        self,
        document_id: uuid_pkg.UUID,
        update_data: DocumentUpdate,
        db: AsyncSession,
        requested_id: Optional[str] = None,
    ) -> DocumentRead:
        """Apply a partial update.

        Raises:
            EmptyUpdateError: If none of title, content or classification was supplied
            DocumentNotFoundError: If the id is unknown or the document was deleted
        """
        changes = update_data.changes()
        if not changes:
            raise EmptyUpdateError()

        document = await self.repository.update(db, document_id, changes)
        if document is None:
            raise DocumentNotFoundError(requested_id or document_id)

        logger.info(f"Updated document {document_id}", extra={"fields": sorted(changes)})
        return document

    async def delete_document(
        self, document_id: uuid_pkg.UUID, db: AsyncSession, requested_id: Optional[str] = None
    ) -> None:
        """Soft-delete a document.

        Raises:
            DocumentNotFoundError: If the id is unknown or already deleted
        """
        deleted = await self.repository.soft_delete(db, document_id)
        if not deleted:
            raise DocumentNotFoundError(requested_id or document_id)

        logger.info(f"Deleted document {document_id}")

    async def get_stats(self, db: AsyncSession, owner_id: Optional[str] = None) -> DocumentStats:
        """Count visible documents overall and per classification level."""
        base = DocumentFilters(owner_id=owner_id)

        total = await self.repository.count(db, base)
        per_level = {}
        for level in ClassificationLevel:
            filters = base.model_copy(update={"classification": int(level)})
            per_level[level.name.lower()] = await self.repository.count(db, filters)

        logger.info("Retrieved document statistics", extra={"owner_id": owner_id or "*"})
        return DocumentStats(total=total, by_classification=ClassificationBreakdown(**per_level))
