"""Data-access layer for documents.

``DocumentRepository`` is the only component that talks to the
``documents`` table. Soft-deleted rows are filtered out by a single
predicate builder shared by every read, count and update, so ``list``,
``count``, ``get_by_id`` and ``update`` can never disagree about which rows
exist.
"""

import uuid as uuid_pkg
from datetime import datetime
from typing import Any, List, Mapping, Optional, cast

from pydantic import BaseModel
from sqlalchemy import ColumnElement, Select, delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.database.models import utcnow
from ...infrastructure.logging import get_logger
from ..common.constants import CLASSIFICATION_NAMES, DEFAULT_CLASSIFICATION
from ..common.validation import LIKE_ESCAPE_CHAR, like_pattern
from .crud import document_crud
from .models import Document
from .schemas import DocumentFilters, DocumentRead

logger = get_logger(__name__)

MUTABLE_FIELDS = ("title", "content", "classification")

_READ_COLUMNS = (
    Document.id,
    Document.title,
    Document.content,
    Document.classification,
    Document.owner_id,
    Document.created_at,
    Document.updated_at,
)


class DocumentCreateInternal(BaseModel):
    title: str
    content: str
    classification: int
    owner_id: str


class DocumentStored(BaseModel):
    """Columns of a stored row, as returned by ``document_crud.create``."""

    id: uuid_pkg.UUID
    title: str
    content: str
    classification: int
    owner_id: str
    created_at: datetime
    updated_at: datetime


def _to_read(row: Mapping[str, Any]) -> DocumentRead:
    return DocumentRead(
        id=row["id"],
        title=row["title"],
        content=row["content"],
        classification=row["classification"],
        classification_name=CLASSIFICATION_NAMES[row["classification"]],
        owner_id=row["owner_id"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class DocumentRepository:
    """Sole gateway between the domain and storage for documents."""

    def __init__(self, placeholder_owner_id: str) -> None:
        self.placeholder_owner_id = placeholder_owner_id

    @staticmethod
    def _conditions(filters: DocumentFilters) -> List[ColumnElement[bool]]:
        """Build the WHERE clause shared by :meth:`list` and :meth:`count`."""
        conditions: List[ColumnElement[bool]] = [Document.not_deleted()]

        if filters.owner_id:
            conditions.append(Document.owner_id == filters.owner_id)

        if filters.classification:
            conditions.append(Document.classification == filters.classification)

        if filters.search:
            pattern = like_pattern(filters.search)
            conditions.append(
                or_(
                    Document.title.ilike(pattern, escape=LIKE_ESCAPE_CHAR),
                    Document.content.ilike(pattern, escape=LIKE_ESCAPE_CHAR),
                )
            )

        return conditions

    async def list(self, db: AsyncSession, filters: Optional[DocumentFilters] = None) -> List[DocumentRead]:
        """Visible documents matching ``filters``, most recently updated first."""
        filters = filters or DocumentFilters()

        stmt = cast(Select, await document_crud.select(sort_columns="updated_at", sort_orders="desc"))
        stmt = stmt.where(*self._conditions(filters))

        if filters.limit:
            stmt = stmt.limit(filters.limit)
        if filters.offset:
            stmt = stmt.offset(filters.offset)

        result = await db.execute(stmt)
        return [_to_read(row._mapping) for row in result.fetchall()]

    async def count(self, db: AsyncSession, filters: Optional[DocumentFilters] = None) -> int:
        """Number of visible documents matching ``filters``; limit and offset are ignored."""
        filters = filters or DocumentFilters()

        stmt = select(func.count(Document.id)).where(*self._conditions(filters))
        result = await db.execute(stmt)
        return int(result.scalar_one())

    async def get_by_id(self, db: AsyncSession, document_id: uuid_pkg.UUID) -> Optional[DocumentRead]:
        """Fetch a visible document, or ``None`` if it is missing or soft-deleted."""
        stmt = select(*_READ_COLUMNS).where(Document.id == document_id, Document.not_deleted())
        row = (await db.execute(stmt)).first()

        if row is None:
            return None

        return _to_read(row._mapping)

    async def create(
        self,
        db: AsyncSession,
        title: str,
        content: str,
        classification: Optional[int] = None,
        owner_id: Optional[str] = None,
    ) -> DocumentRead:
        """Insert a document, defaulting classification to INTERNAL and owner to the placeholder."""
        document_internal = DocumentCreateInternal(
            title=title,
            content=content,
            classification=int(classification) if classification is not None else int(DEFAULT_CLASSIFICATION),
            owner_id=owner_id or self.placeholder_owner_id,
        )

        created = cast(
            DocumentStored,
            await document_crud.create(
                db=db,
                object=document_internal,
                schema_to_select=DocumentStored,
                return_as_model=True,
            ),
        )
        logger.debug("Inserted document", extra={"document_id": str(created.id)})

        return _to_read(created.model_dump())

    async def update(
        self, db: AsyncSession, document_id: uuid_pkg.UUID, changes: Mapping[str, Any]
    ) -> Optional[DocumentRead]:
        """Apply the mutable fields in ``changes`` to a visible document.

        Keys other than ``title``, ``content`` and ``classification`` are
        dropped, so ``owner_id`` can never change. ``updated_at`` is refreshed.
        Returns ``None`` when the document is missing or soft-deleted.
        """
        values = {field: changes[field] for field in MUTABLE_FIELDS if changes.get(field) is not None}
        if "classification" in values:
            values["classification"] = int(values["classification"])

        if not values:
            return await self.get_by_id(db, document_id)

        stmt = (
            update(Document)
            .where(Document.id == document_id, Document.not_deleted())
            .values(**values, updated_at=utcnow())
            .returning(*_READ_COLUMNS)
            .execution_options(synchronize_session=False)
        )
        row = (await db.execute(stmt)).first()
        await db.commit()

        if row is None:
            return None

        return _to_read(row._mapping)

    async def soft_delete(self, db: AsyncSession, document_id: uuid_pkg.UUID) -> bool:
        """Mark a visible document deleted. Returns whether a row was affected."""
        stmt = (
            update(Document)
            .where(Document.id == document_id, Document.not_deleted())
            .values(deleted_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        await db.commit()

        return bool(result.rowcount)

    async def hard_delete(self, db: AsyncSession, document_id: uuid_pkg.UUID) -> bool:
        """Physically remove a document whatever its state. Administrative use only."""
        result = await db.execute(
            delete(Document).where(Document.id == document_id).execution_options(synchronize_session=False)
        )
        await db.commit()

        deleted = bool(result.rowcount)
        if deleted:
            logger.warning("Hard-deleted document", extra={"document_id": str(document_id)})
        return deleted
