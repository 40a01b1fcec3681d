"""SQLAlchemy models for documents and their dormant version/share tables."""

import uuid as uuid_pkg
from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, Enum, ForeignKey, Index, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from ...infrastructure.database.models import SoftDeleteMixin, TimestampMixin, UUIDMixin, utcnow
from ...infrastructure.database.session import Base
from ..common.constants import (
    CLASSIFICATION_NAMES,
    DEFAULT_CLASSIFICATION,
    OWNER_ID_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    ClassificationLevel,
    PermissionLevel,
    Tables,
)

_CLASSIFICATION_VALUES = ", ".join(str(level.value) for level in ClassificationLevel)


class Document(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    """A classified document owned by a single principal.

    Rows are never erased through the public API: deleting a document sets
    ``deleted_at`` and the row becomes invisible to every normal query.
    """

    __tablename__ = Tables.DOCUMENTS
    __table_args__ = (
        CheckConstraint(f"classification IN ({_CLASSIFICATION_VALUES})", name="ck_documents_classification"),
        Index("ix_documents_owner_id", "owner_id"),
        Index("ix_documents_classification", "classification"),
        Index("ix_documents_created_at", "created_at"),
        Index("ix_documents_title", "title"),
        Index("ix_documents_owner_id_classification", "owner_id", "classification"),
    )

    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    owner_id: Mapped[str] = mapped_column(String(OWNER_ID_MAX_LENGTH), nullable=False)
    classification: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=int(DEFAULT_CLASSIFICATION),
        server_default=str(int(DEFAULT_CLASSIFICATION)),
    )

    @property
    def classification_name(self) -> str:
        return CLASSIFICATION_NAMES[self.classification]


class DocumentVersion(Base, UUIDMixin):
    """Snapshot of a document's content at a given version number.

    Schema only: nothing in the application writes or reads versions yet.
    """

    __tablename__ = Tables.DOCUMENT_VERSIONS
    __table_args__ = (
        UniqueConstraint("document_id", "version", name="uq_document_versions_document_id_version"),
        Index("ix_document_versions_document_id", "document_id"),
        Index("ix_document_versions_document_id_version", "document_id", "version"),
        Index("ix_document_versions_created_by", "created_by"),
        Index("ix_document_versions_created_at", "created_at"),
    )

    document_id: Mapped[uuid_pkg.UUID] = mapped_column(
        Uuid, ForeignKey(f"{Tables.DOCUMENTS}.id", ondelete="CASCADE"), nullable=False
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_by: Mapped[str] = mapped_column(String(OWNER_ID_MAX_LENGTH), nullable=False)
    change_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default_factory=utcnow, init=False)


class DocumentShare(Base, UUIDMixin):
    """Permission grant on a document from one principal to another.

    Schema only: sharing is not enforced anywhere yet.
    """

    __tablename__ = Tables.DOCUMENT_SHARES
    __table_args__ = (
        UniqueConstraint("document_id", "shared_with_user_id", name="uq_document_shares_document_id_user"),
        Index("ix_document_shares_document_id", "document_id"),
        Index("ix_document_shares_shared_with_user_id", "shared_with_user_id"),
        Index("ix_document_shares_document_id_user", "document_id", "shared_with_user_id"),
        Index("ix_document_shares_shared_by", "shared_by"),
        Index("ix_document_shares_expires_at", "expires_at"),
    )

    document_id: Mapped[uuid_pkg.UUID] = mapped_column(
        Uuid, ForeignKey(f"{Tables.DOCUMENTS}.id", ondelete="CASCADE"), nullable=False
    )
    shared_with_user_id: Mapped[str] = mapped_column(String(OWNER_ID_MAX_LENGTH), nullable=False)
    shared_by: Mapped[str] = mapped_column(String(OWNER_ID_MAX_LENGTH), nullable=False)
    permission_level: Mapped[PermissionLevel] = mapped_column(
        Enum(
            PermissionLevel,
            name="permission_level",
            values_callable=lambda levels: [level.value for level in levels],
            native_enum=False,
            create_constraint=True,
        ),
        nullable=False,
        default=PermissionLevel.READ,
    )
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True, default=None)
    shared_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default_factory=utcnow, init=False)
