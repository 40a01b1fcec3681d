import uuid as uuid_pkg
from datetime import UTC, datetime
from typing import Optional

from sqlalchemy import ColumnElement, DateTime, Uuid
from sqlalchemy.orm import Mapped, MappedAsDataclass, mapped_column


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


class UUIDMixin(MappedAsDataclass):
    """Mixin to add a UUID primary key named ``id`` to database models.

    The identifier is generated client side with ``uuid4()`` when the model
    is instantiated, so it is known before the row is flushed and is never
    reused. The portable ``Uuid`` type maps to the native ``UUID`` column on
    PostgreSQL and to a ``CHAR(32)`` elsewhere.

    The field is excluded from dataclass initialization (init=False)
    to prevent manual id assignment during model creation.
    """

    id: Mapped[uuid_pkg.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default_factory=uuid_pkg.uuid4,
        init=False,
    )


class TimestampMixin(MappedAsDataclass):
    """Mixin for adding created_at and updated_at timestamp columns.

    Both timestamps are UTC and set when the model is instantiated. Updates
    issued through the repository refresh ``updated_at`` explicitly, since
    bulk ``UPDATE`` statements bypass ORM-level ``onupdate`` hooks.

    Attributes:
        created_at: Timestamp when the record was created.
        updated_at: Timestamp when the record was last mutated.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default_factory=utcnow,
        nullable=False,
        init=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default_factory=utcnow,
        nullable=False,
        init=False,
    )


class SoftDeleteMixin(MappedAsDataclass):
    """Mixin to add soft delete functionality to database models.

    A record with a non-null ``deleted_at`` is logically deleted: it stays in
    the table but must be invisible to every normal read, count and update.
    Queries obtain that visibility rule from :meth:`not_deleted` instead of
    spelling out the predicate themselves.

    Example:
        ```python
        stmt = select(Document).where(Document.not_deleted())
        ```
    """

    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
        init=False,
    )

    @classmethod
    def not_deleted(cls) -> ColumnElement[bool]:
        """SQL predicate matching rows that have not been soft deleted."""
        return cls.deleted_at.is_(None)
