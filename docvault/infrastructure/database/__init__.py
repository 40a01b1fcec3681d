"""Database engine, session dependency and model mixins."""

from .models import SoftDeleteMixin, TimestampMixin, UUIDMixin, utcnow
from .session import Base, async_session, create_tables, drop_tables, engine, local_session

__all__ = [
    "Base",
    "SoftDeleteMixin",
    "TimestampMixin",
    "UUIDMixin",
    "async_session",
    "create_tables",
    "drop_tables",
    "engine",
    "local_session",
    "utcnow",
]
