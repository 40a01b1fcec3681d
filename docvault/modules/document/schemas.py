"""Pydantic schemas for documents.

These models are the validation layer of the API: each operation has its
own constraint set, and every violation in a request is reported together.
Titles and search terms are HTML-escaped on the way in.
"""

import uuid as uuid_pkg
from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

from ..common.constants import (
    CONTENT_MAX_LENGTH,
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    OWNER_ID_MAX_LENGTH,
    SEARCH_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
    ClassificationLevel,
)
from ..common.schemas import TimestampSchema
from ..common.validation import clean_text, escape_html, reject_boolean

OwnerId = Annotated[str, Field(min_length=1, max_length=OWNER_ID_MAX_LENGTH, description="Owning principal")]
ClassificationInput = Annotated[ClassificationLevel, BeforeValidator(reject_boolean)]


def _clean_title(value: str) -> str:
    return clean_text(value, field="title", min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH, escape=True)


def _clean_content(value: str) -> str:
    return clean_text(value, field="content", min_length=1, max_length=CONTENT_MAX_LENGTH)


def clean_search_term(value: str) -> str:
    """Trim, bound and HTML-escape a free-text search term.

    Stored titles are escaped, so the term is escaped the same way to keep
    matching consistent.
    """
    return escape_html(clean_text(value, field="search", min_length=1, max_length=SEARCH_MAX_LENGTH))


class DocumentCreate(BaseModel):
    """Schema for creating a new document.

    ``classification`` falls back to INTERNAL and ``owner_id`` to the current
    principal when omitted.
    """

    title: str = Field(description="Document title, 1-255 characters")
    content: str = Field(description="Document body, up to 1,000,000 characters")
    classification: Optional[ClassificationInput] = Field(
        default=None, description="1=PUBLIC, 2=INTERNAL, 3=CONFIDENTIAL, 4=SECRET"
    )
    owner_id: Optional[OwnerId] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        return _clean_title(value)

    @field_validator("content")
    @classmethod
    def validate_content(cls, value: str) -> str:
        return _clean_content(value)


class DocumentUpdate(BaseModel):
    """Schema for a partial update.

    Only ``title``, ``content`` and ``classification`` are mutable; any other
    key in the body, ``owner_id`` included, is ignored.
    """

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    content: Optional[str] = None
    classification: Optional[ClassificationInput] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _clean_title(value)

    @field_validator("content")
    @classmethod
    def validate_content(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _clean_content(value)

    def changes(self) -> dict:
        """Fields the client actually supplied with a value."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class DocumentRead(TimestampSchema):
    """Schema for reading document data."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid_pkg.UUID
    title: str
    content: str
    classification: int
    classification_name: str
    owner_id: str


class DocumentFilters(BaseModel):
    """Predicate and window for repository reads.

    ``limit``/``offset`` only apply to :meth:`DocumentRepository.list`;
    :meth:`DocumentRepository.count` ignores them.
    """

    owner_id: Optional[str] = None
    classification: Optional[int] = None
    search: Optional[str] = None
    limit: Optional[int] = None
    offset: Optional[int] = None

    def without_window(self) -> "DocumentFilters":
        return self.model_copy(update={"limit": None, "offset": None})


class DocumentListQuery(BaseModel):
    """Normalised list request: filters plus the requested page."""

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_PAGE_SIZE
    owner_id: Optional[str] = None
    classification: Optional[ClassificationLevel] = None
    search: Optional[str] = None

    @property
    def normalized_page(self) -> int:
        return max(1, self.page)

    @property
    def normalized_limit(self) -> int:
        return min(MAX_PAGE_SIZE, max(1, self.limit))

    @property
    def offset(self) -> int:
        return (self.normalized_page - 1) * self.normalized_limit

    def to_filters(self) -> DocumentFilters:
        return DocumentFilters(
            owner_id=self.owner_id,
            classification=int(self.classification) if self.classification is not None else None,
            search=self.search,
            limit=self.normalized_limit,
            offset=self.offset,
        )


class ClassificationBreakdown(BaseModel):
    public: int
    internal: int
    confidential: int
    secret: int


class DocumentStats(BaseModel):
    """Visible document counts, overall and per classification."""

    model_config = ConfigDict(populate_by_name=True)

    total: int
    by_classification: ClassificationBreakdown = Field(alias="byClassification")
