"""Common constants used across the application."""

from enum import Enum, IntEnum
from typing import Dict, NamedTuple, Type

from fastapi import status

from .exceptions import (
    DocumentNotFoundError,
    DomainError,
    EmptyUpdateError,
    InvalidReferenceError,
    MissingFieldError,
    PermissionDeniedError,
    ResourceExistsError,
    ResourceNotFoundError,
    UnauthorizedError,
    ValidationError,
)


class ClassificationLevel(IntEnum):
    """Sensitivity tier attached to a document."""

    PUBLIC = 1
    INTERNAL = 2
    CONFIDENTIAL = 3
    SECRET = 4


CLASSIFICATION_NAMES: Dict[int, str] = {level.value: level.name for level in ClassificationLevel}

DEFAULT_CLASSIFICATION = ClassificationLevel.INTERNAL


class PermissionLevel(str, Enum):
    """Grant levels for document shares."""

    READ = "read"
    WRITE = "write"
    ADMIN = "admin"


class Tables:
    DOCUMENTS = "documents"
    DOCUMENT_VERSIONS = "document_versions"
    DOCUMENT_SHARES = "document_shares"


# Validation constraints
TITLE_MIN_LENGTH = 1
TITLE_MAX_LENGTH = 255
CONTENT_MAX_LENGTH = 1_000_000
OWNER_ID_MAX_LENGTH = 255
SEARCH_MAX_LENGTH = 255

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# PostgreSQL SQLSTATE codes for integrity violations
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NOT_NULL_VIOLATION = "23502"
CHECK_VIOLATION = "23514"


class ErrorMapping(NamedTuple):
    status_code: int
    error: str


EXCEPTION_MAPPING: Dict[Type[DomainError], ErrorMapping] = {
    EmptyUpdateError: ErrorMapping(status.HTTP_400_BAD_REQUEST, "No valid fields to update"),
    ValidationError: ErrorMapping(status.HTTP_400_BAD_REQUEST, "Validation failed"),
    UnauthorizedError: ErrorMapping(status.HTTP_401_UNAUTHORIZED, "Unauthorized"),
    PermissionDeniedError: ErrorMapping(status.HTTP_403_FORBIDDEN, "Forbidden"),
    DocumentNotFoundError: ErrorMapping(status.HTTP_404_NOT_FOUND, "Document not found"),
    ResourceNotFoundError: ErrorMapping(status.HTTP_404_NOT_FOUND, "Not found"),
    ResourceExistsError: ErrorMapping(status.HTTP_409_CONFLICT, "Resource already exists"),
    InvalidReferenceError: ErrorMapping(status.HTTP_400_BAD_REQUEST, "Invalid reference"),
    MissingFieldError: ErrorMapping(status.HTTP_400_BAD_REQUEST, "Missing required field"),
}

SQLSTATE_MAPPING: Dict[str, ErrorMapping] = {
    UNIQUE_VIOLATION: ErrorMapping(status.HTTP_409_CONFLICT, "Resource already exists"),
    FOREIGN_KEY_VIOLATION: ErrorMapping(status.HTTP_400_BAD_REQUEST, "Invalid reference"),
    NOT_NULL_VIOLATION: ErrorMapping(status.HTTP_400_BAD_REQUEST, "Missing required field"),
    CHECK_VIOLATION: ErrorMapping(status.HTTP_400_BAD_REQUEST, "Invalid field value"),
}
