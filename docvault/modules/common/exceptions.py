"""Domain exception classes for business logic errors."""

from typing import Any, Dict, List, Optional


class DomainError(Exception):
    """Base class for all domain-specific errors."""

    def __init__(self, message: str = "", *, details: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ResourceNotFoundError(DomainError):
    """Raised when a requested resource cannot be found."""

    pass


class DocumentNotFoundError(ResourceNotFoundError):
    """Raised when an id does not resolve to a visible document."""

    def __init__(self, document_id: Any) -> None:
        super().__init__(f"Document with ID {document_id} does not exist")
        self.document_id = document_id


class ResourceExistsError(DomainError):
    """Raised when attempting to create a resource that already exists."""

    pass


class ValidationError(DomainError):
    """Raised when data validation fails."""

    pass


class InvalidReferenceError(DomainError):
    """Raised when a write points at a row that does not exist."""

    pass


class MissingFieldError(DomainError):
    """Raised when storage rejects a write for lacking a required value."""

    pass


class UnauthorizedError(DomainError):
    """Raised when a request carries no valid credentials."""

    pass


class PermissionDeniedError(DomainError):
    """Raised when a user attempts an action they don't have permission for."""

    pass


class EmptyUpdateError(ValidationError):
    """Raised when an update names none of the mutable fields."""

    def __init__(self) -> None:
        super().__init__("At least one of title, content, or classification must be provided")
