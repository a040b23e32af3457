"""
Exception hierarchy for Legal Search application.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class LegalSearchException(Exception):
    """Base exception for all Legal Search application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging

        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(LegalSearchException):
    """Raised when input validation fails (empty query, bad parent reference)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class NotFoundError(LegalSearchException):
    """Raised when a document or chunk cannot be found."""

    def __init__(
        self,
        resource: str,
        resource_id: Any,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize not found error.

        Args:
            resource: Kind of resource ("document", "chunk")
            resource_id: ID of the missing resource
            details: Additional context
        """
        details = details or {}
        details[f"{resource}_id"] = str(resource_id)
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource.capitalize()} not found: {resource_id}", details)


class ExternalServiceError(LegalSearchException):
    """Raised when a backend call fails (embedding, vector, keyword, blob, OCR)."""

    def __init__(
        self,
        message: str,
        service: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize external service error.

        Args:
            message: Error message
            service: Collaborator that failed (embedding, vector_store, ...)
            operation: Operation that failed (upsert, query, delete)
            details: Additional context
        """
        details = details or {}
        details["service"] = service
        if operation:
            details["operation"] = operation
        self.service = service
        self.operation = operation
        super().__init__(message, details)


class DataIntegrityError(LegalSearchException):
    """Raised when stored data violates an invariant (e.g. a version cycle)."""

    pass


class DocumentProcessingError(LegalSearchException):
    """Raised when a document cannot be turned into chunks."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize document processing error.

        Args:
            message: Error message
            document_id: ID of the document that failed
            details: Additional context
        """
        details = details or {}
        if document_id:
            details["document_id"] = document_id
        super().__init__(message, details)
