"""
Exception hierarchy for the retrieval core.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any

TRANSIENT_STATUSES = frozenset({429, 503})


class RagException(Exception):
    """Base exception for all retrieval core errors."""

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


class ValidationError(RagException):
    """Raised when create/update attributes are malformed."""

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
        self.field = field
        super().__init__(message, details)


class NotFoundError(RagException):
    """
    Raised when a collection, source or document is missing or not owned.

    Both cases share this error so callers cannot probe for existence.
    """

    def __init__(self, entity: str, entity_id: Any, details: dict[str, Any] | None = None) -> None:
        """
        Initialize not found error.

        Args:
            entity: Entity kind (collection, source, document)
            entity_id: Requested identifier
            details: Additional context
        """
        details = details or {}
        details[f"{entity}_id"] = str(entity_id)
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity.capitalize()} not found: {entity_id}", details)


class ProviderError(RagException):
    """Raised when an embedding or rerank backend fails."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        provider: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize provider error.

        Args:
            message: Backend error message
            status: HTTP-equivalent status code, None for transport failures
            provider: Backend name
            details: Additional context
        """
        details = details or {}
        if status is not None:
            details["status"] = status
        if provider:
            details["provider"] = provider
        self.status = status
        self.provider = provider
        super().__init__(message, details)

    @property
    def is_transient(self) -> bool:
        """Rate limits and unavailability are worth retrying."""
        return self.status in TRANSIENT_STATUSES

    def describe(self) -> str:
        """Human-readable form stored on failed documents."""
        if self.status is not None and self.message:
            return f"HTTP {self.status}: {self.message}"
        if self.status is not None:
            return f"HTTP {self.status}"
        return self.message


class EmbeddingError(RagException):
    """Raised when embedding a document fails after the document was marked error."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        cause: ProviderError | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize embedding error.

        Args:
            message: Error message
            document_id: ID of the document that failed
            cause: Underlying provider error
            details: Additional context
        """
        details = details or {}
        if document_id:
            details["document_id"] = document_id
        self.document_id = document_id
        self.cause = cause
        super().__init__(message, details)

    @property
    def is_transient(self) -> bool:
        """Delegates to the provider error that caused the failure."""
        return self.cause is not None and self.cause.is_transient
