"""
Exception hierarchy for the knowledge base RAG service.

Every error carries a human-readable message and a details dict so logs
and API responses can report context without parsing strings.

Dependencies: None (pure domain layer)
System role: Centralized error taxonomy across ingestion and retrieval
"""

from typing import Any


class KnowledgeBaseError(Exception):
    """Base exception for all knowledge base errors."""

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


class ValidationError(KnowledgeBaseError):
    """Raised when a caller passes a malformed argument."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class InvalidConfigurationError(ValidationError):
    """Raised for chunking or ranking parameters that cannot work (e.g. overlap >= chunk size)."""


class ConfigurationError(KnowledgeBaseError):
    """Raised when a required collaborator or credential is missing."""

    def __init__(
        self,
        component: str,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Args:
            component: Name of the unconfigured component (e.g. "chunk_store")
            message: Optional override of the default message
            details: Additional context
        """
        details = details or {}
        details["component"] = component
        self.component = component
        super().__init__(message or f"{component} is not configured", details)


class UnsupportedInputError(KnowledgeBaseError):
    """Raised when an uploaded file type cannot be parsed."""

    def __init__(
        self,
        content_type: str | None,
        file_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["content_type"] = content_type
        if file_name:
            details["file_name"] = file_name
        self.content_type = content_type
        super().__init__(f"Unsupported file type: {content_type}", details)


class UpstreamFailureError(KnowledgeBaseError):
    """Raised when the chunk store, embedding API, storage or LLM call fails."""

    def __init__(
        self,
        operation: str,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Args:
            operation: Upstream operation that failed (e.g. "embed", "fetch_candidates")
            message: Optional description of the failure
            details: Additional context
        """
        details = details or {}
        details["operation"] = operation
        self.operation = operation
        super().__init__(message or f"Upstream call failed: {operation}", details)


class DimensionMismatchError(KnowledgeBaseError):
    """Raised when two vectors being compared have different lengths."""

    def __init__(
        self,
        expected: int,
        actual: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details.update({"expected": expected, "actual": actual})
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Vector dimension mismatch: expected {expected}, got {actual}", details
        )


class DocumentProcessingError(KnowledgeBaseError):
    """Raised when an ingestion stage fails for a document."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        stage: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Args:
            message: Error message
            document_id: ID of document being processed
            stage: Pipeline stage where the failure happened
            details: Additional context
        """
        details = details or {}
        if document_id:
            details["document_id"] = document_id
        if stage:
            details["stage"] = stage
        self.stage = stage
        super().__init__(message, details)


class DocumentNotFoundError(KnowledgeBaseError):
    """Raised when a document does not exist or is not owned by the caller."""

    def __init__(self, document_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["document_id"] = document_id
        super().__init__(f"Document not found: {document_id}", details)
