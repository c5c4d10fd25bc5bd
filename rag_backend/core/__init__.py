"""
Core business logic module.

Contains the exception hierarchy, chunking, similarity ranking, context
assembly, answer generation and the ingestion pipeline.
"""

from rag_backend.core.exceptions import (
    ConfigurationError,
    DimensionMismatchError,
    DocumentNotFoundError,
    DocumentProcessingError,
    InvalidConfigurationError,
    KnowledgeBaseError,
    UnsupportedInputError,
    UpstreamFailureError,
    ValidationError,
)

__all__ = [
    "ConfigurationError",
    "DimensionMismatchError",
    "DocumentNotFoundError",
    "DocumentProcessingError",
    "InvalidConfigurationError",
    "KnowledgeBaseError",
    "UnsupportedInputError",
    "UpstreamFailureError",
    "ValidationError",
]
