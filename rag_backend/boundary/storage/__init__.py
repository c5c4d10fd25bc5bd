"""Raw document storage boundary."""

from rag_backend.boundary.storage.document_storage import (
    DocumentStorage,
    LocalDocumentStorage,
    S3DocumentStorage,
    build_storage_key,
    create_document_storage,
)

__all__ = [
    "DocumentStorage",
    "LocalDocumentStorage",
    "S3DocumentStorage",
    "build_storage_key",
    "create_document_storage",
]
