"""FastAPI dependencies."""

from rag_backend.api.deps.dependencies import (
    ServiceContainer,
    get_chat_service,
    get_container,
    get_db_session,
    get_document_service,
)

__all__ = [
    "ServiceContainer",
    "get_chat_service",
    "get_container",
    "get_db_session",
    "get_document_service",
]
