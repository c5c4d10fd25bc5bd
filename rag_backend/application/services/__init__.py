"""Application services."""

from rag_backend.application.services.chat_service import ChatService
from rag_backend.application.services.document_service import DocumentService
from rag_backend.application.services.retrieval_service import RetrievalService

__all__ = ["ChatService", "DocumentService", "RetrievalService"]
