"""ORM models registered on the shared declarative base."""

from rag_backend.boundary.db.models.chat_message_model import ChatMessageModel
from rag_backend.boundary.db.models.chunk_model import ChunkModel
from rag_backend.boundary.db.models.document_model import DocumentModel

__all__ = ["ChatMessageModel", "ChunkModel", "DocumentModel"]
