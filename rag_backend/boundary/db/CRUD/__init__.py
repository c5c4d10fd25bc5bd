"""CRUD operation classes and their module-level singletons."""

from rag_backend.boundary.db.CRUD.base_crud import BaseCRUD
from rag_backend.boundary.db.CRUD.chat_history_crud import ChatHistoryCRUD, chat_history_crud
from rag_backend.boundary.db.CRUD.chunk_crud import ChunkCRUD, chunk_crud
from rag_backend.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud

__all__ = [
    "BaseCRUD",
    "ChatHistoryCRUD",
    "ChunkCRUD",
    "DocumentCRUD",
    "chat_history_crud",
    "chunk_crud",
    "document_crud",
]
