"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - create_engine_from_settings(), create_session_factory(), create_tables(): Connection lifecycle
  - DocumentModel, ChunkModel: Persisted entities
  - document_crud, chunk_crud: CRUD operation singletons

Dependencies: sqlalchemy, rag_backend.configs
System role: Database adapter for documents and chunks
"""

from rag_backend.boundary.db.base import Base, TimestampMixin, UUIDMixin
from rag_backend.boundary.db.connection import (
    create_engine_from_settings,
    create_session_factory,
    create_tables,
    ping,
)
from rag_backend.boundary.db.CRUD import (
    BaseCRUD,
    ChunkCRUD,
    DocumentCRUD,
    chunk_crud,
    document_crud,
)
from rag_backend.boundary.db.models import ChunkModel, DocumentModel

__all__ = [
    "Base",
    "BaseCRUD",
    "ChunkCRUD",
    "ChunkModel",
    "DocumentCRUD",
    "DocumentModel",
    "TimestampMixin",
    "UUIDMixin",
    "chunk_crud",
    "create_engine_from_settings",
    "create_session_factory",
    "create_tables",
    "document_crud",
    "ping",
]
