"""
Chunk ORM model.

Stores chunk text with its embedding as a JSON list of floats. Retrieval
scans every row of one owner, so the table is indexed by user_id and by
document_id for cleanup.

Dependencies: sqlalchemy, rag_backend.boundary.db.base
System role: Chunk persistence backing the chunk store
"""

import uuid

from sqlalchemy import JSON, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from rag_backend.boundary.db.base import Base, TimestampMixin, UUIDMixin


class ChunkModel(Base, UUIDMixin, TimestampMixin):
    """
    Persisted chunk record.

    No foreign key to documents: chunks are removed explicitly with their
    document, and duplicate inserts are tolerated.
    """

    __tablename__ = "chunks"

    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), nullable=False, index=True
    )
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    chunk_text: Mapped[str] = mapped_column(Text, nullable=False)
    embedding: Mapped[list[float]] = mapped_column(JSON, nullable=False)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    chunk_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
