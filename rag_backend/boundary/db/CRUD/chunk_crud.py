"""
Chunk CRUD operations.

Owner-scoped reads and document-scoped deletes over ChunkModel.

Dependencies: sqlalchemy, rag_backend.boundary.db.models.chunk_model
System role: Chunk persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from rag_backend.boundary.db.CRUD.base_crud import BaseCRUD
from rag_backend.boundary.db.models.chunk_model import ChunkModel


class ChunkCRUD(BaseCRUD[ChunkModel]):
    """CRUD operations for ChunkModel."""

    def __init__(self) -> None:
        super().__init__(ChunkModel)

    async def get_by_user(self, session: AsyncSession, user_id: str) -> Sequence[ChunkModel]:
        """All chunks in one owner's scope, in insertion order per document."""
        stmt = (
            select(ChunkModel)
            .where(ChunkModel.user_id == user_id)
            .order_by(ChunkModel.created_at, ChunkModel.chunk_index)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def delete_by_document(self, session: AsyncSession, document_id: UUID) -> int:
        """
        Delete every chunk of a document.

        Returns:
            int: Rows deleted; 0 when the document had none
        """
        stmt = delete(ChunkModel).where(ChunkModel.document_id == document_id)
        result = await session.execute(stmt)
        return result.rowcount or 0


chunk_crud = ChunkCRUD()
