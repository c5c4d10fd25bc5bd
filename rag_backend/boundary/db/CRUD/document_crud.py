"""
Document CRUD operations.

Extends BaseCRUD with owner-scoped queries and ingestion status updates.

Dependencies: sqlalchemy, rag_backend.boundary.db.models.document_model
System role: Document persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rag_backend.boundary.db.CRUD.base_crud import BaseCRUD
from rag_backend.boundary.db.models.document_model import DocumentModel
from rag_backend.models.document import DocumentStatus


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """CRUD operations for DocumentModel."""

    def __init__(self) -> None:
        super().__init__(DocumentModel)

    async def get_by_owner(
        self,
        session: AsyncSession,
        owner_id: str,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[DocumentModel]:
        """
        Retrieve an owner's documents, newest first.

        Args:
            session: Async database session
            owner_id: Knowledge base owner
            limit: Maximum number of documents to return
            offset: Number of documents to skip

        Returns:
            Sequence of DocumentModels belonging to the owner
        """
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.owner_id == owner_id)
            .order_by(DocumentModel.created_at.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_owned(
        self,
        session: AsyncSession,
        id: UUID,
        owner_id: str,
    ) -> DocumentModel | None:
        """Return the document only if it belongs to owner_id."""
        stmt = select(DocumentModel).where(
            DocumentModel.id == id,
            DocumentModel.owner_id == owner_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_status(
        self,
        session: AsyncSession,
        id: UUID,
        status: DocumentStatus,
        error_message: str | None = None,
        chunk_count: int | None = None,
    ) -> DocumentModel | None:
        """
        Update document ingestion status.

        Args:
            session: Async database session
            id: Document UUID
            status: New status
            error_message: Error details if status is FAILED
            chunk_count: Stored chunk count if status is COMPLETED

        Returns:
            Updated DocumentModel if found, None otherwise
        """
        update_fields: dict = {"status": status}
        if error_message is not None:
            update_fields["error_message"] = error_message
        if chunk_count is not None:
            update_fields["chunk_count"] = chunk_count
        return await self.update_by_id(session, id, **update_fields)

    async def mark_processing(self, session: AsyncSession, id: UUID) -> DocumentModel | None:
        return await self.update_by_id(
            session, id, status=DocumentStatus.PROCESSING, error_message=None
        )

    async def mark_completed(
        self,
        session: AsyncSession,
        id: UUID,
        chunk_count: int,
    ) -> DocumentModel | None:
        return await self.update_status(
            session, id, DocumentStatus.COMPLETED, chunk_count=chunk_count
        )

    async def mark_failed(
        self,
        session: AsyncSession,
        id: UUID,
        error_message: str,
    ) -> DocumentModel | None:
        """
        Mark document as failed with error details.

        The message is truncated to fit the column.
        """
        return await self.update_status(
            session, id, DocumentStatus.FAILED, error_message[:2048]
        )


document_crud = DocumentCRUD()
