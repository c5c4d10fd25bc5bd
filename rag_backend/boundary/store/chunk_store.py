"""
Chunk store adapter.

Defines the storage contract retrieval and ingestion depend on, and its
SQLAlchemy implementation. Transport errors are translated into the domain
error taxonomy here so callers never see driver exceptions.

Dependencies: sqlalchemy, rag_backend.boundary.db
System role: Persistence boundary for chunk text and embeddings
"""

import logging
from collections.abc import Sequence
from typing import Protocol, runtime_checkable
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rag_backend.boundary.db.CRUD.chunk_crud import chunk_crud
from rag_backend.boundary.db.CRUD.document_crud import document_crud
from rag_backend.boundary.db.models.chunk_model import ChunkModel
from rag_backend.core.exceptions import (
    ConfigurationError,
    DocumentNotFoundError,
    UpstreamFailureError,
)
from rag_backend.models.chunk import Chunk

logger = logging.getLogger(__name__)


@runtime_checkable
class ChunkStore(Protocol):
    """Storage operations needed for chunk retrieval and ingestion."""

    async def fetch_candidates(self, owner_id: str) -> list[Chunk]: ...

    async def persist(self, chunk: Chunk) -> Chunk: ...

    async def persist_many(self, chunks: Sequence[Chunk]) -> list[Chunk]: ...

    async def persist_for_document(
        self, document_id: UUID, chunks: Sequence[Chunk]
    ) -> list[Chunk]: ...

    async def delete_all_for_document(self, document_id: UUID) -> int: ...


def _to_domain(row: ChunkModel) -> Chunk:
    return Chunk(
        id=row.id,
        document_id=row.document_id,
        file_name=row.file_name,
        owner_id=row.user_id,
        chunk_index=row.chunk_index,
        text=row.chunk_text,
        embedding=list(row.embedding),
        created_at=row.created_at,
    )


def _to_row(chunk: Chunk) -> dict:
    return {
        "document_id": chunk.document_id,
        "file_name": chunk.file_name,
        "chunk_text": chunk.text,
        "embedding": list(chunk.embedding),
        "user_id": chunk.owner_id,
        "chunk_index": chunk.chunk_index,
    }


class SqlChunkStore:
    """
    ChunkStore backed by the `chunks` table.

    Each operation runs in its own session and commits on success.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None) -> None:
        self._session_factory = session_factory

    def _factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            raise ConfigurationError(
                "chunk_store",
                "Chunk store has no database configured",
            )
        return self._session_factory

    async def fetch_candidates(self, owner_id: str) -> list[Chunk]:
        """
        Load every chunk in an owner's scope.

        Raises:
            ConfigurationError: If no database is configured
            UpstreamFailureError: If the query fails
        """
        factory = self._factory()
        try:
            async with factory() as session:
                rows = await chunk_crud.get_by_user(session, owner_id)
        except SQLAlchemyError as e:
            raise UpstreamFailureError(
                "fetch_candidates",
                f"Failed to load chunks: {e}",
                details={"owner_id": owner_id},
            ) from e

        logger.debug(f"{__name__}:fetch_candidates - {len(rows)} chunks for owner {owner_id}")
        return [_to_domain(row) for row in rows]

    async def persist(self, chunk: Chunk) -> Chunk:
        stored = await self.persist_many([chunk])
        return stored[0]

    async def persist_many(self, chunks: Sequence[Chunk]) -> list[Chunk]:
        """
        Insert chunks in a single transaction.

        Returns:
            list[Chunk]: The chunks with store-assigned ids and timestamps

        Raises:
            ConfigurationError: If no database is configured
            UpstreamFailureError: If the insert fails
        """
        if not chunks:
            return []
        factory = self._factory()
        try:
            async with factory() as session:
                rows = await chunk_crud.create_many(session, [_to_row(c) for c in chunks])
                await session.commit()
                stored = [_to_domain(row) for row in rows]
        except SQLAlchemyError as e:
            raise UpstreamFailureError(
                "persist",
                f"Failed to store chunks: {e}",
                details={"document_id": str(chunks[0].document_id), "count": len(chunks)},
            ) from e

        logger.info(
            f"{__name__}:persist_many - Stored {len(stored)} chunks",
            extra={"document_id": str(chunks[0].document_id)},
        )
        return stored

    async def persist_for_document(
        self, document_id: UUID, chunks: Sequence[Chunk]
    ) -> list[Chunk]:
        """
        Insert a document's chunks only while its record still exists.

        The existence check and the insert share one transaction and the
        document row is locked, so a concurrent document delete either
        happens before (nothing is inserted) or waits for the insert to
        commit and then removes the new chunks with the rest.

        Raises:
            DocumentNotFoundError: The document was deleted; nothing stored
            ConfigurationError: If no database is configured
            UpstreamFailureError: If the insert fails
        """
        factory = self._factory()
        try:
            async with factory() as session:
                if not await document_crud.exists(session, document_id, for_update=True):
                    raise DocumentNotFoundError(str(document_id))
                rows = await chunk_crud.create_many(session, [_to_row(c) for c in chunks])
                await session.commit()
                stored = [_to_domain(row) for row in rows]
        except SQLAlchemyError as e:
            raise UpstreamFailureError(
                "persist",
                f"Failed to store chunks: {e}",
                details={"document_id": str(document_id), "count": len(chunks)},
            ) from e

        logger.info(
            f"{__name__}:persist_for_document - Stored {len(stored)} chunks",
            extra={"document_id": str(document_id)},
        )
        return stored

    async def delete_all_for_document(self, document_id: UUID) -> int:
        """
        Remove every chunk of a document. Repeating the call is a no-op.

        Returns:
            int: Number of chunks removed

        Raises:
            ConfigurationError: If no database is configured
            UpstreamFailureError: If the delete fails
        """
        factory = self._factory()
        try:
            async with factory() as session:
                deleted = await chunk_crud.delete_by_document(session, document_id)
                await session.commit()
        except SQLAlchemyError as e:
            raise UpstreamFailureError(
                "delete_all_for_document",
                f"Failed to delete chunks: {e}",
                details={"document_id": str(document_id)},
            ) from e

        if deleted:
            logger.info(
                f"{__name__}:delete_all_for_document - Deleted {deleted} chunks",
                extra={"document_id": str(document_id)},
            )
        return deleted
