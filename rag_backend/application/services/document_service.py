"""
Document service orchestrator.

Coordinates document upload, listing, status lookup and deletion. Uploads
are validated and stored synchronously; chunking and embedding are handed
to the ingestion dispatcher.

Dependencies: fastapi, sqlalchemy, rag_backend.boundary, rag_backend.workers
System role: Document management orchestration
"""

import logging
from collections.abc import Sequence
from uuid import UUID

from fastapi import BackgroundTasks
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from rag_backend.boundary.db.CRUD.document_crud import document_crud
from rag_backend.boundary.db.models.document_model import DocumentModel
from rag_backend.boundary.storage.document_storage import DocumentStorage, build_storage_key
from rag_backend.boundary.store.chunk_store import ChunkStore
from rag_backend.core.document_processing.models import IngestionJob
from rag_backend.core.document_processing.tasks.parsing_task import ParsingTask
from rag_backend.core.exceptions import (
    DocumentNotFoundError,
    UpstreamFailureError,
    ValidationError,
)
from rag_backend.models.document import DocumentStatus
from rag_backend.observability.log_utils import log_exception_with_context
from rag_backend.workers.dispatcher import IngestionDispatcher

logger = logging.getLogger(__name__)


class DocumentService:
    """
    Document lifecycle: upload, status, listing, deletion.

    The service owns one request-scoped database session and commits the
    document record before the ingestion job is dispatched.
    """

    def __init__(
        self,
        db: AsyncSession,
        storage: DocumentStorage,
        chunk_store: ChunkStore,
        dispatcher: IngestionDispatcher,
        background_tasks: BackgroundTasks | None = None,
        parser: ParsingTask | None = None,
        max_upload_bytes: int | None = None,
    ) -> None:
        self.db = db
        self._storage = storage
        self._chunk_store = chunk_store
        self._dispatcher = dispatcher
        self._background_tasks = background_tasks
        self._parser = parser or ParsingTask()
        self._max_upload_bytes = max_upload_bytes

    async def upload_document(
        self,
        owner_id: str,
        file_name: str,
        content_type: str | None,
        data: bytes,
    ) -> DocumentModel:
        """
        Store an upload and dispatch it for ingestion.

        Steps:
        1. Check the file type has an extraction path
        2. Reject empty or oversized payloads
        3. Store raw bytes
        4. Create PENDING document record and commit
        5. Dispatch the ingestion job

        Returns:
            DocumentModel: The pending document record

        Raises:
            UnsupportedInputError: File type cannot be parsed
            ValidationError: Empty or oversized file, or missing owner
            UpstreamFailureError: Storage write, record creation or dispatch failed
        """
        if not owner_id:
            raise ValidationError("owner_id is required", field="owner_id")
        self._parser.ensure_supported(file_name, content_type)
        if not data:
            raise ValidationError("Uploaded file is empty", field="file")
        if self._max_upload_bytes is not None and len(data) > self._max_upload_bytes:
            raise ValidationError(
                f"File exceeds the {self._max_upload_bytes} byte upload limit",
                field="file",
                details={"size": len(data)},
            )

        storage_key = build_storage_key(owner_id, file_name)
        await self._storage.save(storage_key, data, content_type)

        try:
            document = await document_crud.create(
                self.db,
                owner_id=owner_id,
                file_name=file_name,
                content_type=content_type,
                storage_key=storage_key,
                status=DocumentStatus.PENDING,
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            await self._remove_raw_file(storage_key)
            raise UpstreamFailureError(
                "create_document",
                "Could not save the document record",
                details={"storage_key": storage_key},
            ) from e

        logger.info(
            f"{__name__}:upload_document - Stored document_id={document.id}, size={len(data)}",
            extra={"owner_id": owner_id, "storage_key": storage_key},
        )

        job = IngestionJob(
            document_id=document.id,
            owner_id=owner_id,
            file_name=file_name,
            content_type=content_type,
            storage_key=storage_key,
        )
        try:
            self._dispatcher.dispatch(job, self._background_tasks)
        except UpstreamFailureError as e:
            await document_crud.mark_failed(self.db, document.id, e.message)
            await self.db.commit()
            raise
        return document

    async def _remove_raw_file(self, storage_key: str) -> None:
        try:
            await self._storage.delete(storage_key)
        except UpstreamFailureError as e:
            logger.warning(f"{__name__}:_remove_raw_file - Raw file not removed: {e}")

    async def list_documents(self, owner_id: str) -> Sequence[DocumentModel]:
        return await document_crud.get_by_owner(self.db, owner_id)

    async def get_document(self, document_id: UUID, owner_id: str) -> DocumentModel:
        """
        Raises:
            DocumentNotFoundError: Missing, or owned by someone else
        """
        document = await document_crud.get_owned(self.db, document_id, owner_id)
        if document is None:
            raise DocumentNotFoundError(str(document_id))
        return document

    async def delete_document(self, document_id: UUID, owner_id: str) -> None:
        """
        Delete a document with its chunks and raw file.

        Chunks are removed before and again after the record. The second
        pass catches chunks an in-flight ingestion stored before the record
        went away; later inserts are refused by the chunk store.

        Raises:
            DocumentNotFoundError: Missing, or owned by someone else
            UpstreamFailureError: Chunk deletion failed
        """
        document = await self.get_document(document_id, owner_id)

        removed = await self._chunk_store.delete_all_for_document(document.id)

        # Record and chunks are removed even when the raw file is not
        await self._remove_raw_file(document.storage_key)

        await document_crud.delete_by_id(self.db, document.id)
        await self.db.commit()

        try:
            removed += await self._chunk_store.delete_all_for_document(document.id)
        except UpstreamFailureError as e:
            log_exception_with_context(
                logger,
                f"{__name__}:delete_document - Chunk cleanup after record deletion failed",
                e,
                document_id=str(document_id),
            )

        logger.info(
            f"{__name__}:delete_document - Deleted document_id={document_id}, chunks={removed}"
        )
