"""
Document ingestion pipeline.

Coordinates storage download, text extraction, chunking, embedding and
chunk persistence for one document. Errors propagate to the caller so
the document can be marked failed.

Dependencies: fastapi.concurrency, rag_backend boundaries and core tasks
System role: Pipeline orchestration (coordinates only)
"""

import logging
import time
from uuid import UUID

from fastapi.concurrency import run_in_threadpool

from rag_backend.boundary.embeddings.embedding_client import EmbeddingClient
from rag_backend.boundary.storage.document_storage import DocumentStorage
from rag_backend.boundary.store.chunk_store import ChunkStore
from rag_backend.core.chunker import TextChunker
from rag_backend.core.document_processing.models import IngestionJob, PipelineResult
from rag_backend.core.document_processing.tasks.parsing_task import ParsingTask
from rag_backend.models.chunk import Chunk

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """Orchestrate ingestion: delete old chunks -> download -> parse -> chunk -> embed -> persist."""

    def __init__(
        self,
        storage: DocumentStorage,
        embedder: EmbeddingClient,
        chunk_store: ChunkStore,
        chunker: TextChunker,
        parser: ParsingTask | None = None,
    ) -> None:
        self._storage = storage
        self._embedder = embedder
        self._chunk_store = chunk_store
        self._chunker = chunker
        self._parser = parser or ParsingTask()

    async def process(self, job: IngestionJob) -> PipelineResult:
        """
        Process one stored document through the full pipeline.

        Re-ingesting a document replaces its chunks.

        Args:
            job: Document to ingest

        Returns:
            PipelineResult: Stored chunk count and timing

        Raises:
            UnsupportedInputError: File type has no extraction path
            DocumentProcessingError: Text extraction failed
            ConfigurationError: Store or embedding client not configured
            UpstreamFailureError: Storage, embedding or store call failed
            DocumentNotFoundError: The document was deleted while processing
        """
        start_time = time.perf_counter()
        document_id = str(job.document_id)
        logger.info(
            f"{__name__}:process - START document_id={document_id}, file={job.file_name}"
        )

        removed = await self._chunk_store.delete_all_for_document(job.document_id)
        if removed:
            logger.info(f"{__name__}:process - Removed {removed} previous chunks")

        local_path = await self._storage.download(job.storage_key)
        try:
            text = await run_in_threadpool(
                self._parser.parse, local_path, job.file_name, job.content_type
            )
        finally:
            await self._storage.release(local_path)

        if not text:
            logger.warning(
                f"{__name__}:process - No extractable text in {job.file_name}",
                extra={"document_id": document_id},
            )
            return PipelineResult(
                document_id=job.document_id,
                chunk_count=0,
                processing_time_ms=(time.perf_counter() - start_time) * 1000,
            )

        pieces = self._chunker.split(text)
        logger.info(f"{__name__}:process - Split {len(text)} chars into {len(pieces)} chunks")

        vectors = await self._embedder.embed_many(pieces)

        chunks = [
            Chunk(
                document_id=job.document_id,
                file_name=job.file_name,
                owner_id=job.owner_id,
                chunk_index=index,
                text=piece,
                embedding=vector,
            )
            for index, (piece, vector) in enumerate(zip(pieces, vectors))
        ]
        stored = await self._chunk_store.persist_for_document(job.document_id, chunks)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"{__name__}:process - END document_id={document_id}, chunks={len(stored)}, "
            f"elapsed_ms={elapsed_ms:.1f}"
        )
        return PipelineResult(
            document_id=job.document_id,
            chunk_count=len(stored),
            processing_time_ms=elapsed_ms,
        )

    async def discard(self, document_id: UUID) -> int:
        """Remove every chunk stored for a document."""
        return await self._chunk_store.delete_all_for_document(document_id)
