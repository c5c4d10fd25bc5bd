"""
Document ingestion task.

process_document_background(job, pipeline, session_factory) runs one job and
records the outcome on the document's status column. The API process runs it
as a FastAPI background task; ingest_document wraps it as a Celery task for
broker-backed deployments.

Flow: mark processing -> download -> parse -> chunk -> embed -> persist -> mark completed

Dependencies: celery, sqlalchemy, rag_backend.core.document_processing
System role: Async document processing task
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rag_backend.boundary.db.CRUD.document_crud import document_crud
from rag_backend.boundary.db.connection import create_engine_from_settings, create_session_factory
from rag_backend.boundary.embeddings.embedding_client import GoogleEmbeddingClient
from rag_backend.boundary.storage.document_storage import create_document_storage
from rag_backend.boundary.store.chunk_store import SqlChunkStore
from rag_backend.configs import Settings, get_settings
from rag_backend.core.chunker import TextChunker
from rag_backend.core.document_processing.entrypoint import IngestionPipeline
from rag_backend.core.document_processing.models import IngestionJob
from rag_backend.core.document_processing.tasks.parsing_task import ParsingTask
from rag_backend.core.exceptions import DocumentNotFoundError
from rag_backend.models.document import DocumentStatus
from rag_backend.observability.log_utils import log_exception_with_context
from rag_backend.workers import celery_app

logger = logging.getLogger(__name__)


async def process_document_background(
    job: IngestionJob,
    pipeline: IngestionPipeline,
    session_factory: async_sessionmaker[AsyncSession],
) -> DocumentStatus | None:
    """
    Ingest one document and record the outcome.

    Failures are logged and stored on the document, never raised. A document
    deleted before or during ingestion ends with no chunks left behind.

    Args:
        job: Document to ingest
        pipeline: Ingestion pipeline
        session_factory: Sessions for status updates

    Returns:
        DocumentStatus | None: Final status, or None if the document was deleted
    """
    document_id = job.document_id
    try:
        async with session_factory() as session:
            document = await document_crud.mark_processing(session, document_id)
            await session.commit()
        if document is None:
            logger.info(
                f"{__name__}:process_document_background - document_id={document_id} "
                f"deleted before ingestion started"
            )
            return None

        result = await pipeline.process(job)

        async with session_factory() as session:
            document = await document_crud.mark_completed(session, document_id, result.chunk_count)
            await session.commit()
        if document is None:
            removed = await pipeline.discard(document_id)
            logger.info(
                f"{__name__}:process_document_background - document_id={document_id} "
                f"deleted during ingestion, discarded {removed} chunks"
            )
            return None

        logger.info(
            f"{__name__}:process_document_background - Completed document_id={document_id}, "
            f"chunks={result.chunk_count}"
        )
        return DocumentStatus.COMPLETED

    except DocumentNotFoundError:
        logger.info(
            f"{__name__}:process_document_background - document_id={document_id} "
            f"deleted during ingestion, no chunks stored"
        )
        return None
    except Exception as e:
        log_exception_with_context(
            logger,
            f"{__name__}:process_document_background - Ingestion failed for document_id={document_id}",
            e,
            document_id=str(document_id),
            file_name=job.file_name,
        )
        return await _record_failure(session_factory, job, e)


async def _record_failure(
    session_factory: async_sessionmaker[AsyncSession],
    job: IngestionJob,
    error: Exception,
) -> DocumentStatus | None:
    try:
        async with session_factory() as session:
            document = await document_crud.mark_failed(session, job.document_id, str(error))
            await session.commit()
    except Exception as e:
        log_exception_with_context(
            logger,
            f"{__name__}:_record_failure - Could not mark document failed",
            e,
            document_id=str(job.document_id),
        )
        return DocumentStatus.FAILED

    if document is None:
        logger.info(f"{__name__}:_record_failure - document_id={job.document_id} no longer exists")
        return None
    return DocumentStatus.FAILED


def build_ingestion_pipeline(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
) -> IngestionPipeline:
    """Wire a standalone pipeline for a worker process."""
    return IngestionPipeline(
        storage=create_document_storage(settings.storage),
        embedder=GoogleEmbeddingClient(settings.embedding),
        chunk_store=SqlChunkStore(session_factory),
        chunker=TextChunker(
            chunk_size=settings.retrieval.chunk_size,
            overlap=settings.retrieval.chunk_overlap,
        ),
        parser=ParsingTask(),
    )


async def _ingest_in_worker(job: IngestionJob) -> DocumentStatus | None:
    settings = get_settings()
    engine = create_engine_from_settings(settings.database)
    try:
        session_factory = create_session_factory(engine)
        pipeline = build_ingestion_pipeline(settings, session_factory)
        return await process_document_background(job, pipeline, session_factory)
    finally:
        await engine.dispose()


@celery_app.task(bind=True, name="rag_backend.ingest_document")
def ingest_document(self, job_payload: dict) -> dict:
    """
    Ingest a document in a Celery worker.

    Args:
        job_payload: IngestionJob serialized with model_dump(mode="json")

    Returns:
        dict: Document id and final status ("deleted" if it no longer exists)
    """
    job = IngestionJob.model_validate(job_payload)
    logger.info(
        f"{__name__}:ingest_document - task_id={self.request.id}, document_id={job.document_id}"
    )
    status = asyncio.run(_ingest_in_worker(job))
    return {
        "document_id": str(job.document_id),
        "status": status.value if status is not None else "deleted",
    }
