"""
Ingestion dispatcher.

Hands an ingestion job to whichever runner is configured: a FastAPI
background task in the API process, or the Celery ingest_document task.
Either way the upload request returns before ingestion starts.

Dependencies: fastapi, celery, rag_backend.workers.tasks
System role: Ingestion job submission
"""

import logging
from typing import Literal

from fastapi import BackgroundTasks
from kombu.exceptions import OperationalError as BrokerError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rag_backend.core.document_processing.entrypoint import IngestionPipeline
from rag_backend.core.document_processing.models import IngestionJob
from rag_backend.core.exceptions import UpstreamFailureError
from rag_backend.workers.tasks.document_ingestion import (
    ingest_document,
    process_document_background,
)

logger = logging.getLogger(__name__)


class IngestionDispatcher:
    """Submit ingestion jobs without waiting for them."""

    def __init__(
        self,
        pipeline: IngestionPipeline,
        session_factory: async_sessionmaker[AsyncSession] | None,
        mode: Literal["background", "celery"] = "background",
    ) -> None:
        self._pipeline = pipeline
        self._session_factory = session_factory
        self.mode = mode

    def dispatch(self, job: IngestionJob, background_tasks: BackgroundTasks | None) -> None:
        """
        Schedule one job.

        Args:
            job: Document to ingest
            background_tasks: The request's background tasks (background mode)

        Raises:
            UpstreamFailureError: The Celery broker rejected the job
            RuntimeError: Background mode without request background tasks
        """
        if self.mode == "celery":
            try:
                result = ingest_document.delay(job.model_dump(mode="json"))
            except BrokerError as e:
                raise UpstreamFailureError(
                    "dispatch_ingestion",
                    "Could not queue document for ingestion",
                    details={"document_id": str(job.document_id)},
                ) from e
            logger.info(
                f"{__name__}:dispatch - Sent document_id={job.document_id} to Celery, "
                f"task_id={result.id}"
            )
            return

        if background_tasks is None:
            raise RuntimeError("Background ingestion needs the request's BackgroundTasks")
        background_tasks.add_task(
            process_document_background,
            job,
            self._pipeline,
            self._session_factory,
        )
        logger.info(f"{__name__}:dispatch - Scheduled document_id={job.document_id} in background")
