"""
Document ingestion.

Text extraction and the ingestion pipeline that turns a stored file into
embedded chunks.
"""

from rag_backend.core.document_processing.entrypoint import IngestionPipeline
from rag_backend.core.document_processing.models import IngestionJob, PipelineResult
from rag_backend.core.document_processing.tasks.parsing_task import FileKind, ParsingTask

__all__ = [
    "FileKind",
    "IngestionJob",
    "IngestionPipeline",
    "ParsingTask",
    "PipelineResult",
]
