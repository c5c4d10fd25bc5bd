"""Ingestion pipeline tasks."""

from rag_backend.core.document_processing.tasks.parsing_task import FileKind, ParsingTask

__all__ = ["FileKind", "ParsingTask"]
