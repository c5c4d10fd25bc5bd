"""Ingestion pipeline models."""

from rag_backend.core.document_processing.models.pipeline_result import (
    IngestionJob,
    PipelineResult,
)

__all__ = ["IngestionJob", "PipelineResult"]
