"""
Ingestion job and pipeline result models.

Dependencies: pydantic
System role: Input and return types for IngestionPipeline.process()
"""

from uuid import UUID

from pydantic import BaseModel, Field


class IngestionJob(BaseModel):
    """A stored document waiting to be chunked and embedded."""

    document_id: UUID = Field(description="Document record to ingest")
    owner_id: str = Field(description="Owner scope the chunks belong to")
    file_name: str = Field(description="Original filename, used for citation")
    content_type: str | None = Field(default=None, description="MIME type reported at upload")
    storage_key: str = Field(description="Key of the raw file in document storage")


class PipelineResult(BaseModel):
    """Result of document processing pipeline execution."""

    document_id: UUID = Field(description="Processed document")
    chunk_count: int = Field(description="Number of chunks stored")
    processing_time_ms: float = Field(description="Total processing time in milliseconds")
