"""
Retrieval configuration settings.

Chunking window and ranking parameters shared by ingestion and retrieval.

Dependencies: pydantic, pydantic_settings
System role: RAG chunking and top-K ranking configuration
"""

from pydantic import Field, model_validator
from pydantic_settings import SettingsConfigDict

from rag_backend.configs.base import BaseSettings


class RetrievalSettings(BaseSettings):
    """Chunking and similarity ranking configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RETRIEVAL_",
        case_sensitive=False,
        extra="ignore",
    )

    chunk_size: int = Field(
        default=1000,
        gt=0,
        description="Maximum chunk size in characters",
    )
    chunk_overlap: int = Field(
        default=100,
        ge=0,
        description="Characters shared between consecutive chunks",
    )
    top_k: int = Field(
        default=3,
        gt=0,
        description="Maximum number of chunks injected into the prompt",
    )
    similarity_threshold: float = Field(
        default=0.5,
        ge=-1.0,
        le=1.0,
        description="Chunks scoring at or below this cosine similarity are dropped",
    )

    @model_validator(mode="after")
    def _check_overlap(self) -> "RetrievalSettings":
        """Reject an overlap that would stall the chunking window."""
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be smaller than "
                f"chunk_size ({self.chunk_size})"
            )
        return self
