"""
Chunk domain models.

A chunk is a bounded slice of a source document together with its embedding.
Scored chunks and the per-request query context are built at retrieval time
and never persisted.

Dependencies: pydantic
System role: Chunk and retrieval context data structures
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Chunk(BaseModel):
    """Document chunk with its embedding vector."""

    model_config = ConfigDict(frozen=True)

    id: UUID | None = Field(default=None, description="Store-assigned identifier")
    document_id: UUID = Field(description="Owning document")
    file_name: str = Field(description="Display name used for citation")
    owner_id: str = Field(description="Retrieval scope (user or tenant)")
    chunk_index: int = Field(ge=0, description="Position within the owning document")
    text: str = Field(description="Raw chunk text")
    embedding: list[float] = Field(default_factory=list, description="Embedding vector")
    created_at: datetime | None = Field(default=None, description="Store-assigned timestamp")


class ChunkSource(BaseModel):
    """Citation metadata for a retrieved chunk; never carries the embedding."""

    document_id: str
    file_name: str
    chunk_index: int
    text: str
    score: float


class ScoredChunk(BaseModel):
    """A chunk paired with its similarity to the query."""

    chunk: Chunk
    score: float

    def to_source(self) -> ChunkSource:
        return ChunkSource(
            document_id=str(self.chunk.document_id),
            file_name=self.chunk.file_name,
            chunk_index=self.chunk.chunk_index,
            text=self.chunk.text,
            score=round(self.score, 4),
        )


class QueryContext(BaseModel):
    """
    Ephemeral retrieval result for one question.

    Attributes:
        question: The user's question
        owner_id: Scope the chunks were drawn from
        chunks: Ranked chunks, best first
    """

    question: str
    owner_id: str
    chunks: list[ScoredChunk] = Field(default_factory=list)

    @property
    def sources(self) -> list[ChunkSource]:
        """Citation list in ranked order."""
        return [scored.to_source() for scored in self.chunks]

    @property
    def is_empty(self) -> bool:
        return not self.chunks
