"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory SQLite session factory, settings with short retry
timings, fake embedding client and chunk store, sample chunks.
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import uuid
from collections.abc import Sequence

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from rag_backend.boundary.db.base import Base
from rag_backend.boundary.db import models  # noqa: F401
from rag_backend.configs.models import EmbeddingSettings, LLMSettings
from rag_backend.core.exceptions import DocumentNotFoundError
from rag_backend.models.chunk import Chunk


class FakeEmbeddingClient:
    """Deterministic embedder: looks texts up in a table, else a default vector."""

    def __init__(self, vectors: dict[str, list[float]] | None = None, default: list[float] | None = None):
        self.vectors = vectors or {}
        self.default = default or [1.0, 0.0, 0.0]
        self.embed_calls: list[str] = []
        self.embed_many_calls: list[list[str]] = []

    async def embed(self, text: str) -> list[float]:
        self.embed_calls.append(text)
        return list(self.vectors.get(text, self.default))

    async def embed_many(self, texts: Sequence[str]) -> list[list[float]]:
        self.embed_many_calls.append(list(texts))
        return [list(self.vectors.get(text, self.default)) for text in texts]


class InMemoryChunkStore:
    """ChunkStore keeping chunks in a list."""

    def __init__(self, chunks: list[Chunk] | None = None):
        self.chunks: list[Chunk] = list(chunks or [])
        self.fetch_calls: list[str] = []
        self.deleted_documents: set[uuid.UUID] = set()

    async def fetch_candidates(self, owner_id: str) -> list[Chunk]:
        self.fetch_calls.append(owner_id)
        return [c for c in self.chunks if c.owner_id == owner_id]

    async def persist(self, chunk: Chunk) -> Chunk:
        return (await self.persist_many([chunk]))[0]

    async def persist_many(self, chunks: Sequence[Chunk]) -> list[Chunk]:
        stored = [c.model_copy(update={"id": uuid.uuid4()}) for c in chunks]
        self.chunks.extend(stored)
        return stored

    async def persist_for_document(
        self, document_id: uuid.UUID, chunks: Sequence[Chunk]
    ) -> list[Chunk]:
        if document_id in self.deleted_documents:
            raise DocumentNotFoundError(str(document_id))
        return await self.persist_many(chunks)

    async def delete_all_for_document(self, document_id: uuid.UUID) -> int:
        before = len(self.chunks)
        self.chunks = [c for c in self.chunks if c.document_id != document_id]
        return before - len(self.chunks)


@pytest.fixture
async def session_factory():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        async_sessionmaker: Factory bound to a fresh schema
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def test_async_db(session_factory):
    """Single session on the in-memory database."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def embedding_settings() -> EmbeddingSettings:
    """Embedding settings with an API key and zero backoff."""
    return EmbeddingSettings(
        google_api_key="test-key",
        max_retries=3,
        retry_initial_seconds=0,
        retry_max_seconds=0,
    )


@pytest.fixture
def llm_settings() -> LLMSettings:
    return LLMSettings(google_api_key="test-key")


@pytest.fixture
def owner_id() -> str:
    return "owner-123"


@pytest.fixture
def document_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def make_chunk(owner_id: str, document_id: uuid.UUID):
    """Factory for chunks with sensible defaults."""

    def _make(text: str, embedding: list[float], index: int = 0, **overrides) -> Chunk:
        fields = {
            "document_id": document_id,
            "file_name": "handbook.pdf",
            "owner_id": owner_id,
            "chunk_index": index,
            "text": text,
            "embedding": embedding,
        }
        fields.update(overrides)
        return Chunk(**fields)

    return _make


@pytest.fixture
def fake_embedder() -> FakeEmbeddingClient:
    return FakeEmbeddingClient()


@pytest.fixture
def memory_store() -> InMemoryChunkStore:
    return InMemoryChunkStore()
