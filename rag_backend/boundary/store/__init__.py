"""Chunk store boundary."""

from rag_backend.boundary.store.chunk_store import ChunkStore, SqlChunkStore

__all__ = ["ChunkStore", "SqlChunkStore"]
