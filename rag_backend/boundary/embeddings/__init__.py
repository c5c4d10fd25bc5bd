"""Embedding model boundary."""

from rag_backend.boundary.embeddings.embedding_client import (
    EmbeddingClient,
    GoogleEmbeddingClient,
)

__all__ = ["EmbeddingClient", "GoogleEmbeddingClient"]
