"""
Retrieval service.

Selects the chunks injected into the answer prompt: loads the owner's
candidates, embeds the question, and ranks by cosine similarity. Store and
embedding failures degrade to an empty context instead of failing the
request.

Dependencies: rag_backend.boundary.store, rag_backend.boundary.embeddings, rag_backend.core.similarity
System role: Query-time context selection
"""

import logging

from rag_backend.boundary.embeddings.embedding_client import EmbeddingClient
from rag_backend.boundary.store.chunk_store import ChunkStore
from rag_backend.core.exceptions import ConfigurationError, UpstreamFailureError
from rag_backend.core.similarity import Candidate, rank_candidates
from rag_backend.models.chunk import QueryContext, ScoredChunk
from rag_backend.observability.log_utils import safe_log_value

logger = logging.getLogger(__name__)


class RetrievalService:
    """Top-K chunk selection for one owner scope."""

    def __init__(
        self,
        store: ChunkStore,
        embedder: EmbeddingClient,
        top_k: int = 3,
        similarity_threshold: float = 0.5,
    ) -> None:
        """
        Args:
            store: Chunk store to load candidates from
            embedder: Embedding client for the question
            top_k: Maximum chunks returned
            similarity_threshold: Scores at or below this are dropped
        """
        self._store = store
        self._embedder = embedder
        self._top_k = top_k
        self._threshold = similarity_threshold

    async def retrieve(self, question: str, owner_id: str) -> QueryContext:
        """
        Build the query context for a question.

        Args:
            question: User question
            owner_id: Scope whose chunks are eligible

        Returns:
            QueryContext: Ranked chunks; empty when nothing relevant was found
                or an upstream call failed
        """
        empty = QueryContext(question=question, owner_id=owner_id)
        logger.info(
            f"{__name__}:retrieve - START owner_id={owner_id}, "
            f"question={safe_log_value(question, max_length=80)}"
        )

        try:
            candidates = await self._store.fetch_candidates(owner_id)
            if not candidates:
                logger.info(f"{__name__}:retrieve - No stored chunks for owner_id={owner_id}")
                return empty
            query_vector = await self._embedder.embed(question)
        except (ConfigurationError, UpstreamFailureError) as e:
            logger.warning(
                f"{__name__}:retrieve - Degrading to empty context: {e}",
                extra={"owner_id": owner_id, "error_type": type(e).__name__},
            )
            return empty

        ranked = rank_candidates(
            query_vector,
            (Candidate(vector=chunk.embedding, payload=chunk) for chunk in candidates),
            k=self._top_k,
            threshold=self._threshold,
        )

        logger.info(
            f"{__name__}:retrieve - END {len(ranked)}/{len(candidates)} chunks selected",
            extra={"scores": [round(item.score, 4) for item in ranked]},
        )
        return QueryContext(
            question=question,
            owner_id=owner_id,
            chunks=[ScoredChunk(chunk=item.payload, score=item.score) for item in ranked],
        )
