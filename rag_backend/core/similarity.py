"""
Similarity ranker.

Brute-force cosine similarity over candidate vectors, followed by a
threshold filter and top-K selection. Pure computation; callers load the
candidates and the query vector beforehand.

Dependencies: math (stdlib), rag_backend.core.exceptions
System role: Relevance ranking for retrieval
"""

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from rag_backend.core.exceptions import DimensionMismatchError, InvalidConfigurationError

logger = logging.getLogger(__name__)

PayloadT = TypeVar("PayloadT")


@dataclass(frozen=True)
class Candidate(Generic[PayloadT]):
    """A vector to score, with the object it belongs to."""

    vector: Sequence[float]
    payload: PayloadT


@dataclass(frozen=True)
class RankedCandidate(Generic[PayloadT]):
    """A payload annotated with its similarity to the query."""

    payload: PayloadT
    score: float


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine of the angle between two vectors.

    Args:
        a: First vector
        b: Second vector, same length as `a`

    Returns:
        float: Similarity in [-1, 1]; 0.0 when either vector has zero magnitude

    Raises:
        DimensionMismatchError: If the vectors differ in length
    """
    if len(a) != len(b):
        raise DimensionMismatchError(expected=len(a), actual=len(b))

    dot = math.fsum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(math.fsum(x * x for x in a))
    norm_b = math.sqrt(math.fsum(y * y for y in b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    return max(-1.0, min(1.0, dot / (norm_a * norm_b)))


def rank_candidates(
    query_vector: Sequence[float],
    candidates: Iterable[Candidate[PayloadT]],
    k: int,
    threshold: float = 0.5,
) -> list[RankedCandidate[PayloadT]]:
    """
    Return the top-k candidates scoring strictly above the threshold.

    Candidates whose vector length differs from the query are skipped with a
    warning. Ties keep their input order.

    Args:
        query_vector: Embedded question
        candidates: Vectors with their payloads
        k: Maximum number of results
        threshold: Minimum similarity (exclusive)

    Returns:
        list[RankedCandidate]: At most k results, highest score first

    Raises:
        InvalidConfigurationError: If k <= 0 or threshold is outside [-1, 1]
    """
    if k <= 0:
        raise InvalidConfigurationError(f"k must be positive, got {k}", field="k")
    if not -1.0 <= threshold <= 1.0:
        raise InvalidConfigurationError(
            f"threshold must be within [-1, 1], got {threshold}",
            field="threshold",
        )

    scored: list[RankedCandidate[PayloadT]] = []
    skipped = 0
    for position, candidate in enumerate(candidates):
        try:
            score = cosine_similarity(query_vector, candidate.vector)
        except DimensionMismatchError as e:
            skipped += 1
            logger.warning(
                f"{__name__}:rank_candidates - Skipping candidate {position}: {e.message}",
                extra={"position": position, **e.details},
            )
            continue
        if score > threshold:
            scored.append(RankedCandidate(payload=candidate.payload, score=score))

    # sorted() is stable, so equal scores stay in input order
    ranked = sorted(scored, key=lambda item: item.score, reverse=True)[:k]

    logger.debug(
        f"{__name__}:rank_candidates - {len(ranked)} selected, "
        f"{len(scored)} above threshold, {skipped} skipped"
    )
    return ranked
