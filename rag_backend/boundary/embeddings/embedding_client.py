"""
Embedding client adapter.

Wraps Google Generative AI embeddings behind a small async contract.
Transport errors, timeouts and rate limiting get bounded retries with
exponential backoff. Other errors fail on the first attempt. Whatever
still fails is reported as an UpstreamFailureError.

Dependencies: langchain_google_genai, google.api_core, tenacity, rag_backend.configs
System role: Embedding boundary for ingestion and retrieval
"""

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol, TypeVar, runtime_checkable

from google.api_core import exceptions as google_exceptions
from langchain_core.embeddings import Embeddings
from langchain_google_genai import GoogleGenerativeAIEmbeddings
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from rag_backend.configs.models import EmbeddingSettings
from rag_backend.core.exceptions import ConfigurationError, UpstreamFailureError

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT")

TRANSIENT_ERRORS = (
    ConnectionError,
    TimeoutError,
    google_exceptions.ResourceExhausted,
    google_exceptions.ServiceUnavailable,
    google_exceptions.DeadlineExceeded,
    google_exceptions.InternalServerError,
)
TRANSIENT_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


def is_transient_error(error: BaseException) -> bool:
    """
    True for transport failures, timeouts and rate limiting.

    LangChain wraps SDK errors, so the cause chain is checked too. Errors
    from the newer google-genai SDK carry the HTTP status as `code`.
    """
    current: BaseException | None = error
    while current is not None:
        if isinstance(current, TRANSIENT_ERRORS):
            return True
        if getattr(current, "code", None) in TRANSIENT_STATUS_CODES:
            return True
        current = current.__cause__
    return False


@runtime_checkable
class EmbeddingClient(Protocol):
    """Turns text into dense vectors."""

    async def embed(self, text: str) -> list[float]: ...

    async def embed_many(self, texts: Sequence[str]) -> list[list[float]]: ...


class GoogleEmbeddingClient:
    """
    EmbeddingClient backed by GoogleGenerativeAIEmbeddings.

    The SDK client is built on first use, so a missing API key only fails
    the operations that need embeddings.
    """

    def __init__(
        self,
        settings: EmbeddingSettings,
        embeddings: Embeddings | None = None,
    ) -> None:
        """
        Args:
            settings: Embedding model, key and retry configuration
            embeddings: Optional prebuilt LangChain embeddings object
        """
        self._settings = settings
        self._embeddings = embeddings

    def _client(self) -> Embeddings:
        if self._embeddings is None:
            if not self._settings.google_api_key:
                raise ConfigurationError(
                    "embedding_client",
                    "GOOGLE_API_KEY is not set; embeddings are unavailable",
                )
            logger.info(f"{__name__}:_client - Creating embeddings client model={self._settings.model}")
            self._embeddings = GoogleGenerativeAIEmbeddings(
                model=self._settings.model,
                google_api_key=self._settings.google_api_key,
            )
        return self._embeddings

    async def _call_with_retry(
        self,
        operation: str,
        call: Callable[[], Awaitable[ResultT]],
    ) -> ResultT:
        attempts = self._settings.max_retries
        retrying = AsyncRetrying(
            retry=retry_if_exception(is_transient_error),
            stop=stop_after_attempt(attempts),
            wait=wait_exponential_jitter(
                initial=self._settings.retry_initial_seconds,
                max=self._settings.retry_max_seconds,
            ),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:{operation} - Retry {retry_state.attempt_number}/{attempts} "
                f"after {type(retry_state.outcome.exception()).__name__}"
            ),
            reraise=True,
        )
        try:
            return await retrying(call)
        except Exception as e:
            raise UpstreamFailureError(
                operation,
                f"Embedding call failed: {e}",
                details={
                    "model": self._settings.model,
                    "error_type": type(e).__name__,
                    "attempts": retrying.statistics.get("attempt_number", 1),
                },
            ) from e

    async def embed(self, text: str) -> list[float]:
        """
        Embed a single query text.

        Raises:
            ConfigurationError: If no API key is configured
            UpstreamFailureError: If the embedding API keeps failing
        """
        client = self._client()
        vector = await self._call_with_retry("embed", lambda: client.aembed_query(text))
        return list(vector)

    async def embed_many(self, texts: Sequence[str]) -> list[list[float]]:
        """
        Embed texts in input order.

        Raises:
            ConfigurationError: If no API key is configured
            UpstreamFailureError: If the API fails or returns a malformed batch
        """
        if not texts:
            return []
        client = self._client()
        vectors = await self._call_with_retry(
            "embed_many", lambda: client.aembed_documents(list(texts))
        )

        if len(vectors) != len(texts):
            raise UpstreamFailureError(
                "embed_many",
                f"Embedding API returned {len(vectors)} vectors for {len(texts)} texts",
            )
        dimensions = {len(vector) for vector in vectors}
        if len(dimensions) > 1:
            raise UpstreamFailureError(
                "embed_many",
                "Embedding API returned vectors of differing dimensions",
                details={"dimensions": sorted(dimensions)},
            )
        return [list(vector) for vector in vectors]
