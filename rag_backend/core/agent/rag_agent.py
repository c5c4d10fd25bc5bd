"""
RAG answer agent.

Streams an answer for an already-retrieved query context. Emits the source
list first, then answer tokens, then an explicit completion event.

Dependencies: langchain_google_genai, langchain_core, rag_backend.core
System role: Answer generation over retrieved context
"""

import asyncio
import logging
from collections.abc import AsyncGenerator, Sequence
from contextlib import aclosing
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from rag_backend.configs.models import LLMSettings
from rag_backend.core.agent.rag_prompt import get_rag_prompt
from rag_backend.core.context_assembler import assemble_context
from rag_backend.core.exceptions import ConfigurationError
from rag_backend.models.chunk import QueryContext
from rag_backend.models.streaming import StreamEvent, StreamEventType

logger = logging.getLogger(__name__)


def _token_text(content: Any) -> str:
    """Flatten chunk content, which may be a string or a list of parts."""
    if isinstance(content, list):
        return "".join(
            item if isinstance(item, str) else (item.get("text", "") if isinstance(item, dict) else str(item))
            for item in content
        )
    return str(content)


class RAGAgent:
    """
    Answer generator over ranked chunks.

    The chat model is built on first use unless one is injected.
    """

    def __init__(
        self,
        settings: LLMSettings,
        model: BaseChatModel | None = None,
    ) -> None:
        """
        Args:
            settings: Chat model configuration
            model: Optional prebuilt chat model (tests inject fakes here)
        """
        self._settings = settings
        self._model = model

    def _chat_model(self) -> BaseChatModel:
        if self._model is None:
            if not self._settings.google_api_key:
                raise ConfigurationError(
                    "llm",
                    "GOOGLE_API_KEY is not set; answer generation is unavailable",
                )
            self._model = ChatGoogleGenerativeAI(
                model=self._settings.model,
                temperature=self._settings.temperature,
                google_api_key=self._settings.google_api_key,
            )
        return self._model

    async def astream(
        self,
        query_context: QueryContext,
        history: Sequence[BaseMessage] = (),
    ) -> AsyncGenerator[StreamEvent, None]:
        """
        Stream the answer for a retrieved context.

        Closing the generator early cancels the in-flight model stream.

        Args:
            query_context: Question, owner scope and ranked chunks
            history: Earlier conversation turns, oldest first

        Yields:
            StreamEvent: sources, then token events, then complete

        Raises:
            ConfigurationError: If no chat model can be built
        """
        logger.info(
            f"{__name__}:astream - START owner_id={query_context.owner_id}, "
            f"question_len={len(query_context.question)}, chunks={len(query_context.chunks)}"
        )
        model = self._chat_model()

        # Step 1: Citation list goes out before any answer text
        yield StreamEvent(
            event=StreamEventType.SOURCES,
            data={"sources": [source.model_dump() for source in query_context.sources]},
        )

        # Step 2: Build prompt messages
        context_text = assemble_context(query_context.chunks)
        if query_context.is_empty:
            logger.warning(f"{__name__}:astream - No context retrieved, answering with sentinel context")
        messages = get_rag_prompt().invoke({
            "context": context_text,
            "question": query_context.question,
            "history": list(history),
        }).to_messages()
        logger.info(
            f"{__name__}:astream - Step 2 OK: context_len={len(context_text)}, history={len(history)}"
        )

        # Step 3: Stream tokens from model
        full_answer = ""
        token_index = 0
        try:
            async with aclosing(model.astream(messages)) as stream:
                async for chunk in stream:
                    if not chunk.content:
                        continue
                    token = _token_text(chunk.content)
                    if not token:
                        continue
                    full_answer += token
                    yield StreamEvent(
                        event=StreamEventType.TOKEN,
                        data={"token": token, "index": token_index},
                    )
                    token_index += 1
        except (asyncio.CancelledError, GeneratorExit):
            logger.info(f"{__name__}:astream - Cancelled after {token_index} tokens")
            raise
        except Exception as e:
            logger.error(f"{__name__}:astream - Step 3 FAILED: LLM streaming - {type(e).__name__}: {e}")
            raise
        logger.info(f"{__name__}:astream - Step 3 OK: Streamed {token_index} tokens, answer_len={len(full_answer)}")

        # Step 4: Explicit end-of-stream event
        yield StreamEvent(
            event=StreamEventType.COMPLETE,
            data={"full_answer": full_answer},
        )
        logger.info(f"{__name__}:astream - END owner_id={query_context.owner_id}")
