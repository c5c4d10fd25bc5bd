"""
Chat service for conversational question answering over a knowledge base.

Orchestrates the chat flow: history retrieval, context retrieval, answer
generation, then persistence of the question and answer. Answers are either
streamed event by event or collected into one response.

Dependencies: rag_backend.application, rag_backend.core.agent
System role: Chat service orchestration layer
"""

import logging
from collections.abc import AsyncGenerator, Sequence

from rag_backend.application.adapters.chat_history_adapter import ChatHistoryAdapter
from rag_backend.application.services.retrieval_service import RetrievalService
from rag_backend.boundary.db.models.chat_message_model import ChatMessageModel
from rag_backend.core.agent.rag_agent import RAGAgent
from rag_backend.models.chat import ChatResponse
from rag_backend.models.chunk import ChunkSource
from rag_backend.models.streaming import StreamEvent, StreamEventType

logger = logging.getLogger(__name__)


class ChatService:
    """Coordinates history, retrieval and answer generation."""

    def __init__(
        self,
        retrieval_service: RetrievalService,
        rag_agent: RAGAgent,
        history: ChatHistoryAdapter | None = None,
    ) -> None:
        self.retrieval_service = retrieval_service
        self.rag_agent = rag_agent
        self.history = history or ChatHistoryAdapter(None)

    async def stream_answer(
        self,
        question: str,
        owner_id: str,
    ) -> AsyncGenerator[StreamEvent, None]:
        """
        Stream an answer for real-time delivery.

        Flow:
        1. Fetch recent conversation history
        2. Retrieve context for the question
        3. Stream events from the RAG agent
        4. Store question and answer before the complete event goes out

        A stream that fails or is closed early stores nothing.

        Args:
            question: User question
            owner_id: Knowledge base and conversation scope

        Yields:
            StreamEvent: sources, token and complete events
        """
        logger.info(f"{__name__}:stream_answer - START owner_id={owner_id}")
        history = await self.history.get_recent(owner_id)
        query_context = await self.retrieval_service.retrieve(question, owner_id)

        event_count = 0
        async for event in self.rag_agent.astream(query_context, history=history):
            event_count += 1
            if event.event == StreamEventType.COMPLETE:
                await self.history.add_exchange(owner_id, question, event.data["full_answer"])
            yield event

        logger.info(
            f"{__name__}:stream_answer - END owner_id={owner_id}, events={event_count}, "
            f"history={len(history)}"
        )

    async def answer(self, question: str, owner_id: str) -> ChatResponse:
        """
        Produce a complete answer without streaming.

        Returns:
            ChatResponse: Full answer and its sources
        """
        answer = ""
        sources: list[ChunkSource] = []
        async for event in self.stream_answer(question, owner_id):
            if event.event == StreamEventType.SOURCES:
                sources = [ChunkSource(**source) for source in event.data["sources"]]
            elif event.event == StreamEventType.COMPLETE:
                answer = event.data["full_answer"]
        return ChatResponse(answer=answer, sources=sources)

    async def get_history(self, owner_id: str) -> Sequence[ChatMessageModel]:
        return await self.history.list_messages(owner_id)

    async def clear_history(self, owner_id: str) -> int:
        return await self.history.clear(owner_id)
