"""
Test suite for ChatService.

Validates retrieval-then-generation orchestration for streamed and
collected answers.

System role: Verification of chat orchestration layer
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.messages import AIMessage, HumanMessage

from rag_backend.application.services.chat_service import ChatService
from rag_backend.models.chunk import QueryContext, ScoredChunk
from rag_backend.models.streaming import StreamEvent, StreamEventType


def _scripted_stream(events):
    async def _astream(query_context, history=()):
        for event in events:
            yield event

    return _astream


@pytest.fixture
def query_context(make_chunk, owner_id) -> QueryContext:
    return QueryContext(
        question="What is the refund window?",
        owner_id=owner_id,
        chunks=[ScoredChunk(chunk=make_chunk("30 days", [1.0]), score=0.8)],
    )


@pytest.fixture
def retrieval_service(query_context) -> AsyncMock:
    service = AsyncMock()
    service.retrieve.return_value = query_context
    return service


@pytest.fixture
def stream_events(query_context) -> list[StreamEvent]:
    return [
        StreamEvent(
            event=StreamEventType.SOURCES,
            data={"sources": [s.model_dump() for s in query_context.sources]},
        ),
        StreamEvent(event=StreamEventType.TOKEN, data={"token": "30 ", "index": 0}),
        StreamEvent(event=StreamEventType.TOKEN, data={"token": "days", "index": 1}),
        StreamEvent(event=StreamEventType.COMPLETE, data={"full_answer": "30 days"}),
    ]


class TestChatService:
    """Test suite for ChatService."""

    @pytest.mark.asyncio
    async def test_stream_answer_should_retrieve_then_relay_events(
        self, retrieval_service, stream_events, query_context, owner_id
    ) -> None:
        # Arrange
        agent = MagicMock()
        agent.astream = MagicMock(side_effect=_scripted_stream(stream_events))
        service = ChatService(retrieval_service=retrieval_service, rag_agent=agent)

        # Act
        events = [e async for e in service.stream_answer("What is the refund window?", owner_id)]

        # Assert
        retrieval_service.retrieve.assert_awaited_once_with("What is the refund window?", owner_id)
        agent.astream.assert_called_once_with(query_context, history=[])
        assert events == stream_events

    @pytest.mark.asyncio
    async def test_answer_should_collect_sources_and_full_answer(
        self, retrieval_service, stream_events, owner_id
    ) -> None:
        # Arrange
        agent = MagicMock()
        agent.astream = MagicMock(side_effect=_scripted_stream(stream_events))
        service = ChatService(retrieval_service=retrieval_service, rag_agent=agent)

        # Act
        response = await service.answer("What is the refund window?", owner_id)

        # Assert
        assert response.answer == "30 days"
        assert len(response.sources) == 1
        assert response.sources[0].text == "30 days"
        assert response.sources[0].score == 0.8

    @pytest.mark.asyncio
    async def test_answer_should_propagate_generation_errors(self, retrieval_service, owner_id) -> None:
        # Arrange
        async def _failing(query_context, history=()):
            raise RuntimeError("model down")
            yield  # pragma: no cover

        agent = MagicMock()
        agent.astream = MagicMock(side_effect=_failing)
        service = ChatService(retrieval_service=retrieval_service, rag_agent=agent)

        # Act / Assert
        with pytest.raises(RuntimeError, match="model down"):
            await service.answer("q", owner_id)


class TestChatServiceHistory:
    """Conversation history flows through ChatService."""

    @pytest.fixture
    def history(self) -> MagicMock:
        adapter = MagicMock()
        adapter.get_recent = AsyncMock(
            return_value=[HumanMessage(content="Hi"), AIMessage(content="Hello")]
        )
        adapter.add_exchange = AsyncMock()
        adapter.list_messages = AsyncMock(return_value=["row"])
        adapter.clear = AsyncMock(return_value=2)
        return adapter

    @pytest.mark.asyncio
    async def test_stream_answer_should_pass_history_and_store_exchange(
        self, retrieval_service, stream_events, query_context, history, owner_id
    ) -> None:
        # Arrange
        agent = MagicMock()
        agent.astream = MagicMock(side_effect=_scripted_stream(stream_events))
        service = ChatService(retrieval_service, agent, history)

        # Act
        events = [e async for e in service.stream_answer("What is the refund window?", owner_id)]

        # Assert
        history.get_recent.assert_awaited_once_with(owner_id)
        agent.astream.assert_called_once_with(
            query_context, history=history.get_recent.return_value
        )
        history.add_exchange.assert_awaited_once_with(
            owner_id, "What is the refund window?", "30 days"
        )
        assert events == stream_events

    @pytest.mark.asyncio
    async def test_failed_stream_should_store_nothing(
        self, retrieval_service, history, owner_id
    ) -> None:
        # Arrange
        async def _failing(query_context, history=()):
            yield StreamEvent(event=StreamEventType.TOKEN, data={"token": "3", "index": 0})
            raise RuntimeError("model down")

        agent = MagicMock()
        agent.astream = MagicMock(side_effect=_failing)
        service = ChatService(retrieval_service, agent, history)

        # Act / Assert
        with pytest.raises(RuntimeError):
            await service.answer("q", owner_id)

        history.add_exchange.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_history_operations_should_delegate_to_adapter(self, history, owner_id) -> None:
        service = ChatService(AsyncMock(), MagicMock(), history)

        assert await service.get_history(owner_id) == ["row"]
        assert await service.clear_history(owner_id) == 2
        history.clear.assert_awaited_once_with(owner_id)

    def test_default_history_should_be_disabled(self) -> None:
        service = ChatService(AsyncMock(), MagicMock())

        assert service.history.enabled is False
