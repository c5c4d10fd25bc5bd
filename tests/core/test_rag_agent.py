"""
Test suite for RAGAgent streaming.

Uses a scripted chat model in place of Gemini.

System role: Verification of answer generation
"""

from types import SimpleNamespace

import pytest
from langchain_core.messages import AIMessage, HumanMessage

from rag_backend.configs.models import LLMSettings
from rag_backend.core.agent.rag_agent import RAGAgent
from rag_backend.core.exceptions import ConfigurationError
from rag_backend.models.chunk import QueryContext, ScoredChunk
from rag_backend.models.streaming import StreamEventType


class ScriptedChatModel:
    """Chat model double that streams fixed fragments."""

    def __init__(self, fragments, fail_after: int | None = None):
        self.fragments = fragments
        self.fail_after = fail_after
        self.received_messages = None
        self.closed = False

    async def astream(self, messages):
        self.received_messages = messages
        try:
            for position, fragment in enumerate(self.fragments):
                if self.fail_after is not None and position == self.fail_after:
                    raise RuntimeError("model unavailable")
                yield SimpleNamespace(content=fragment)
        finally:
            self.closed = True


@pytest.fixture
def query_context(make_chunk, owner_id) -> QueryContext:
    chunk = make_chunk("Refunds are processed within 5 days.", [1.0, 0.0], index=2)
    return QueryContext(
        question="How long do refunds take?",
        owner_id=owner_id,
        chunks=[ScoredChunk(chunk=chunk, score=0.912345)],
    )


class TestRAGAgentStream:
    """Test suite for RAGAgent.astream."""

    @pytest.mark.asyncio
    async def test_should_emit_sources_tokens_then_complete(self, llm_settings, query_context) -> None:
        # Arrange
        model = ScriptedChatModel(["Refunds ", "", "take 5 days."])
        agent = RAGAgent(llm_settings, model=model)

        # Act
        events = [event async for event in agent.astream(query_context)]

        # Assert
        assert [e.event for e in events] == [
            StreamEventType.SOURCES,
            StreamEventType.TOKEN,
            StreamEventType.TOKEN,
            StreamEventType.COMPLETE,
        ]
        source = events[0].data["sources"][0]
        assert source["file_name"] == "handbook.pdf"
        assert source["chunk_index"] == 2
        assert source["score"] == 0.9123
        assert "embedding" not in source
        assert [e.data["index"] for e in events[1:3]] == [0, 1]
        assert events[-1].data == {"full_answer": "Refunds take 5 days."}

    @pytest.mark.asyncio
    async def test_prompt_should_contain_assembled_context(self, llm_settings, query_context) -> None:
        # Arrange
        model = ScriptedChatModel(["ok"])
        agent = RAGAgent(llm_settings, model=model)

        # Act
        _ = [event async for event in agent.astream(query_context)]

        # Assert
        human = model.received_messages[-1].content
        assert "Source: handbook.pdf\nContent: Refunds are processed within 5 days." in human
        assert "Question: How long do refunds take?" in human

    @pytest.mark.asyncio
    async def test_history_should_precede_current_question(self, llm_settings, query_context) -> None:
        # Arrange
        model = ScriptedChatModel(["ok"])
        agent = RAGAgent(llm_settings, model=model)
        history = [HumanMessage(content="Do you ship abroad?"), AIMessage(content="Yes.")]

        # Act
        _ = [event async for event in agent.astream(query_context, history=history)]

        # Assert
        types = [m.type for m in model.received_messages]
        assert types == ["system", "human", "ai", "human"]
        assert model.received_messages[1].content == "Do you ship abroad?"
        assert "Question: How long do refunds take?" in model.received_messages[-1].content

    @pytest.mark.asyncio
    async def test_empty_context_should_use_sentinel(self, llm_settings, owner_id) -> None:
        # Arrange
        model = ScriptedChatModel(["I couldn't find an answer in the documents."])
        agent = RAGAgent(llm_settings, model=model)
        context = QueryContext(question="Anything?", owner_id=owner_id)

        # Act
        events = [event async for event in agent.astream(context)]

        # Assert
        assert events[0].data == {"sources": []}
        assert "No relevant context found." in model.received_messages[-1].content

    @pytest.mark.asyncio
    async def test_list_content_should_be_flattened(self, llm_settings, query_context) -> None:
        # Arrange
        model = ScriptedChatModel([[{"type": "text", "text": "Five"}, " days"]])
        agent = RAGAgent(llm_settings, model=model)

        # Act
        events = [event async for event in agent.astream(query_context)]

        # Assert
        assert events[1].data["token"] == "Five days"

    @pytest.mark.asyncio
    async def test_closing_stream_early_should_close_model_stream(
        self, llm_settings, query_context
    ) -> None:
        # Arrange
        model = ScriptedChatModel(["a", "b", "c", "d"])
        agent = RAGAgent(llm_settings, model=model)
        stream = agent.astream(query_context)

        # Act
        await stream.__anext__()
        first_token = await stream.__anext__()
        await stream.aclose()

        # Assert
        assert first_token.data["token"] == "a"
        assert model.closed is True

    @pytest.mark.asyncio
    async def test_model_failure_should_propagate_after_sources(
        self, llm_settings, query_context
    ) -> None:
        # Arrange
        model = ScriptedChatModel(["partial", "never"], fail_after=1)
        agent = RAGAgent(llm_settings, model=model)
        received = []

        # Act
        with pytest.raises(RuntimeError, match="model unavailable"):
            async for event in agent.astream(query_context):
                received.append(event)

        # Assert
        assert [e.event for e in received] == [StreamEventType.SOURCES, StreamEventType.TOKEN]

    @pytest.mark.asyncio
    async def test_missing_api_key_should_raise_configuration_error(self, query_context) -> None:
        # Arrange
        agent = RAGAgent(LLMSettings(google_api_key=None))

        # Act / Assert
        with pytest.raises(ConfigurationError) as exc_info:
            await agent.astream(query_context).__anext__()

        assert exc_info.value.component == "llm"
