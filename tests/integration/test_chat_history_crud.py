"""
Test suite for chat history persistence.

Covers ChatHistoryCRUD and ChatHistoryAdapter against in-memory SQLite.

System role: Verification of conversation history storage
"""

from unittest.mock import MagicMock

import pytest
from langchain_core.messages import AIMessage, HumanMessage
from sqlalchemy.exc import OperationalError

from rag_backend.application.adapters.chat_history_adapter import ChatHistoryAdapter
from rag_backend.boundary.db.CRUD.chat_history_crud import (
    AI_ROLE,
    USER_ROLE,
    chat_history_crud,
)
from rag_backend.core.exceptions import ConfigurationError, UpstreamFailureError


class TestChatHistoryCRUD:
    """Test suite for ChatHistoryCRUD."""

    @pytest.mark.asyncio
    async def test_add_messages_should_continue_sequence(self, test_async_db) -> None:
        # Arrange
        await chat_history_crud.add_messages(
            test_async_db, "owner-1", [(USER_ROLE, "Hi"), (AI_ROLE, "Hello")]
        )

        # Act
        rows = await chat_history_crud.add_messages(
            test_async_db, "owner-1", [(USER_ROLE, "Refunds?"), (AI_ROLE, "30 days")]
        )
        await test_async_db.commit()

        # Assert
        assert [r.sequence for r in rows] == [2, 3]
        messages = await chat_history_crud.get_by_owner(test_async_db, "owner-1")
        assert [m.content for m in messages] == ["Hi", "Hello", "Refunds?", "30 days"]

    @pytest.mark.asyncio
    async def test_get_by_owner_limit_should_keep_most_recent(self, test_async_db) -> None:
        # Arrange
        await chat_history_crud.add_messages(
            test_async_db,
            "owner-1",
            [(USER_ROLE, "one"), (AI_ROLE, "two"), (USER_ROLE, "three"), (AI_ROLE, "four")],
        )

        # Act
        messages = await chat_history_crud.get_by_owner(test_async_db, "owner-1", limit=2)

        # Assert
        assert [m.content for m in messages] == ["three", "four"]

    @pytest.mark.asyncio
    async def test_history_should_be_scoped_to_owner(self, test_async_db) -> None:
        await chat_history_crud.add_messages(test_async_db, "owner-1", [(USER_ROLE, "mine")])
        await chat_history_crud.add_messages(test_async_db, "owner-2", [(USER_ROLE, "theirs")])

        removed = await chat_history_crud.clear(test_async_db, "owner-1")

        assert removed == 1
        assert await chat_history_crud.get_by_owner(test_async_db, "owner-1") == []
        theirs = await chat_history_crud.get_by_owner(test_async_db, "owner-2")
        assert [m.content for m in theirs] == ["theirs"]

    @pytest.mark.asyncio
    async def test_invalid_role_should_raise(self, test_async_db) -> None:
        with pytest.raises(ValueError, match="Invalid role"):
            await chat_history_crud.add_messages(test_async_db, "owner-1", [("system", "x")])


class TestChatHistoryAdapter:
    """Test suite for ChatHistoryAdapter."""

    @pytest.mark.asyncio
    async def test_add_exchange_should_be_returned_as_langchain_messages(
        self, session_factory, owner_id
    ) -> None:
        # Arrange
        adapter = ChatHistoryAdapter(session_factory)

        # Act
        await adapter.add_exchange(owner_id, "What is the refund window?", "30 days")
        recent = await adapter.get_recent(owner_id)

        # Assert
        assert recent == [
            HumanMessage(content="What is the refund window?"),
            AIMessage(content="30 days"),
        ]
        listed = await adapter.list_messages(owner_id)
        assert [m.role for m in listed] == [USER_ROLE, AI_ROLE]

    @pytest.mark.asyncio
    async def test_get_recent_should_respect_max_messages(self, session_factory, owner_id) -> None:
        # Arrange
        adapter = ChatHistoryAdapter(session_factory, max_messages=2)
        await adapter.add_exchange(owner_id, "first question", "first answer")
        await adapter.add_exchange(owner_id, "second question", "second answer")

        # Act
        recent = await adapter.get_recent(owner_id)

        # Assert
        assert [m.content for m in recent] == ["second question", "second answer"]

    @pytest.mark.asyncio
    async def test_zero_max_messages_should_send_no_history(self, session_factory, owner_id) -> None:
        adapter = ChatHistoryAdapter(session_factory, max_messages=0)
        await adapter.add_exchange(owner_id, "q", "a")

        assert await adapter.get_recent(owner_id) == []

    @pytest.mark.asyncio
    async def test_clear_should_report_removed_count(self, session_factory, owner_id) -> None:
        adapter = ChatHistoryAdapter(session_factory)
        await adapter.add_exchange(owner_id, "q", "a")

        assert await adapter.clear(owner_id) == 2
        assert await adapter.list_messages(owner_id) == []

    @pytest.mark.asyncio
    async def test_disabled_adapter_should_skip_chat_path_and_reject_endpoints(self, owner_id) -> None:
        # Arrange
        adapter = ChatHistoryAdapter(None)

        # Act / Assert
        assert adapter.enabled is False
        assert await adapter.get_recent(owner_id) == []
        await adapter.add_exchange(owner_id, "q", "a")
        with pytest.raises(ConfigurationError):
            await adapter.list_messages(owner_id)
        with pytest.raises(ConfigurationError):
            await adapter.clear(owner_id)

    @pytest.mark.asyncio
    async def test_database_error_should_raise_upstream_failure(self, owner_id) -> None:
        # Arrange
        factory = MagicMock(side_effect=OperationalError("SELECT", {}, Exception("db down")))
        adapter = ChatHistoryAdapter(factory)

        # Act / Assert
        with pytest.raises(UpstreamFailureError) as exc_info:
            await adapter.get_recent(owner_id)
        assert exc_info.value.operation == "load_history"

        with pytest.raises(UpstreamFailureError) as exc_info:
            await adapter.add_exchange(owner_id, "q", "a")
        assert exc_info.value.operation == "save_history"
