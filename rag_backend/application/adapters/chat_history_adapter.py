"""
Chat history adapter.

High-level conversation history operations on top of ChatHistoryCRUD.
Each call opens its own session, so one adapter serves every request.

Dependencies: sqlalchemy, langchain_core.messages, rag_backend.boundary.db.CRUD
System role: Chat history business logic adapter
"""

import logging
from collections.abc import Sequence

from langchain_core.messages import BaseMessage
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rag_backend.boundary.db.CRUD.chat_history_crud import (
    AI_ROLE,
    USER_ROLE,
    chat_history_crud,
    to_langchain_message,
)
from rag_backend.boundary.db.models.chat_message_model import ChatMessageModel
from rag_backend.core.exceptions import ConfigurationError, UpstreamFailureError

logger = logging.getLogger(__name__)


class ChatHistoryAdapter:
    """
    Owner-scoped conversation history.

    With no database configured the adapter is disabled: chat runs without
    history, and the history endpoints raise ConfigurationError.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None,
        max_messages: int = 20,
    ) -> None:
        """
        Args:
            session_factory: Sessions for history reads and writes
            max_messages: Recent messages returned by get_recent()
        """
        self._session_factory = session_factory
        self._max_messages = max_messages

    @property
    def enabled(self) -> bool:
        return self._session_factory is not None

    def _factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            raise ConfigurationError("chat_history", "Chat history has no database configured")
        return self._session_factory

    async def get_recent(self, owner_id: str) -> list[BaseMessage]:
        """
        Most recent messages as LangChain messages, oldest first.

        Raises:
            UpstreamFailureError: If the query fails
        """
        if not self.enabled or self._max_messages == 0:
            return []
        try:
            async with self._factory()() as session:
                rows = await chat_history_crud.get_by_owner(
                    session, owner_id, limit=self._max_messages
                )
        except SQLAlchemyError as e:
            raise UpstreamFailureError("load_history", f"Failed to load chat history: {e}") from e
        return [to_langchain_message(row) for row in rows]

    async def list_messages(self, owner_id: str) -> Sequence[ChatMessageModel]:
        """Full conversation for display, oldest first."""
        try:
            async with self._factory()() as session:
                return await chat_history_crud.get_by_owner(session, owner_id)
        except SQLAlchemyError as e:
            raise UpstreamFailureError("load_history", f"Failed to load chat history: {e}") from e

    async def add_exchange(self, owner_id: str, question: str, answer: str) -> None:
        """
        Store a question and its answer as one unit.

        Raises:
            UpstreamFailureError: If the insert fails
        """
        if not self.enabled:
            return
        try:
            async with self._factory()() as session:
                await chat_history_crud.add_messages(
                    session, owner_id, [(USER_ROLE, question), (AI_ROLE, answer)]
                )
                await session.commit()
        except SQLAlchemyError as e:
            raise UpstreamFailureError("save_history", f"Failed to save chat history: {e}") from e
        logger.debug(f"{__name__}:add_exchange - Stored exchange for owner {owner_id}")

    async def clear(self, owner_id: str) -> int:
        """
        Delete an owner's conversation.

        Returns:
            int: Messages removed
        """
        try:
            async with self._factory()() as session:
                removed = await chat_history_crud.clear(session, owner_id)
                await session.commit()
        except SQLAlchemyError as e:
            raise UpstreamFailureError("clear_history", f"Failed to clear chat history: {e}") from e
        logger.info(f"{__name__}:clear - Cleared {removed} messages for owner {owner_id}")
        return removed
