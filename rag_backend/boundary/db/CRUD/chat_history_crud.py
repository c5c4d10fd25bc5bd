"""
Chat history CRUD operations.

Owner-scoped conversation messages stored through SQLAlchemy, returned as
LangChain messages for prompt assembly.

Dependencies: sqlalchemy, langchain_core.messages
System role: Chat message persistence
"""

from typing import Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rag_backend.boundary.db.CRUD.base_crud import BaseCRUD
from rag_backend.boundary.db.models.chat_message_model import ChatMessageModel

USER_ROLE = "user"
AI_ROLE = "ai"


def to_langchain_message(row: ChatMessageModel) -> BaseMessage:
    if row.role == USER_ROLE:
        return HumanMessage(content=row.content)
    return AIMessage(content=row.content)


class ChatHistoryCRUD(BaseCRUD[ChatMessageModel]):
    """
    CRUD operations for chat message history.

    All operations are owner-scoped: messages belong to one owner's
    conversation.
    """

    def __init__(self) -> None:
        super().__init__(ChatMessageModel)

    async def _next_sequence(self, session: AsyncSession, owner_id: str) -> int:
        stmt = select(func.max(ChatMessageModel.sequence)).where(
            ChatMessageModel.owner_id == owner_id
        )
        result = await session.execute(stmt)
        current = result.scalar_one_or_none()
        return 0 if current is None else current + 1

    async def add_messages(
        self,
        session: AsyncSession,
        owner_id: str,
        messages: Sequence[tuple[str, str]],
    ) -> list[ChatMessageModel]:
        """
        Append messages to an owner's conversation in order.

        Args:
            session: Async database session
            owner_id: Conversation owner
            messages: (role, content) pairs; role is "user" or "ai"

        Raises:
            ValueError: If a role is not "user" or "ai"
        """
        for role, _ in messages:
            if role not in (USER_ROLE, AI_ROLE):
                raise ValueError(f"Invalid role: {role}. Must be 'user' or 'ai'")

        start = await self._next_sequence(session, owner_id)
        return await self.create_many(
            session,
            [
                {"owner_id": owner_id, "sequence": start + offset, "role": role, "content": content}
                for offset, (role, content) in enumerate(messages)
            ],
        )

    async def get_by_owner(
        self,
        session: AsyncSession,
        owner_id: str,
        limit: int | None = None,
    ) -> list[ChatMessageModel]:
        """
        Retrieve an owner's messages, oldest first.

        Args:
            limit: Keep only the most recent `limit` messages

        Returns:
            Messages in conversation order
        """
        stmt = (
            select(ChatMessageModel)
            .where(ChatMessageModel.owner_id == owner_id)
            .order_by(ChatMessageModel.sequence.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return list(reversed(result.scalars().all()))

    async def clear(self, session: AsyncSession, owner_id: str) -> int:
        """Delete an owner's conversation; returns the number of messages removed."""
        stmt = delete(ChatMessageModel).where(ChatMessageModel.owner_id == owner_id)
        result = await session.execute(stmt)
        return result.rowcount or 0


chat_history_crud = ChatHistoryCRUD()
