"""
Chat message ORM model.

One row per conversation turn, scoped to the knowledge base owner.

Dependencies: sqlalchemy, rag_backend.boundary.db.base
System role: Conversation history persistence
"""

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from rag_backend.boundary.db.base import Base, TimestampMixin, UUIDMixin


class ChatMessageModel(Base, UUIDMixin, TimestampMixin):
    """
    Persisted conversation message.

    Attributes:
        owner_id: Conversation owner
        sequence: Position in the owner's conversation, ascending
        role: "user" or "ai"
        content: Message text
    """

    __tablename__ = "chat_messages"
    __table_args__ = (Index("ix_chat_messages_owner_sequence", "owner_id", "sequence"),)

    owner_id: Mapped[str] = mapped_column(String(255), nullable=False)
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
