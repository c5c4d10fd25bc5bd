"""
Chat domain models and schemas.

Request/response schemas for question answering.

Dependencies: pydantic
System role: Chat API contracts
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from rag_backend.models.chunk import ChunkSource


class ChatRequest(BaseModel):
    """Request schema for a question against an owner's knowledge base."""

    question: str = Field(min_length=1, description="User question")
    owner_id: str = Field(min_length=1, description="Knowledge base owner scope")


class ChatResponse(BaseModel):
    """Response schema for a non-streamed answer."""

    answer: str
    sources: list[ChunkSource] = Field(default_factory=list)


class ChatMessageResponse(BaseModel):
    """One stored conversation message."""

    model_config = ConfigDict(from_attributes=True)

    role: Literal["user", "ai"]
    content: str
    created_at: datetime


class ChatHistoryResponse(BaseModel):
    """An owner's conversation, oldest message first."""

    messages: list[ChatMessageResponse] = Field(default_factory=list)
    total: int = 0


class ClearHistoryRequest(BaseModel):
    owner_id: str = Field(min_length=1, description="Conversation owner")


class ClearHistoryResponse(BaseModel):
    success: bool = True
    cleared: int
    message: str = "Chat history cleared."
