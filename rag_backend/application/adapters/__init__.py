"""Adapters between application services and persistence."""

from rag_backend.application.adapters.chat_history_adapter import ChatHistoryAdapter

__all__ = ["ChatHistoryAdapter"]
