"""Answer generation agent and its prompt."""

from rag_backend.core.agent.rag_agent import RAGAgent
from rag_backend.core.agent.rag_prompt import get_rag_prompt

__all__ = ["RAGAgent", "get_rag_prompt"]
