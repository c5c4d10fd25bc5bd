"""Document routes."""

from .documents_router import router

__all__ = ["router"]
