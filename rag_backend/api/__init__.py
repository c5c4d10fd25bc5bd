"""
API routes module.

FastAPI routers for all HTTP endpoints, aggregated under one router that
the application mounts at /api/v1.
"""

from fastapi import APIRouter

from .routers import (
    chat_router,
    documents_router,
    health_router,
)

api_router = APIRouter()

api_router.include_router(health_router)
api_router.include_router(documents_router)
api_router.include_router(chat_router)

__all__ = ["api_router"]
