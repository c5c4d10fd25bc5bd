"""
Health check API endpoints.

Routes: GET /health, GET /health/db

Dependencies: rag_backend.boundary.db
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from rag_backend.api.deps import get_container
from rag_backend.api.deps.dependencies import ServiceContainer
from rag_backend.boundary.db.connection import ping

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/db", response_model=HealthResponse)
async def health_check_db(
    container: ServiceContainer = Depends(get_container),
) -> HealthResponse:
    """
    Database health check.

    Raises:
        HTTPException(503): Database not configured or unreachable
    """
    if container.session_factory is None:
        raise HTTPException(status_code=503, detail="Database is not configured")
    try:
        async with container.session_factory() as session:
            await ping(session)
    except Exception as e:
        logger.error(f"{__name__}:health_check_db - {type(e).__name__}: {e}")
        raise HTTPException(status_code=503, detail="Database connection failed")
    return HealthResponse(status="healthy", message="Database connection OK")
